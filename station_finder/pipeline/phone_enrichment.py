import asyncio
from dataclasses import replace
from typing import Any, Dict, List, Optional

from loguru import logger
from rapidfuzz import fuzz

from station_finder.clients import PlacesClient
from station_finder.config import PHONE_LOOKUP_DELAY_SECONDS, PHONE_MATCH_THRESHOLD
from station_finder.locale import LocaleTables, default_locale
from station_finder.models import RankedStation


def best_name_match(
    name: str,
    results: List[Dict[str, Any]],
    threshold: float = PHONE_MATCH_THRESHOLD,
) -> Optional[Dict[str, Any]]:
    """
    Pick the text search result whose name is closest to the station name.

    Args:
        name (str): Station name we searched for.
        results (List[Dict]): Raw Places results.
        threshold (float): Minimum fuzz.token_set_ratio score to accept a result.

    Returns:
        The best result at or above the threshold, else None.
    """
    best, best_score = None, -1.0
    target = name.lower()
    for result in results:
        if not result.get("place_id"):
            continue
        score = fuzz.token_set_ratio(target, str(result.get("name") or "").lower())
        if score > best_score:
            best, best_score = result, score
    if best is None or best_score < threshold:
        return None
    return best


async def _lookup_phone(station: RankedStation, places_client: PlacesClient, locale: LocaleTables) -> Optional[str]:
    phone = None

    if station.place_id:
        try:
            phone = await places_client.fetch_phone_number(station.place_id)
        except Exception as e:
            logger.debug(f"⚠️ Details lookup failed for '{station.name}': {e}")

    if not phone and station.name:
        try:
            results = await places_client.text_search(f"{station.name} {locale.country_name}")
            match = best_name_match(station.name, results)
            if match:
                phone = await places_client.fetch_phone_number(match["place_id"])
            else:
                logger.debug(f"🔍 No confident name match for '{station.name}' among {len(results)} results")
        except Exception as e:
            logger.debug(f"⚠️ Phone search failed for '{station.name}': {e}")

    return phone or None


async def enrich_phones(
    stations: List[RankedStation],
    places_client: PlacesClient,
    locale: Optional[LocaleTables] = None,
) -> List[RankedStation]:
    """
    Attach a contact number to stations that lack one.

    Stations are handled one at a time with a short pause after each lookup,
    to stay under the Places rate limits. Stations that already carry a phone
    are returned untouched without any request.

    Returns:
        List[RankedStation]: Same order as the input; failed lookups leave phone None.
    """
    locale = locale or default_locale()
    enriched = []
    for station in stations:
        if station.phone:
            enriched.append(station)
            continue

        phone = await _lookup_phone(station, places_client, locale)
        enriched.append(replace(station, phone=phone))
        await asyncio.sleep(PHONE_LOOKUP_DELAY_SECONDS)

    found = sum(1 for s in enriched if s.phone)
    logger.debug(f"📞 {found}/{len(enriched)} stations have a phone number")
    return enriched
