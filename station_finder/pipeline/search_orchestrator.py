# station_finder/pipeline/search_orchestrator.py

import math
import time
from typing import List, Optional

from loguru import logger

from station_finder.clients import SearchClients
from station_finder.config import DEFAULT_RADIUS_METERS, DEFAULT_RESULT_LIMIT, MAX_SEARCH_RADIUS_KM
from station_finder.geo import is_valid_coordinate
from station_finder.locale import LocaleTables, default_locale
from station_finder.models import Candidate, RankedStation
from station_finder.pipeline.deduplicator import dedupe
from station_finder.pipeline.phone_enrichment import enrich_phones
from station_finder.pipeline.region_filter import restrict_to_local_metro
from station_finder.pipeline.route_augmenter import augment_with_routes
from station_finder.pipeline.scoring import filter_by_radius, score_stations
from station_finder.providers import KeywordSearchProvider, PlacesSearchProvider, get_service_area_stations


def _search_radius_km(radius_meters) -> float:
    """Requested radius in km, capped at MAX_SEARCH_RADIUS_KM. Missing or non-positive values use the default."""
    meters = float(radius_meters) if radius_meters is not None else DEFAULT_RADIUS_METERS
    if not math.isfinite(meters) or meters <= 0:
        meters = DEFAULT_RADIUS_METERS
    return min(meters, MAX_SEARCH_RADIUS_KM * 1000) / 1000


async def _collect_candidates(
    clients: SearchClients,
    lat: float,
    lng: float,
    radius_km: float,
    region_name: Optional[str],
    locale: LocaleTables,
) -> List[Candidate]:
    providers = [
        KeywordSearchProvider(clients.keyword_search, locale),
        PlacesSearchProvider(clients.places, locale),
    ]

    candidates: List[Candidate] = []
    # One provider at a time: upstream rate limits matter more than latency here
    for provider in providers:
        result = await provider.search(lat, lng, radius_km, region_name)
        for error in result.errors:
            logger.debug(f"⚠️ [{result.provider}] ignored failure: {error}")
        logger.debug(f"📦 [{result.provider}] {len(result.candidates)} candidates")
        candidates.extend(result.candidates)
    return candidates


async def _run_pipeline(
    clients: SearchClients,
    lat: float,
    lng: float,
    radius_km: float,
    limit: int,
    region_name: Optional[str],
    locale: LocaleTables,
) -> List[RankedStation]:
    candidates = await _collect_candidates(clients, lat, lng, radius_km, region_name, locale)
    candidates = restrict_to_local_metro(lat, lng, candidates, locale)

    # Appended after live results so a live station of the same name always wins
    candidates.extend(get_service_area_stations(lat, lng, candidates, locale))

    unique = dedupe(candidates)
    routed = await augment_with_routes(lat, lng, unique, clients.routing)
    nearby = filter_by_radius(routed, MAX_SEARCH_RADIUS_KM)
    scored = score_stations(nearby)
    with_phones = await enrich_phones(scored, clients.places, locale)

    with_phones.sort(key=lambda s: s.proximity_score)
    return with_phones[:limit]


async def fetch_nearby_fire_stations(
    latitude: float,
    longitude: float,
    radius_meters: float = DEFAULT_RADIUS_METERS,
    limit: int = DEFAULT_RESULT_LIMIT,
    region_name: Optional[str] = None,
    clients: Optional[SearchClients] = None,
    locale: Optional[LocaleTables] = None,
) -> List[RankedStation]:
    """
    Find, rank and return the fire stations closest to a location.

    Args:
        latitude (float): Search origin latitude.
        longitude (float): Search origin longitude.
        radius_meters (float): Requested search radius, clamped to 20 km. Non-positive
            values fall back to the default.
        limit (int): Maximum number of stations returned.
        region_name (Optional[str]): Region to favour in queries and filtering.
        clients (Optional[SearchClients]): Injected API clients. Built from config
            (and closed afterwards) when omitted.
        locale (Optional[LocaleTables]): Keyword tables; packaged defaults when omitted.

    Returns:
        List[RankedStation]: Stations sorted by ascending proximity score. Empty when
        nothing was found or anything went wrong; this function never raises.
    """
    if not is_valid_coordinate(latitude, longitude):
        logger.error(f"❌ Invalid coordinates provided: ({latitude}, {longitude})")
        return []

    start = time.perf_counter()
    owns_clients = clients is None
    try:
        max_results = int(limit)
        if max_results < 1:
            return []
        lat, lng = float(latitude), float(longitude)
        radius_km = _search_radius_km(radius_meters)
        locale = locale or default_locale()
        if owns_clients:
            clients = SearchClients.from_config()

        stations = await _run_pipeline(clients, lat, lng, radius_km, max_results, region_name, locale)

        duration = time.perf_counter() - start
        logger.info(f"🚒 Found {len(stations)} fire stations near ({lat:.4f}, {lng:.4f}) in {duration:.2f}s")
        if stations:
            closest = stations[0]
            logger.info(f"Closest station: {closest.name} ({closest.route_distance_text} away)")
        return stations
    except Exception as e:
        logger.error(f"❌ Error fetching fire stations near ({latitude}, {longitude}): {e}")
        return []
    finally:
        if owns_clients and clients is not None:
            try:
                await clients.close()
            except Exception as e:
                logger.debug(f"⚠️ Failed to close clients: {e}")


async def get_closest_fire_station(
    latitude: float,
    longitude: float,
    clients: Optional[SearchClients] = None,
    locale: Optional[LocaleTables] = None,
) -> Optional[RankedStation]:
    """The single best-ranked station near a location, or None."""
    stations = await fetch_nearby_fire_stations(
        latitude, longitude, DEFAULT_RADIUS_METERS, 1, None, clients=clients, locale=locale
    )
    return stations[0] if stations else None
