"""
Keyword heuristics that keep candidates inside the target country and region.

No boundary data is involved: a candidate matches when any keyword appears in
its lowercased name + address, so results at locality edges are approximate.
"""
from typing import List, Optional

from loguru import logger

from station_finder.locale import LocaleTables, default_locale
from station_finder.models import Candidate


def _search_text(candidate: Candidate) -> str:
    return f"{candidate.name or ''} {candidate.address or ''}".lower()


def is_in_country(candidate: Candidate, locale: Optional[LocaleTables] = None) -> bool:
    locale = locale or default_locale()
    text = _search_text(candidate)
    return any(keyword in text for keyword in locale.country_keywords)


def is_in_region(candidate: Candidate, region_name: Optional[str], locale: Optional[LocaleTables] = None) -> bool:
    """Region keyword test. Unknown or absent region names never filter."""
    locale = locale or default_locale()
    keywords = locale.keywords_for(region_name)
    if not keywords:
        return True
    text = _search_text(candidate)
    return any(keyword in text for keyword in keywords)


def is_in_capital_metro(lat: float, lng: float, locale: Optional[LocaleTables] = None) -> bool:
    locale = locale or default_locale()
    return locale.capital_bounds.contains(lat, lng)


def restrict_to_local_metro(
    origin_lat: float,
    origin_lng: float,
    candidates: List[Candidate],
    locale: Optional[LocaleTables] = None,
) -> List[Candidate]:
    """
    When searching from inside the capital metro box, keep only candidates that
    mention the capital or the port city. Elsewhere candidates pass unchanged.
    """
    locale = locale or default_locale()
    if not is_in_capital_metro(origin_lat, origin_lng, locale):
        return candidates

    keywords = (
        locale.region_keywords.get(locale.capital_region, ())
        + locale.region_keywords.get(locale.port_region, ())
    )
    kept = [c for c in candidates if any(k in _search_text(c) for k in keywords)]
    if len(kept) != len(candidates):
        logger.debug(f"🏙️ Capital metro origin: kept {len(kept)}/{len(candidates)} candidates")
    return kept


def extract_region_name(location_name: str, address: str = "", locale: Optional[LocaleTables] = None) -> Optional[str]:
    """
    Infer the region a picked location belongs to.

    Args:
        location_name: Display name of the location the user chose.
        address: Its formatted address.

    Returns:
        The first region whose keywords occur in the text, or None.
    """
    locale = locale or default_locale()
    text = f"{location_name or ''} {address or ''}".lower()
    for region, keywords in locale.region_keywords.items():
        if any(keyword in text for keyword in keywords):
            return region
    return None
