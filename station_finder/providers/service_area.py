"""
Known serving stations for zones where live search comes back thin.
"""
import re
from typing import List, Optional

from loguru import logger

from station_finder.geo import haversine_km
from station_finder.locale import LocaleTables, default_locale
from station_finder.models import Candidate, Coordinates
from station_finder.providers.classification import has_excluded_words

SERVICE_AREA_STRATEGY = "Service area fallback"


def get_service_area_stations(
    origin_lat: float,
    origin_lng: float,
    existing_candidates: List[Candidate],
    locale: Optional[LocaleTables] = None,
) -> List[Candidate]:
    """
    Serving stations of every service area containing the origin.

    A station is skipped when a candidate with the same name already exists
    (live results win) or its name contains an excluded word.

    Returns:
        List[Candidate]: Candidates flagged `is_service_area_station`.
    """
    locale = locale or default_locale()
    taken = {c.name for c in existing_candidates}
    stations: List[Candidate] = []

    for area in locale.service_areas:
        if not area.bounds.contains(origin_lat, origin_lng):
            continue
        for serving in area.serving_stations:
            if serving.name in taken or has_excluded_words(serving.name, locale=locale):
                continue
            taken.add(serving.name)
            slug = re.sub(r"\s+", "_", serving.name)
            stations.append(Candidate(
                id=f"service_{slug}",
                name=serving.name,
                address=serving.service_note,
                coordinates=Coordinates(latitude=serving.latitude, longitude=serving.longitude),
                phone=serving.phone,
                straight_line_distance_km=haversine_km(origin_lat, origin_lng, serving.latitude, serving.longitude),
                source_strategy=SERVICE_AREA_STRATEGY,
                is_service_area_station=True,
                service_note=serving.service_note,
            ))
            logger.debug(f"📍 Added service area station '{serving.name}' for {area.name}")

    return stations
