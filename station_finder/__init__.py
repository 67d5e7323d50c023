"""Fire station discovery and ranking."""
from station_finder.models import Candidate, RankedStation
from station_finder.pipeline.region_filter import extract_region_name
from station_finder.pipeline.search_orchestrator import fetch_nearby_fire_stations, get_closest_fire_station

__all__ = [
    "Candidate",
    "RankedStation",
    "extract_region_name",
    "fetch_nearby_fire_stations",
    "get_closest_fire_station",
]
