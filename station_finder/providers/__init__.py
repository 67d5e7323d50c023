"""Candidate providers: live place searches and the service-area fallback."""
from station_finder.providers.base import StationProvider
from station_finder.providers.keyword_provider import KeywordSearchProvider
from station_finder.providers.places_provider import PlacesSearchProvider
from station_finder.providers.service_area import get_service_area_stations

__all__ = [
    "StationProvider",
    "KeywordSearchProvider",
    "PlacesSearchProvider",
    "get_service_area_stations",
]
