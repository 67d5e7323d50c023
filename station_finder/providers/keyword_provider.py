from typing import Any, Dict, List, Optional

from station_finder.clients import KeywordSearchClient
from station_finder.locale import LocaleTables
from station_finder.providers.base import QueryVariant, RawHit, StationProvider


def _open_flag(open_state: Optional[str]) -> Optional[bool]:
    if not open_state:
        return None
    state = open_state.lower()
    if state.startswith("open"):
        return True
    if state.startswith("closed"):
        return False
    return None


class KeywordSearchProvider(StationProvider):
    """Text queries (generic, brand and region variants) against the keyword maps search."""
    name = "keyword_search"

    def __init__(self, client: KeywordSearchClient, locale: Optional[LocaleTables] = None):
        super().__init__(locale)
        self.client = client

    def build_queries(self, region_name: Optional[str]) -> List[str]:
        country = self.locale.country_name
        queries = []
        # Region variants go first so they win the within-provider place id dedupe
        if region_name:
            queries.append(f"fire station {region_name} {country}")
            queries.extend(f"{brand} {region_name}" for brand in self.locale.service_brands)
        queries.append(f"fire station in {country}")
        queries.extend(f"{brand} fire station" for brand in self.locale.service_brands)
        return queries

    def query_variants(
        self, origin_lat: float, origin_lng: float, search_radius_km: float, region_name: Optional[str]
    ) -> List[QueryVariant]:
        def make(query: str) -> QueryVariant:
            return QueryVariant(
                label=f"Keyword search: {query}",
                run=lambda: self.client.maps_search(query, origin_lat, origin_lng, search_radius_km),
            )

        return [make(q) for q in self.build_queries(region_name)]

    def parse_hit(self, raw: Dict[str, Any]) -> RawHit:
        gps = raw.get("gps_coordinates") or {}
        types = list(raw.get("types") or [])
        if raw.get("type"):
            types.append(raw["type"])
        return RawHit(
            name=raw.get("title"),
            address=raw.get("address") or "",
            latitude=gps.get("latitude"),
            longitude=gps.get("longitude"),
            place_id=raw.get("place_id"),
            types=types,
            phone=raw.get("phone"),
            rating=raw.get("rating"),
            is_open=_open_flag(raw.get("open_state")),
            website=raw.get("website"),
            photo_reference=raw.get("thumbnail"),
        )
