from typing import Any, Dict, List, Optional

from station_finder.clients import PlacesClient
from station_finder.locale import LocaleTables
from station_finder.providers.base import QueryVariant, RawHit, StationProvider


class PlacesSearchProvider(StationProvider):
    """Radius-bounded nearby search plus supplementary text searches on the Places API."""
    name = "places"

    def __init__(self, client: PlacesClient, locale: Optional[LocaleTables] = None):
        super().__init__(locale)
        self.client = client

    def query_variants(
        self, origin_lat: float, origin_lng: float, search_radius_km: float, region_name: Optional[str]
    ) -> List[QueryVariant]:
        radius_m = int(search_radius_km * 1000)
        country = self.locale.country_name

        variants = [
            QueryVariant(
                label="Standard fire station search",
                run=lambda: self.client.nearby_search(origin_lat, origin_lng, radius_m, "fire_station"),
            )
        ]

        queries = [f"{brand} near {origin_lat},{origin_lng}" for brand in self.locale.service_brands]
        queries.append(f"fire service {country}")
        if region_name:
            queries.append(f"fire station {region_name} {country}")

        for query in queries:
            variants.append(QueryVariant(
                label=f"Places text search: {query}",
                run=lambda q=query: self.client.text_search(q, origin_lat, origin_lng, radius_m),
            ))
        return variants

    def parse_hit(self, raw: Dict[str, Any]) -> RawHit:
        location = (raw.get("geometry") or {}).get("location") or {}
        photos = raw.get("photos") or []
        return RawHit(
            name=raw.get("name"),
            address=raw.get("formatted_address") or raw.get("vicinity") or "",
            latitude=location.get("lat"),
            longitude=location.get("lng"),
            place_id=raw.get("place_id"),
            types=raw.get("types") or [],
            phone=raw.get("formatted_phone_number") or raw.get("international_phone_number"),
            rating=raw.get("rating"),
            is_open=(raw.get("opening_hours") or {}).get("open_now"),
            photo_reference=photos[0].get("photo_reference") if photos else None,
        )
