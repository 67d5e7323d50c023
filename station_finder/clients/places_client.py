"""
Google Places Web Service client (nearby search, text search, place details).
"""
from typing import Any, Dict, List, Optional

from station_finder.clients.http_client import ApiResponseError, JsonHttpClient
from station_finder.config import GOOGLE_PLACES_API_KEY, PLACES_BASE_URL

OK_STATUSES = ("OK", "ZERO_RESULTS")
PHONE_FIELDS = "formatted_phone_number,international_phone_number"


class PlacesClient(JsonHttpClient):
    name = "places"

    def __init__(self, api_key: Optional[str] = GOOGLE_PLACES_API_KEY, base_url: str = PLACES_BASE_URL, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    async def _call(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        params = {**params, "key": self.api_key or ""}
        data = await self.get_json(f"{self.base_url}/{endpoint}/json", params=params)
        status = data.get("status")
        if status not in OK_STATUSES:
            message = data.get("error_message", "no details")
            raise ApiResponseError(f"Places {endpoint} returned {status}: {message}")
        return data

    async def nearby_search(
        self, lat: float, lng: float, radius_m: int, place_type: str = "fire_station"
    ) -> List[Dict[str, Any]]:
        data = await self._call("nearbysearch", {
            "location": f"{lat},{lng}",
            "radius": int(radius_m),
            "type": place_type,
        })
        return data.get("results") or []

    async def text_search(
        self,
        query: str,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        radius_m: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"query": query}
        if lat is not None and lng is not None:
            params["location"] = f"{lat},{lng}"
        if radius_m is not None:
            params["radius"] = int(radius_m)
        data = await self._call("textsearch", params)
        return data.get("results") or []

    async def place_details(self, place_id: str, fields: str = PHONE_FIELDS) -> Dict[str, Any]:
        data = await self._call("details", {"place_id": place_id, "fields": fields})
        return data.get("result") or {}

    async def fetch_phone_number(self, place_id: str) -> Optional[str]:
        """Phone number of a place, preferring the local format."""
        result = await self.place_details(place_id)
        return result.get("formatted_phone_number") or result.get("international_phone_number") or None
