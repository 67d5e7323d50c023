"""
Keyword maps search client backed by SerpApi's Google Maps engine.
"""
from typing import Any, Dict, List, Optional

from station_finder.clients.http_client import ApiResponseError, JsonHttpClient
from station_finder.config import SERPAPI_API_KEY, SERPAPI_URL


def zoom_for_radius(radius_km: float) -> int:
    """Map zoom level whose viewport roughly spans the search radius."""
    if radius_km <= 2:
        return 15
    if radius_km <= 5:
        return 14
    if radius_km <= 10:
        return 13
    return 12


class KeywordSearchClient(JsonHttpClient):
    name = "keyword_search"

    def __init__(self, api_key: Optional[str] = SERPAPI_API_KEY, base_url: str = SERPAPI_URL, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = base_url

    async def maps_search(self, query: str, lat: float, lng: float, radius_km: float) -> List[Dict[str, Any]]:
        """
        Run one text query against the maps engine around a point.

        Returns:
            The raw `local_results` list (may be empty).
        """
        data = await self.get_json(self.base_url, params={
            "engine": "google_maps",
            "type": "search",
            "q": query,
            "ll": f"@{lat},{lng},{zoom_for_radius(radius_km)}z",
            "api_key": self.api_key or "",
        })
        if data.get("error"):
            # "hasn't returned any results" is an empty answer, not a failure
            if "any results" in str(data["error"]):
                return []
            raise ApiResponseError(f"SerpApi error: {data['error']}")
        return data.get("local_results") or []
