"""
Driving distance matrix client for the Mapbox Directions Matrix API.
"""
from typing import Any, Dict, List, Optional, Tuple

from station_finder.clients.http_client import JsonHttpClient
from station_finder.config import MAPBOX_ACCESS_TOKEN, MAPBOX_MATRIX_URL

MAX_COORDINATES = 25


class RoutingMatrixClient(JsonHttpClient):
    name = "routing_matrix"

    def __init__(self, access_token: Optional[str] = MAPBOX_ACCESS_TOKEN, base_url: str = MAPBOX_MATRIX_URL, **kwargs):
        super().__init__(**kwargs)
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")

    @property
    def has_credentials(self) -> bool:
        return bool(self.access_token)

    async def driving_matrix(
        self, origin: Tuple[float, float], destinations: List[Tuple[float, float]]
    ) -> Dict[str, Any]:
        """
        Request distances/durations from one origin to up to 24 destinations.

        Args:
            origin: (lat, lng) of the search origin.
            destinations: (lat, lng) pairs.

        Returns:
            The decoded body, including non-Ok answers; callers inspect `code`.
            `distances[0][i]` (meters) and `durations[0][i]` (seconds) refer to destinations[i].
        """
        if len(destinations) + 1 > MAX_COORDINATES:
            raise ValueError(f"At most {MAX_COORDINATES - 1} destinations per matrix request")

        # Mapbox wants lng,lat
        coords = ";".join(f"{lng},{lat}" for lat, lng in [origin, *destinations])
        return await self.get_json(
            f"{self.base_url}/{coords}",
            params={
                "sources": "0",
                "destinations": ";".join(str(i) for i in range(1, len(destinations) + 1)),
                "annotations": "distance,duration",
                "access_token": self.access_token or "",
            },
            allow_error_status=True,
        )
