"""Clients for the external place search and routing APIs."""
from dataclasses import dataclass

from station_finder.clients.http_client import ApiResponseError, JsonHttpClient
from station_finder.clients.keyword_search_client import KeywordSearchClient
from station_finder.clients.places_client import PlacesClient
from station_finder.clients.routing_client import RoutingMatrixClient


@dataclass
class SearchClients:
    """The set of clients one search needs, injected into providers and pipeline stages."""
    places: PlacesClient
    keyword_search: KeywordSearchClient
    routing: RoutingMatrixClient

    @classmethod
    def from_config(cls) -> "SearchClients":
        return cls(
            places=PlacesClient(),
            keyword_search=KeywordSearchClient(),
            routing=RoutingMatrixClient(),
        )

    async def close(self):
        for client in (self.places, self.keyword_search, self.routing):
            await client.close()


__all__ = [
    "ApiResponseError",
    "JsonHttpClient",
    "KeywordSearchClient",
    "PlacesClient",
    "RoutingMatrixClient",
    "SearchClients",
]
