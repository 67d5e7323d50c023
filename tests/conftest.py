import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture(autouse=True)
def no_upstream_delays(monkeypatch):
    """The fixed pauses between upstream calls only slow tests down."""
    monkeypatch.setattr("station_finder.providers.base.QUERY_DELAY_SECONDS", 0)
    monkeypatch.setattr("station_finder.pipeline.route_augmenter.BATCH_DELAY_SECONDS", 0)
    monkeypatch.setattr("station_finder.pipeline.phone_enrichment.PHONE_LOOKUP_DELAY_SECONDS", 0)


@pytest.fixture
def mock_clients():
    """
    SearchClients stand-in whose API methods are AsyncMocks returning empty answers.
    Tests override return_value / side_effect per method.
    """
    clients = MagicMock()

    clients.places.nearby_search = AsyncMock(return_value=[])
    clients.places.text_search = AsyncMock(return_value=[])
    clients.places.fetch_phone_number = AsyncMock(return_value=None)

    clients.keyword_search.maps_search = AsyncMock(return_value=[])

    clients.routing.has_credentials = False
    clients.routing.driving_matrix = AsyncMock(return_value={"code": "Ok", "distances": [[]], "durations": [[]]})

    clients.close = AsyncMock()
    return clients


@pytest.fixture
def places_hit():
    def build(name, address, lat, lng, place_id=None, types=("fire_station", "point_of_interest"), **extra):
        hit = {
            "name": name,
            "formatted_address": address,
            "geometry": {"location": {"lat": lat, "lng": lng}},
            "types": list(types),
        }
        if place_id:
            hit["place_id"] = place_id
        hit.update(extra)
        return hit
    return build


@pytest.fixture
def keyword_hit():
    def build(title, address, lat, lng, place_id=None, type_="Fire station", **extra):
        hit = {
            "title": title,
            "address": address,
            "gps_coordinates": {"latitude": lat, "longitude": lng},
            "type": type_,
        }
        if place_id:
            hit["place_id"] = place_id
        hit.update(extra)
        return hit
    return build
