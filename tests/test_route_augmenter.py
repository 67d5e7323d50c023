import pytest
from unittest.mock import AsyncMock, MagicMock, call, patch

from station_finder.config import BATCH_DELAY_SECONDS
from station_finder.models import Candidate, Coordinates
from station_finder.pipeline.route_augmenter import augment_with_routes

ORIGIN = (5.6037, -0.1870)


def _candidates(n):
    return [
        Candidate(
            name=f"Station {i}",
            coordinates=Coordinates(5.60 + i * 0.001, -0.18),
            place_id=f"p{i}",
            straight_line_distance_km=1.0 + i,
        )
        for i in range(n)
    ]


def _matrix_client(**kwargs):
    client = MagicMock()
    client.has_credentials = True
    client.driving_matrix = AsyncMock(**kwargs)
    return client


@pytest.mark.asyncio
async def test_converts_meters_and_seconds():
    client = _matrix_client(return_value={
        "code": "Ok",
        "distances": [[4500.0, 12000.0]],
        "durations": [[600.0, 1500.0]],
    })

    candidates = _candidates(2)
    stations = await augment_with_routes(*ORIGIN, candidates, client)

    assert [s.route_distance_km for s in stations] == [4.5, 12.0]
    assert [s.travel_time_minutes for s in stations] == [10.0, 25.0]
    assert stations[0].route_distance_text == "4.5 km"
    assert stations[0].travel_time_text == "10 min"

    origin, destinations = client.driving_matrix.await_args.args
    assert origin == ORIGIN
    assert destinations == [(c.coordinates.latitude, c.coordinates.longitude) for c in candidates]


@pytest.mark.asyncio
async def test_batches_of_24_in_order():
    def answer(origin, destinations):
        n = len(destinations)
        return {"code": "Ok", "distances": [[1000.0] * n], "durations": [[60.0] * n]}

    client = _matrix_client(side_effect=answer)
    candidates = _candidates(30)

    stations = await augment_with_routes(*ORIGIN, candidates, client)

    sizes = [len(call.args[1]) for call in client.driving_matrix.await_args_list]
    assert sizes == [24, 6]
    assert [s.place_id for s in stations] == [c.place_id for c in candidates]
    assert all(s.route_distance_km == 1.0 for s in stations)


@pytest.mark.asyncio
async def test_non_ok_code_falls_back_for_whole_batch():
    client = _matrix_client(return_value={"code": "InvalidInput", "message": "Coordinate is invalid"})

    stations = await augment_with_routes(*ORIGIN, _candidates(3), client)

    for s in stations:
        assert s.travel_time_text == "Route unavailable"
        assert s.travel_time_minutes is None
        assert s.route_distance_km == s.straight_line_distance_km


@pytest.mark.asyncio
async def test_null_cell_falls_back_for_that_station_only():
    client = _matrix_client(return_value={
        "code": "Ok",
        "distances": [[2000.0, None]],
        "durations": [[300.0, None]],
    })

    first, second = await augment_with_routes(*ORIGIN, _candidates(2), client)

    assert first.route_distance_km == 2.0
    assert first.travel_time_minutes == 5.0
    assert second.travel_time_text == "Route unavailable"
    assert second.route_distance_km == second.straight_line_distance_km
    assert second.route_distance_text == "2.0 km"


@pytest.mark.asyncio
async def test_network_error_in_one_batch_keeps_the_other():
    ok = {"code": "Ok", "distances": [[500.0] * 24], "durations": [[60.0] * 24]}
    client = _matrix_client(side_effect=[ok, ConnectionError("reset by peer")])

    stations = await augment_with_routes(*ORIGIN, _candidates(26), client)

    assert all(s.route_distance_km == 0.5 for s in stations[:24])
    assert all(s.travel_time_text == "Route unavailable" for s in stations[24:])


@pytest.mark.asyncio
async def test_missing_credentials_skips_calls():
    client = _matrix_client()
    client.has_credentials = False

    stations = await augment_with_routes(*ORIGIN, _candidates(2), client)

    client.driving_matrix.assert_not_awaited()
    assert [s.travel_time_text for s in stations] == ["N/A", "N/A"]
    assert [s.route_distance_km for s in stations] == [1.0, 2.0]


@pytest.mark.asyncio
async def test_empty_input_makes_no_calls():
    client = _matrix_client()
    assert await augment_with_routes(*ORIGIN, [], client) == []
    client.driving_matrix.assert_not_awaited()


@pytest.mark.asyncio
async def test_fixed_pause_between_batches_and_no_retry(monkeypatch):
    monkeypatch.setattr("station_finder.pipeline.route_augmenter.BATCH_DELAY_SECONDS", BATCH_DELAY_SECONDS)
    ok = {"code": "Ok", "distances": [[500.0] * 6], "durations": [[60.0] * 6]}
    client = _matrix_client(side_effect=[ConnectionError("reset by peer"), ok])

    with patch("station_finder.pipeline.route_augmenter.asyncio") as fake_asyncio:
        fake_asyncio.sleep = AsyncMock()
        stations = await augment_with_routes(*ORIGIN, _candidates(30), client)

    assert fake_asyncio.sleep.await_args_list == [call(BATCH_DELAY_SECONDS)]
    assert client.driving_matrix.await_count == 2
    assert all(s.travel_time_text == "Route unavailable" for s in stations[:24])
    assert all(s.route_distance_km == 0.5 for s in stations[24:])


@pytest.mark.asyncio
async def test_single_batch_has_no_pause():
    client = _matrix_client(return_value={"code": "Ok", "distances": [[500.0] * 24], "durations": [[60.0] * 24]})

    with patch("station_finder.pipeline.route_augmenter.asyncio") as fake_asyncio:
        fake_asyncio.sleep = AsyncMock()
        await augment_with_routes(*ORIGIN, _candidates(24), client)

    fake_asyncio.sleep.assert_not_awaited()
