import pytest
from unittest.mock import AsyncMock, MagicMock, call, patch

from station_finder.config import PHONE_LOOKUP_DELAY_SECONDS
from station_finder.models import Coordinates, RankedStation
from station_finder.pipeline.phone_enrichment import best_name_match, enrich_phones


def _station(name, place_id=None, phone=None):
    return RankedStation(name=name, coordinates=Coordinates(5.6, -0.2), place_id=place_id, phone=phone)


def _places_client(phones=None, search_results=None):
    phones = phones or {}
    client = MagicMock()
    client.fetch_phone_number = AsyncMock(side_effect=lambda place_id: phones.get(place_id))
    client.text_search = AsyncMock(return_value=search_results or [])
    return client


@pytest.mark.asyncio
async def test_existing_phone_is_kept_without_lookups():
    client = _places_client()
    stations = [_station("Osu Fire Station", place_id="p1", phone="+233 30 266 4811")]

    enriched = await enrich_phones(stations, client)

    assert enriched[0].phone == "+233 30 266 4811"
    client.fetch_phone_number.assert_not_awaited()
    client.text_search.assert_not_awaited()


@pytest.mark.asyncio
async def test_details_lookup_by_place_id():
    client = _places_client(phones={"p1": "030 266 4811"})

    enriched = await enrich_phones([_station("Osu Fire Station", place_id="p1")], client)

    assert enriched[0].phone == "030 266 4811"
    client.text_search.assert_not_awaited()


@pytest.mark.asyncio
async def test_name_search_fallback_picks_best_match_not_first():
    results = [
        {"name": "Madina Market", "place_id": "p-market"},
        {"name": "Madina Fire Station", "place_id": "p-fire"},
    ]
    client = _places_client(phones={"p-market": "000", "p-fire": "+233 30 222 2333"}, search_results=results)

    enriched = await enrich_phones([_station("Madina Fire Station")], client)

    assert enriched[0].phone == "+233 30 222 2333"
    client.text_search.assert_awaited_once_with("Madina Fire Station Ghana")
    client.fetch_phone_number.assert_awaited_once_with("p-fire")


@pytest.mark.asyncio
async def test_no_confident_match_leaves_phone_empty():
    client = _places_client(search_results=[{"name": "Zongo Junction Barber", "place_id": "p-x"}])

    enriched = await enrich_phones([_station("Madina Fire Station")], client)

    assert enriched[0].phone is None
    client.fetch_phone_number.assert_not_awaited()


@pytest.mark.asyncio
async def test_failures_never_raise():
    client = MagicMock()
    client.fetch_phone_number = AsyncMock(side_effect=Exception("OVER_QUERY_LIMIT"))
    client.text_search = AsyncMock(side_effect=Exception("OVER_QUERY_LIMIT"))
    stations = [_station("Osu Fire Station", place_id="p1"), _station("Kaneshie Fire Station")]

    enriched = await enrich_phones(stations, client)

    assert [s.phone for s in enriched] == [None, None]
    assert [s.name for s in enriched] == ["Osu Fire Station", "Kaneshie Fire Station"]


def test_best_name_match_ignores_results_without_place_id():
    assert best_name_match("Osu Fire Station", [{"name": "Osu Fire Station"}]) is None


@pytest.mark.asyncio
async def test_name_match_tolerates_brand_prefix_and_word_order():
    client = _places_client(
        phones={"p-fire": "+233 30 222 2333"},
        search_results=[{"name": "Madina Fire Station", "place_id": "p-fire"}],
    )

    enriched = await enrich_phones([_station("GNFS Madina")], client)

    assert enriched[0].phone == "+233 30 222 2333"


@pytest.mark.asyncio
async def test_one_pause_per_station_that_needed_a_lookup(monkeypatch):
    monkeypatch.setattr(
        "station_finder.pipeline.phone_enrichment.PHONE_LOOKUP_DELAY_SECONDS", PHONE_LOOKUP_DELAY_SECONDS
    )
    client = _places_client(phones={"p1": "030 266 4811"})
    stations = [
        _station("Osu Fire Station", place_id="p1"),
        _station("Accra Central Fire Station", phone="+233 30 266 2222"),
        _station("Kaneshie Fire Station"),
    ]

    with patch("station_finder.pipeline.phone_enrichment.asyncio") as fake_asyncio:
        fake_asyncio.sleep = AsyncMock()
        await enrich_phones(stations, client)

    assert fake_asyncio.sleep.await_args_list == [call(PHONE_LOOKUP_DELAY_SECONDS)] * 2


@pytest.mark.asyncio
async def test_no_pause_when_every_station_has_a_phone():
    client = _places_client()
    stations = [_station("Osu Fire Station", phone="030 266 4811"), _station("Madina Fire Station", phone="030 222 2333")]

    with patch("station_finder.pipeline.phone_enrichment.asyncio") as fake_asyncio:
        fake_asyncio.sleep = AsyncMock()
        await enrich_phones(stations, client)

    fake_asyncio.sleep.assert_not_awaited()
