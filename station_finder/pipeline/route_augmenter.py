"""
Driving distance and time for each candidate, from the routing matrix API.
"""
import asyncio
import time
from typing import Any, Dict, List, Optional

from loguru import logger

from station_finder.clients import RoutingMatrixClient
from station_finder.config import BATCH_DELAY_SECONDS, MATRIX_BATCH_SIZE
from station_finder.geo import format_distance_km, format_duration_minutes
from station_finder.models import Candidate, RankedStation

ROUTE_UNAVAILABLE = "Route unavailable"
NOT_AVAILABLE = "N/A"


def _fallback(candidate: Candidate, travel_time_text: str = ROUTE_UNAVAILABLE) -> RankedStation:
    straight = candidate.straight_line_distance_km
    return RankedStation.from_candidate(
        candidate,
        route_distance_km=straight,
        travel_time_minutes=None,
        route_distance_text=format_distance_km(straight) if straight is not None else NOT_AVAILABLE,
        travel_time_text=travel_time_text,
    )


def _cell(matrix: Any, index: int) -> Optional[float]:
    try:
        value = matrix[0][index]
    except (TypeError, IndexError, KeyError):
        return None
    return float(value) if value is not None else None


def _apply_matrix(batch: List[Candidate], data: Dict[str, Any]) -> List[RankedStation]:
    distances = data.get("distances")
    durations = data.get("durations")
    stations = []
    for i, candidate in enumerate(batch):
        meters = _cell(distances, i)
        seconds = _cell(durations, i)
        if meters is None or seconds is None:
            # Unreachable by road
            stations.append(_fallback(candidate))
            continue
        km = meters / 1000
        minutes = seconds / 60
        stations.append(RankedStation.from_candidate(
            candidate,
            route_distance_km=km,
            travel_time_minutes=minutes,
            route_distance_text=format_distance_km(km),
            travel_time_text=format_duration_minutes(minutes),
        ))
    return stations


async def augment_with_routes(
    origin_lat: float,
    origin_lng: float,
    candidates: List[Candidate],
    matrix_client: RoutingMatrixClient,
) -> List[RankedStation]:
    """
    Attach routed distance/time to every candidate.

    Candidates go out in batches of MATRIX_BATCH_SIZE, one matrix request per
    batch, awaited in sequence. A batch that fails (non-Ok code, network error)
    falls back to straight-line distance with "Route unavailable"; without a
    routing credential no request is made and every station gets "N/A".

    Returns:
        List[RankedStation]: Same order and length as `candidates`.
    """
    if not candidates:
        return []

    if not matrix_client.has_credentials:
        logger.debug("⚠️ No routing token configured; using straight-line distances")
        return [_fallback(c, NOT_AVAILABLE) for c in candidates]

    batches = [candidates[i:i + MATRIX_BATCH_SIZE] for i in range(0, len(candidates), MATRIX_BATCH_SIZE)]
    routed: List[RankedStation] = []

    for n, batch in enumerate(batches):
        if n > 0:
            await asyncio.sleep(BATCH_DELAY_SECONDS)

        start = time.perf_counter()
        destinations = [(c.coordinates.latitude, c.coordinates.longitude) for c in batch]
        try:
            data = await matrix_client.driving_matrix((origin_lat, origin_lng), destinations)
        except Exception as e:
            logger.debug(f"⚠️ Routing batch {n + 1}/{len(batches)} failed: {e}")
            routed.extend(_fallback(c) for c in batch)
            continue

        if data.get("code") != "Ok":
            logger.debug(
                f"⚠️ Routing batch {n + 1}/{len(batches)} returned {data.get('code')}: "
                f"{data.get('message', 'no details')}"
            )
            routed.extend(_fallback(c) for c in batch)
            continue

        routed.extend(_apply_matrix(batch, data))
        duration = time.perf_counter() - start
        logger.debug(f"🚗 Routed batch {n + 1}/{len(batches)} ({len(batch)} stations) in {duration:.2f}s")

    return routed
