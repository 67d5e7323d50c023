from dataclasses import replace
from typing import List

from station_finder.config import (
    ASSUMED_SPEED_KMH,
    DISTANCE_WEIGHT,
    MAX_SCORED_DISTANCE_KM,
    MAX_SCORED_TIME_MINUTES,
    MAX_SEARCH_RADIUS_KM,
    TIME_WEIGHT,
)
from station_finder.models import RankedStation

# Upper bounds of each rank bucket, checked in order
RANK_THRESHOLDS = (
    (20, "Excellent"),
    (40, "Very Good"),
    (60, "Good"),
    (80, "Fair"),
)
LAST_RANK = "Distant"


def filter_by_radius(stations: List[RankedStation], max_km: float = MAX_SEARCH_RADIUS_KM) -> List[RankedStation]:
    """Keep stations whose routed (else straight-line) distance is within max_km."""
    return [s for s in stations if s.effective_distance_km <= max_km]


def proximity_score(station: RankedStation) -> float:
    """
    Composite 0-100 score, lower is closer.

    Weights (0.4 time, 0.6 distance) and caps (50 km, 60 min) are fixed
    empirical constants; travel time falls back to distance at 40 km/h.
    """
    if station.route_distance_km is not None:
        distance = station.route_distance_km
    elif station.straight_line_distance_km is not None:
        distance = station.straight_line_distance_km
    else:
        distance = 0.0
    distance_score = min(distance / MAX_SCORED_DISTANCE_KM * 100, 100)

    if station.travel_time_minutes is not None:
        time_minutes = station.travel_time_minutes
    else:
        time_minutes = distance / ASSUMED_SPEED_KMH * 60
    time_score = min(time_minutes / MAX_SCORED_TIME_MINUTES * 100, 100)

    score = TIME_WEIGHT * time_score + DISTANCE_WEIGHT * distance_score
    return max(0.0, min(score, 100.0))


def proximity_rank(score: float) -> str:
    for upper, label in RANK_THRESHOLDS:
        if score <= upper:
            return label
    return LAST_RANK


def score_stations(stations: List[RankedStation]) -> List[RankedStation]:
    scored = []
    for station in stations:
        score = proximity_score(station)
        scored.append(replace(station, proximity_score=score, proximity_rank=proximity_rank(score)))
    return scored
