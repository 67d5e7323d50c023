import re
import uuid
from dataclasses import replace
from typing import List

from station_finder.models import Candidate


def primary_key(candidate: Candidate) -> str:
    """Place id, else provider id, else name plus raw coordinates."""
    if candidate.place_id:
        return candidate.place_id
    if candidate.id:
        return candidate.id
    lat, lng = candidate.coordinates.latitude, candidate.coordinates.longitude
    return re.sub(r"\s+", "_", f"{candidate.name}_{lat}_{lng}")


def location_key(candidate: Candidate) -> str:
    """Name plus coordinates rounded to 4 decimals (about 11 m)."""
    lat, lng = candidate.coordinates.latitude, candidate.coordinates.longitude
    return f"{candidate.name}_{lat:.4f}_{lng:.4f}"


def dedupe(candidates: List[Candidate]) -> List[Candidate]:
    """
    Collapse duplicates reported by several providers, keeping the first occurrence.

    A candidate is dropped when either its primary key or its location key was
    already accepted, so a station one provider keys by place id and another by
    coordinates still collapses into one.

    Returns:
        List[Candidate]: Survivors in input order, each with a fresh `tracking_key`.
    """
    seen_ids = set()
    seen_locations = set()
    unique: List[Candidate] = []

    for index, candidate in enumerate(candidates):
        uid = primary_key(candidate)
        loc = location_key(candidate)
        if uid in seen_ids or loc in seen_locations:
            continue
        seen_ids.add(uid)
        seen_locations.add(loc)
        unique.append(replace(candidate, tracking_key=f"station_{index}_{uuid.uuid4().hex[:9]}"))

    return unique
