"""
Typed data models shared by the providers and the pipeline stages.
"""
import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass
class Candidate:
    """Fire station record normalized from any provider, before ranking."""
    name: str
    coordinates: Coordinates
    address: str = ""
    id: Optional[str] = None
    place_id: Optional[str] = None
    phone: Optional[str] = None
    rating: Optional[float] = None
    is_open: Optional[bool] = None
    website: Optional[str] = None
    photo_reference: Optional[str] = None
    straight_line_distance_km: Optional[float] = None
    source_strategy: Optional[str] = None  # Which provider/query found it (diagnostic only)
    is_service_area_station: bool = False
    service_note: Optional[str] = None
    tracking_key: Optional[str] = None  # List-rendering key, not part of identity


@dataclass
class RankedStation(Candidate):
    """Candidate augmented with route data and a proximity score."""
    route_distance_km: Optional[float] = None
    travel_time_minutes: Optional[float] = None
    route_distance_text: Optional[str] = None
    travel_time_text: Optional[str] = None
    proximity_score: Optional[float] = None
    proximity_rank: Optional[str] = None

    @classmethod
    def from_candidate(cls, candidate: Candidate, **route_fields) -> "RankedStation":
        values = {f.name: getattr(candidate, f.name) for f in fields(Candidate)}
        values.update(route_fields)
        return cls(**values)

    @property
    def effective_distance_km(self) -> float:
        """Routed distance when known, else straight-line, else infinity."""
        if self.route_distance_km is not None:
            return self.route_distance_km
        if self.straight_line_distance_km is not None:
            return self.straight_line_distance_km
        return math.inf

    def to_dict(self) -> Dict[str, Any]:
        """camelCase payload in the shape the mobile and admin clients consume."""
        return {
            "id": self.id,
            "uniqueKey": self.tracking_key,
            "name": self.name,
            "address": self.address,
            "latitude": self.coordinates.latitude,
            "longitude": self.coordinates.longitude,
            "placeId": self.place_id,
            "phone": self.phone,
            "rating": self.rating,
            "isOpen": self.is_open,
            "website": self.website,
            "photoReference": self.photo_reference,
            "straightLineDistance": self.straight_line_distance_km,
            "routeDistance": self.route_distance_km,
            "travelTime": self.travel_time_minutes,
            "routeDistanceText": self.route_distance_text,
            "travelTimeText": self.travel_time_text,
            "proximityScore": self.proximity_score,
            "proximityRank": self.proximity_rank,
            "searchStrategy": self.source_strategy,
            "isServiceAreaStation": self.is_service_area_station,
            "serviceNote": self.service_note,
        }


@dataclass
class ProviderResult:
    """Outcome of one provider call. Errors are reported here instead of raised."""
    provider: str
    candidates: List[Candidate] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng


@dataclass(frozen=True)
class ServingStation:
    """Known station that covers a service area."""
    name: str
    latitude: float
    longitude: float
    service_note: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class ServiceArea:
    """Zone with poor live search coverage and its known serving stations."""
    name: str
    bounds: BoundingBox
    serving_stations: Tuple[ServingStation, ...]
