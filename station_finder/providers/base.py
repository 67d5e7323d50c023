"""
Common query loop shared by the live search providers.
"""
import asyncio
import math
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from loguru import logger

from station_finder.config import QUERY_DELAY_SECONDS
from station_finder.geo import haversine_km
from station_finder.locale import LocaleTables, default_locale
from station_finder.models import Candidate, Coordinates, ProviderResult
from station_finder.pipeline.region_filter import is_in_country, is_in_region
from station_finder.providers.classification import has_excluded_words, is_fire_station

PLACEHOLDER_NAME = "Fire Station"


@dataclass
class QueryVariant:
    """One upstream request of a provider, labelled with the strategy that issued it."""
    label: str
    run: Callable[[], Awaitable[List[Dict[str, Any]]]]


@dataclass
class RawHit:
    """Provider-specific hit reduced to the fields every provider can fill."""
    name: Optional[str]
    address: str
    latitude: Any
    longitude: Any
    place_id: Optional[str] = None
    types: Sequence[str] = ()
    phone: Optional[str] = None
    rating: Optional[float] = None
    is_open: Optional[bool] = None
    website: Optional[str] = None
    photo_reference: Optional[str] = None


def _as_float(value) -> Optional[float]:
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


class StationProvider:
    """
    Runs a provider's query variants one after another and turns accepted hits
    into Candidates. A failing variant is recorded and skipped; search() never raises.
    """
    name = "provider"

    def __init__(self, locale: Optional[LocaleTables] = None):
        self.locale = locale or default_locale()

    def query_variants(
        self, origin_lat: float, origin_lng: float, search_radius_km: float, region_name: Optional[str]
    ) -> List[QueryVariant]:
        raise NotImplementedError

    def parse_hit(self, raw: Dict[str, Any]) -> RawHit:
        raise NotImplementedError

    def to_candidate(self, hit: RawHit, origin_lat: float, origin_lng: float, label: str) -> Optional[Candidate]:
        """Normalize a hit, or None when it has no usable coordinates."""
        lat = _as_float(hit.latitude)
        lng = _as_float(hit.longitude)
        if lat is None or lng is None:
            return None
        return Candidate(
            id=hit.place_id,
            name=hit.name or PLACEHOLDER_NAME,
            address=hit.address or "",
            coordinates=Coordinates(latitude=lat, longitude=lng),
            place_id=hit.place_id,
            phone=hit.phone or None,
            rating=_as_float(hit.rating),
            is_open=hit.is_open,
            website=hit.website,
            photo_reference=hit.photo_reference,
            straight_line_distance_km=haversine_km(origin_lat, origin_lng, lat, lng),
            source_strategy=label,
        )

    def accept(self, hit: RawHit, candidate: Candidate, region_name: Optional[str]) -> bool:
        if not is_fire_station(hit.name or "", hit.address, hit.types, self.locale):
            return False
        if has_excluded_words(hit.name or "", hit.address, self.locale):
            return False
        return is_in_country(candidate, self.locale) and is_in_region(candidate, region_name, self.locale)

    async def search(
        self,
        origin_lat: float,
        origin_lng: float,
        search_radius_km: float,
        region_name: Optional[str] = None,
    ) -> ProviderResult:
        """
        Collect candidates from every query variant of this provider.

        Args:
            origin_lat: Search origin latitude.
            origin_lng: Search origin longitude.
            search_radius_km: Radius the upstream search is bounded by.
            region_name: Optional region used for extra queries and filtering.

        Returns:
            ProviderResult: Accepted candidates plus one message per failed variant.
        """
        result = ProviderResult(provider=self.name)
        seen_place_ids = set()

        try:
            variants = self.query_variants(origin_lat, origin_lng, search_radius_km, region_name)
        except Exception as e:
            result.errors.append(f"{self.name}: could not build queries: {e}")
            return result

        for i, variant in enumerate(variants):
            # Upstream rate limits: pause between variants, never retry
            if i > 0:
                await asyncio.sleep(QUERY_DELAY_SECONDS)

            start = time.perf_counter()
            try:
                raw_hits = await variant.run()
            except Exception as e:
                logger.debug(f"⚠️ [{self.name}] '{variant.label}' failed: {e}")
                result.errors.append(f"{variant.label}: {e}")
                continue

            accepted = 0
            for raw in raw_hits:
                try:
                    hit = self.parse_hit(raw)
                except Exception as e:
                    logger.debug(f"⚠️ [{self.name}] skipping malformed hit in '{variant.label}': {e}")
                    continue
                if hit.place_id and hit.place_id in seen_place_ids:
                    continue
                candidate = self.to_candidate(hit, origin_lat, origin_lng, variant.label)
                if candidate is None or not self.accept(hit, candidate, region_name):
                    continue
                if hit.place_id:
                    seen_place_ids.add(hit.place_id)
                result.candidates.append(candidate)
                accepted += 1

            duration = time.perf_counter() - start
            logger.debug(
                f"✅ [{self.name}] '{variant.label}': {accepted}/{len(raw_hits)} hits accepted in {duration:.2f}s"
            )

        return result
