"""
Keyword tables and service areas that tune the search to one country.

The tables are plain JSON so coverage can be extended without code changes.
The packaged default covers Ghana; set LOCALE_TABLES_PATH to use another file.
"""
import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from loguru import logger

from station_finder.config import LOCALE_TABLES_PATH
from station_finder.models import BoundingBox, ServiceArea, ServingStation

DEFAULT_LOCALE_FILE = Path(__file__).parent / "data" / "ghana_locale.json"


@dataclass(frozen=True)
class LocaleTables:
    country_name: str
    country_keywords: Tuple[str, ...]
    region_keywords: Dict[str, Tuple[str, ...]]
    capital_bounds: BoundingBox
    capital_region: str
    port_region: str
    fire_keywords: Tuple[str, ...]
    service_brands: Tuple[str, ...]
    excluded_words: Tuple[str, ...]
    service_areas: Tuple[ServiceArea, ...]

    def keywords_for(self, region_name: Optional[str]) -> Optional[Tuple[str, ...]]:
        """Keywords of a recognized region, or None when the region is unknown."""
        if not region_name:
            return None
        return self.region_keywords.get(region_name.strip().lower())


def _bounds(raw: Dict[str, Any]) -> BoundingBox:
    return BoundingBox(
        min_lat=float(raw["min_lat"]),
        max_lat=float(raw["max_lat"]),
        min_lng=float(raw["min_lng"]),
        max_lng=float(raw["max_lng"]),
    )


def _lowered(words) -> Tuple[str, ...]:
    return tuple(str(w).lower() for w in words)


def parse_locale_tables(raw: Dict[str, Any]) -> LocaleTables:
    """Build LocaleTables from an already-decoded JSON document."""
    service_areas = tuple(
        ServiceArea(
            name=area["name"],
            bounds=_bounds(area["bounds"]),
            serving_stations=tuple(
                ServingStation(
                    name=s["name"],
                    latitude=float(s["latitude"]),
                    longitude=float(s["longitude"]),
                    service_note=s.get("service_note", ""),
                    phone=s.get("phone"),
                )
                for s in area.get("serving_stations", [])
            ),
        )
        for area in raw.get("service_areas", [])
    )

    return LocaleTables(
        country_name=raw["country_name"],
        country_keywords=_lowered(raw.get("country_keywords", [])),
        region_keywords={
            region.lower(): _lowered(words)
            for region, words in raw.get("region_keywords", {}).items()
        },
        capital_bounds=_bounds(raw["capital_bounds"]),
        capital_region=raw["capital_region"].lower(),
        port_region=raw["port_region"].lower(),
        fire_keywords=_lowered(raw.get("fire_keywords", [])),
        service_brands=tuple(raw.get("service_brands", [])),
        excluded_words=_lowered(raw.get("excluded_words", [])),
        service_areas=service_areas,
    )


def load_locale_tables(path: Optional[str] = None) -> LocaleTables:
    """
    Load locale tables from a JSON file.

    Args:
        path: File to read. Defaults to LOCALE_TABLES_PATH, then the packaged Ghana tables.

    Returns:
        LocaleTables: Parsed, immutable tables.
    """
    source = Path(path or LOCALE_TABLES_PATH or DEFAULT_LOCALE_FILE)
    with source.open(encoding="utf-8") as f:
        raw = json.load(f)
    tables = parse_locale_tables(raw)
    logger.debug(
        f"🗺️ Loaded locale tables for {tables.country_name} from {source} "
        f"({len(tables.region_keywords)} regions, {len(tables.service_areas)} service areas)"
    )
    return tables


@lru_cache(maxsize=1)
def default_locale() -> LocaleTables:
    return load_locale_tables()
