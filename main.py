import os
import asyncio
import csv
import sys
from dataclasses import dataclass
from typing import List, Optional

import pandas as pd
from loguru import logger

from station_finder.clients import SearchClients
from station_finder.config import INPUT_CSV, OUTPUT_CSV, LOG_LEVEL, DEFAULT_RESULT_LIMIT
from station_finder.pipeline.search_orchestrator import fetch_nearby_fire_stations

OUTPUT_COLUMNS = [
    "originLatitude", "originLongitude", "region", "rank",
    "name", "address", "phone", "latitude", "longitude",
    "routeDistanceText", "travelTimeText", "proximityScore", "proximityRank",
    "isServiceAreaStation", "searchStrategy",
]


@dataclass
class SearchOrigin:
    """One row of the input CSV."""
    latitude: float
    longitude: float
    region: Optional[str] = None


def load_origins_from_csv(file_path: str, nrows: int = None) -> List[SearchOrigin]:
    """Load search origins from CSV (latitude, longitude, optional region)."""
    df = pd.read_csv(file_path, nrows=nrows)
    origins = []
    for _, row in df.iterrows():
        try:
            lat = float(row["latitude"])
            lng = float(row["longitude"])
        except (KeyError, ValueError, TypeError):
            logger.debug(f"Skipping row without usable coordinates: {row.to_dict()}")
            continue

        region = None
        if "region" in row.index and pd.notna(row["region"]):
            region = str(row["region"]).strip() or None

        origins.append(SearchOrigin(latitude=lat, longitude=lng, region=region))
    return origins


async def main():
    """
    Run the station search for every origin in the input CSV.

    - Origins are searched one after another, sharing one set of clients.
    - Ranked stations are written to the output CSV as each search finishes.
    """
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=LOG_LEVEL, format="<green>{time:HH:mm:ss}</green> | <level>{message}</level>")

    origins = load_origins_from_csv(INPUT_CSV)

    output_path = OUTPUT_CSV
    if os.path.exists(output_path):
        os.remove(output_path)
    with open(output_path, "w", newline="") as f:
        csv.writer(f).writerow(OUTPUT_COLUMNS)

    clients = SearchClients.from_config()
    try:
        for idx, origin in enumerate(origins):
            logger.info(f"Searching origin {idx + 1}/{len(origins)}: ({origin.latitude}, {origin.longitude})")
            stations = await fetch_nearby_fire_stations(
                origin.latitude,
                origin.longitude,
                limit=DEFAULT_RESULT_LIMIT,
                region_name=origin.region,
                clients=clients,
            )

            with open(output_path, "a", newline="") as f:
                writer = csv.writer(f)
                for rank, station in enumerate(stations, start=1):
                    payload = station.to_dict()
                    writer.writerow([
                        origin.latitude,
                        origin.longitude,
                        origin.region or "",
                        rank,
                        *(payload[col] for col in OUTPUT_COLUMNS[4:]),
                    ])
    finally:
        # Cleanup: close client sessions to prevent unclosed connector warnings
        await clients.close()

if __name__ == "__main__":
    asyncio.run(main())
