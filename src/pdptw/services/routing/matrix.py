"""Travel-time matrix generation for instances that ship without EDGES."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ...models.domain import Instance
from ...parsing.writer import build_haversine_matrix
from ..geometry.osrm_client import OSRMClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TimeMatrixResult:
    times: list[list[int]]
    source: str


async def build_time_matrix(instance: Instance, client: Optional[OSRMClient] = None) -> TimeMatrixResult:
    """Whole-minute travel times from OSRM, falling back to haversine estimates."""
    coordinates = instance.coordinates
    if len(coordinates) < 2:
        return TimeMatrixResult(times=build_haversine_matrix(instance), source="haversine")

    try:
        client = client or OSRMClient()
        table = await client.table(coordinates)
        durations = table["durations"]

        # More than half of the depot row unreachable means the table is not worth using.
        depot_row = durations[0] if durations else []
        unreachable = sum(1 for value in depot_row[1:] if value is None)
        if depot_row[1:] and unreachable / len(depot_row[1:]) > 0.5:
            logger.warning(
                f"Too many unreachable nodes from OSRM ({unreachable}/{len(depot_row) - 1}). Using haversine fallback."
            )
        else:
            fallback = build_haversine_matrix(instance)
            times = [
                [
                    max(0, round(value / 60)) if value is not None else fallback[i][j]
                    for j, value in enumerate(row)
                ]
                for i, row in enumerate(durations)
            ]
            return TimeMatrixResult(times=times, source="osrm")
    except (httpx.HTTPError, ConnectionError, ValueError, KeyError) as e:
        logger.warning(f"OSRM table request failed: {e}. Using haversine fallback.")

    logger.info(f"Computing time matrix using haversine fallback for {len(coordinates)} nodes")
    return TimeMatrixResult(times=build_haversine_matrix(instance), source="haversine")
