"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional, Sequence

import httpx

from ...config import settings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProviderRoute:
    """Street-level geometry returned by the routing provider, as (lat, lon) points."""

    coordinates: list[tuple[float, float]]
    distance_m: float
    duration_s: float


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        max_coordinates_per_request: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.routing_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self.max_coordinates_per_request = (
            max_coordinates_per_request
            if max_coordinates_per_request is not None
            else settings.osrm_max_coordinates_per_request
        )
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            transport=self._transport,
        )

    async def _get_json(self, url: str, params: dict) -> dict:
        """GET with retries: timeouts and network errors back off exponentially, the rest linearly."""
        async with self._get_client() as client:
            attempt = 0
            while True:
                try:
                    response = await client.get(url, params=params)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    await asyncio.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"OSRM request timed out after {self.max_retries} retries: {e}")
                        raise
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM request timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    await asyncio.sleep(wait_time)
                except (httpx.NetworkError, OSError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"Failed to connect to OSRM service at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"OSRM network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    await asyncio.sleep(wait_time)
                except (httpx.HTTPError, ValueError):
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    await asyncio.sleep(self.backoff_seconds * attempt)

    async def route(self, coordinates: Sequence[tuple[float, float]], profile: str | None = None) -> ProviderRoute:
        """Get street-level geometry through ordered (lat, lon) waypoints.

        Raises ``ValueError`` when OSRM answers without a usable route, and the
        usual httpx / ``ConnectionError`` failures once retries are exhausted.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM route.")

        # OSRM route endpoint expects coordinates as "lon,lat;lon,lat;..."
        coordinate_str = ";".join(f"{lon},{lat}" for lat, lon in coordinates)
        params = {
            "overview": "full",
            "geometries": "geojson",
            "steps": "false",
        }
        url = f"{self.base_url}/route/v1/{profile or self.profile}/{coordinate_str}"

        data = await self._get_json(url, params)
        if data.get("code") != "Ok":
            error_msg = data.get("message", "Unknown OSRM route error")
            raise ValueError(f"OSRM route request failed: {error_msg}")
        routes = data.get("routes") or []
        if not routes:
            raise ValueError("OSRM returned no route for the requested waypoints.")

        best = routes[0]
        geometry = best.get("geometry") if isinstance(best, dict) else None
        points = geometry.get("coordinates") if isinstance(geometry, dict) else None
        if not points:
            raise ValueError("OSRM route has an empty or malformed geometry.")
        try:
            return ProviderRoute(
                coordinates=[(float(lat), float(lon)) for lon, lat in points],
                distance_m=float(best.get("distance", 0.0)),
                duration_s=float(best.get("duration", 0.0)),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"OSRM route payload is malformed: {e}") from e

    async def _table_single_request(
        self,
        coordinates: Sequence[tuple[float, float]],
        sources: Sequence[int] | None = None,
        destinations: Sequence[int] | None = None,
    ) -> dict:
        coordinate_str = ";".join(f"{lon},{lat}" for lat, lon in coordinates)
        if sources is None:
            sources = list(range(len(coordinates)))
        if destinations is None:
            destinations = list(range(len(coordinates)))

        params = {
            "annotations": "duration,distance",
            "sources": ";".join(str(i) for i in sources),
            "destinations": ";".join(str(i) for i in destinations),
        }
        url = f"{self.base_url}/table/v1/{self.profile}/{coordinate_str}"
        data = await self._get_json(url, params)
        if "durations" not in data or "distances" not in data:
            raise ValueError("OSRM response missing durations/distances.")
        return data

    async def table(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Get duration/distance matrices, splitting large requests into chunk pairs issued in order."""
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM table.")

        if len(coordinates) <= self.max_coordinates_per_request:
            return await self._table_single_request(coordinates)

        start_time = time.time()
        chunk_size = max(1, self.max_coordinates_per_request // 2)
        ranges = [(i, min(i + chunk_size, len(coordinates))) for i in range(0, len(coordinates), chunk_size)]
        logger.info(
            f"Chunking OSRM table request: {len(coordinates)} coordinates into {len(ranges) ** 2} requests"
        )

        n = len(coordinates)
        durations: list[list[float | None]] = [[None] * n for _ in range(n)]
        distances: list[list[float | None]] = [[None] * n for _ in range(n)]

        for src_start, src_end in ranges:
            for dst_start, dst_end in ranges:
                chunk_coords = list(coordinates[src_start:src_end]) + list(coordinates[dst_start:dst_end])
                src_count = src_end - src_start
                result = await self._table_single_request(
                    chunk_coords,
                    list(range(src_count)),
                    list(range(src_count, len(chunk_coords))),
                )
                for local_src, global_src in enumerate(range(src_start, src_end)):
                    for local_dst, global_dst in enumerate(range(dst_start, dst_end)):
                        durations[global_src][global_dst] = result["durations"][local_src][local_dst]
                        distances[global_src][global_dst] = result["distances"][local_src][local_dst]

        logger.info(f"Completed chunked OSRM table request in {time.time() - start_time:.2f}s")
        return {"durations": durations, "distances": distances}


async def check_health(client: Optional[OSRMClient] = None) -> bool:
    """Check OSRM reachability with a minimal two-point table request.

    Public OSRM endpoints may not have a /health endpoint.
    """
    try:
        client = client or OSRMClient(max_retries=0, timeout=5.0)
        data = await client.table([(52.517037, 13.388860), (52.496891, 13.385983)])
        return isinstance(data.get("durations"), list)
    except (httpx.HTTPError, ConnectionError, ValueError):
        return False
