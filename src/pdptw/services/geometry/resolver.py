"""Resolve a route's travel geometry, straight-line or street-level, through the geometry cache."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol, Sequence

import httpx

from ...config import settings
from ...models.domain import Coordinate, Instance, Route, Solution
from .cache import GeometryCache, edge_key, full_route_key
from .osrm_client import ProviderRoute

logger = logging.getLogger(__name__)

PROVIDER_ERRORS = (httpx.HTTPError, OSError, ValueError, asyncio.TimeoutError)
DEFAULT_SCOPE = "default"


class RoutingMode(str, Enum):
    DIRECT = "direct"
    ROUTED = "routed"


class RoutingProvider(Protocol):
    async def route(self, coordinates: Sequence[Coordinate], profile: str | None = None) -> ProviderRoute: ...


@dataclass(slots=True)
class ResolutionWarning:
    """Non-fatal degradation observed while resolving geometry."""

    kind: str
    message: str


@dataclass(slots=True)
class ResolutionResult:
    path: list[Coordinate]
    source: str
    warning: Optional[ResolutionWarning] = None


@dataclass(slots=True)
class ResolutionPass:
    generation: int
    mode: RoutingMode
    results: dict[int, ResolutionResult] = field(default_factory=dict)
    superseded: bool = False

    @property
    def warnings(self) -> dict[int, ResolutionWarning]:
        return {route_id: result.warning for route_id, result in self.results.items() if result.warning}


class RouteGeometryResolver:
    """Turns node sequences into coordinates, memoising routed geometry in a :class:`GeometryCache`.

    Every resolution pass takes a generation number within a scope (one scope per
    solution or client session); a pass that finishes after a newer pass in the
    same scope has started drops its results instead of writing them. Passes in
    different scopes never supersede each other.
    """

    def __init__(
        self,
        cache: GeometryCache,
        provider: Optional[RoutingProvider],
        profile: Optional[str] = None,
        save_interval: Optional[int] = None,
        deadline_seconds: Optional[float] = None,
    ) -> None:
        self.cache = cache
        self.provider = provider
        self.profile = profile or settings.routing_profile
        self.save_interval = save_interval or settings.cache_save_interval
        self.deadline_seconds = deadline_seconds or settings.resolve_deadline_seconds
        self._generation = 0
        self._latest: dict[str, int] = {}
        self._unsaved_edges = 0

    @property
    def generation(self) -> int:
        """Most recently issued generation, across all scopes."""
        return self._generation

    def next_generation(self, scope: str = DEFAULT_SCOPE) -> int:
        self._generation += 1
        self._latest[scope] = self._generation
        return self._generation

    def is_current(self, generation: Optional[int], scope: str = DEFAULT_SCOPE) -> bool:
        return generation is None or self._latest.get(scope) == generation

    def _release(self, generation: int, scope: str) -> None:
        if self._latest.get(scope) == generation:
            del self._latest[scope]

    async def _fetch(self, coordinates: Sequence[Coordinate]) -> list[Coordinate]:
        if self.provider is None:
            raise ConnectionError("No routing provider configured.")
        provider_route = await asyncio.wait_for(
            self.provider.route(coordinates, self.profile), timeout=self.deadline_seconds
        )
        path = [(float(lat), float(lon)) for lat, lon in provider_route.coordinates]
        if not path:
            raise ValueError("Routing provider returned an empty geometry.")
        return path

    def direct_path(self, route: Route, instance: Instance) -> list[Coordinate]:
        """Node coordinates in sequence order; ids without a node are left out."""
        points: list[Coordinate] = []
        for node_id in route.sequence:
            node = instance.node(node_id)
            if node is None:
                logger.warning(f"Route {route.id}: node {node_id} has no coordinates, leaving it out of the path")
                continue
            points.append(node.coords)
        return points

    async def _fetch_or_none(
        self, coordinates: Sequence[Coordinate], label: str
    ) -> tuple[Optional[list[Coordinate]], Optional[ResolutionWarning]]:
        """Provider geometry, or ``None`` plus a ``provider_failure`` warning; nothing escapes."""
        try:
            return await self._fetch(coordinates), None
        except PROVIDER_ERRORS as e:
            logger.warning(f"Routing request failed for {label}: {e!r}. Using straight lines fallback.")
            return None, ResolutionWarning("provider_failure", str(e) or type(e).__name__)
        except Exception as e:
            logger.exception(f"Unexpected routing provider error for {label}: {e!r}. Using straight lines fallback.")
            return None, ResolutionWarning("provider_failure", str(e) or type(e).__name__)

    async def resolve(
        self,
        route: Route,
        instance: Instance,
        mode: RoutingMode = RoutingMode.ROUTED,
        *,
        generation: Optional[int] = None,
        scope: str = DEFAULT_SCOPE,
    ) -> ResolutionResult:
        """Resolve ``route`` in the given mode; routed failures fall back to straight lines and never raise."""
        direct = self.direct_path(route, instance)
        if mode is RoutingMode.DIRECT:
            if self.is_current(generation, scope):
                route.path = list(direct)
            return ResolutionResult(path=direct, source="direct")

        if len(direct) < 2:
            logger.warning(f"Route {route.id} has fewer than two waypoints, keeping its current path")
            return ResolutionResult(
                path=list(route.path),
                source="direct",
                warning=ResolutionWarning("invalid_sequence", f"Route {route.id} has fewer than two waypoints."),
            )

        key = full_route_key(direct)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for full route {route.id}")
            if self.is_current(generation, scope):
                route.path = list(cached)
            return ResolutionResult(path=cached, source="cache")

        logger.info(f"Fetching full route for route {route.id} ({len(direct)} waypoints, profile={self.profile})")
        path, warning = await self._fetch_or_none(direct, f"route {route.id}")
        source = "provider"
        if path is None:
            path, source = direct, "fallback"

        if not self.is_current(generation, scope):
            logger.info(f"Discarding geometry for route {route.id}: generation {generation} is stale")
            return ResolutionResult(
                path=path,
                source=source,
                warning=ResolutionWarning(
                    "stale", f"Generation {generation} superseded by {self._latest.get(scope)}."
                ),
            )

        # Fallbacks are cached too so the same failing request is not repeated.
        self.cache.set(key, path)
        self.cache.save()
        route.path = list(path)
        return ResolutionResult(path=list(path), source=source, warning=warning)

    async def resolve_edge(self, start: Coordinate, end: Coordinate) -> ResolutionResult:
        """Resolve a single directed leg, persisting after every ``save_interval`` new entries."""
        key = edge_key(start, end)
        cached = self.cache.get(key)
        if cached is not None:
            return ResolutionResult(path=cached, source="cache")

        path, warning = await self._fetch_or_none([start, end], key)
        self._unsaved_edges += 1
        if path is None:
            fallback = [start, end]
            self.cache.set(key, fallback)
            return ResolutionResult(path=fallback, source="fallback", warning=warning)

        self.cache.set(key, path)
        if self._unsaved_edges >= self.save_interval and self.cache.save():
            self._unsaved_edges = 0
        return ResolutionResult(path=path, source="provider")

    async def resolve_edges(self, route: Route, instance: Instance) -> ResolutionResult:
        """Stitch a route together leg by leg; the result carries the first warning seen."""
        waypoints = self.direct_path(route, instance)
        path: list[Coordinate] = []
        warning: Optional[ResolutionWarning] = None
        for start, end in zip(waypoints, waypoints[1:]):
            leg = await self.resolve_edge(start, end)
            warning = warning or leg.warning
            path.extend(leg.path if not path else leg.path[1:])
        return ResolutionResult(path=path or waypoints, source="edges", warning=warning)

    async def resolve_solution(
        self,
        solution: Solution,
        instance: Instance,
        mode: RoutingMode = RoutingMode.ROUTED,
        *,
        scope: str = DEFAULT_SCOPE,
    ) -> ResolutionPass:
        """Resolve every route in order under a fresh generation of ``scope``."""
        generation = self.next_generation(scope)
        resolution_pass = ResolutionPass(generation=generation, mode=mode)
        routed = mode is RoutingMode.ROUTED
        if routed:
            self.cache.save()

        for route in solution.routes:
            if not self.is_current(generation, scope):
                logger.info(f"Resolution pass {generation} superseded, stopping before route {route.id}")
                resolution_pass.superseded = True
                break
            result = await self.resolve(route, instance, mode, generation=generation, scope=scope)
            resolution_pass.results[route.id] = result

        if not self.is_current(generation, scope):
            resolution_pass.superseded = True
            return resolution_pass
        if routed:
            self.cache.save()
        self._release(generation, scope)
        return resolution_pass

    def hydrate_from_cache(self, solution: Solution, instance: Instance) -> int:
        """Copy cached full-route geometry into freshly parsed routes; returns how many were found."""
        hydrated = 0
        for route in solution.routes:
            key = full_route_key(self.direct_path(route, instance))
            if key in self.cache:
                route.path = self.cache.get(key) or route.path
                hydrated += 1
                logger.debug(f"Using cached route for details of {route.id}")
        return hydrated
