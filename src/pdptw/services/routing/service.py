"""Orchestration between the HTTP layer and the parsing, geometry and timeline core."""

from __future__ import annotations

import hashlib
import logging
from typing import Optional, Sequence

from ...models.domain import Instance, Route, Solution
from ...parsing import parse_instance, parse_solution, serialize_instance
from ...persistence.filesystem import FileStorage
from ...schemas.instances import (
    InstanceModel,
    NodeModel,
    RouteModel,
    SolutionModel,
    SolutionTextRequest,
    TimeMatrixResponse,
)
from ...schemas.routing import (
    GeometryRequest,
    GeometryResponse,
    RouteGeometryModel,
    RouteTimelineModel,
    TimelineEventModel,
    TimelineRequest,
    TimelineResponse,
)
from ..geometry.osrm_client import OSRMClient
from ..geometry.resolver import RouteGeometryResolver, RoutingMode
from ..outputs.timeline_formatter import timeline_to_csv, timeline_to_json
from ..geospatial import path_length_km
from ..timeline.simulator import RouteTimeline, simulate, summarize
from .matrix import build_time_matrix

logger = logging.getLogger(__name__)


def describe_instance(instance: Instance) -> InstanceModel:
    return InstanceModel(
        name=instance.name,
        location=instance.location,
        kind=instance.kind,
        size=instance.size,
        capacity=instance.capacity,
        has_time_matrix=instance.times is not None,
        nodes=[
            NodeModel(
                id=node.id,
                coords=node.coords,
                demand=node.demand,
                time_window=node.time_window,
                service_duration=node.service_duration,
                role=node.role.value,
                pair=node.pair,
            )
            for node in instance.nodes
        ],
        pair_issues=instance.pair_issues(),
    )


def _route_model(route: Route) -> RouteModel:
    return RouteModel(
        id=route.id,
        label=route.label,
        sequence=route.sequence,
        path=route.path,
        cost=route.cost,
        color=route.color,
        cost_complete=route.cost_complete,
        missing_edges=route.missing_edges,
        skipped_nodes=route.skipped_nodes,
    )


def describe_solution(solution: Solution) -> SolutionModel:
    return SolutionModel(
        instance_name=solution.instance_name,
        author=solution.author,
        date=solution.date,
        reference=solution.reference,
        cost_complete=solution.cost_complete,
        total_cost=solution.total_cost,
        routes=[_route_model(route) for route in solution.routes],
    )


def load_solution(payload: SolutionTextRequest | GeometryRequest | TimelineRequest) -> tuple[Instance, Solution]:
    instance = parse_instance(payload.instance_text)
    strict = getattr(payload, "strict_costs", False)
    solution = parse_solution(payload.solution_text, instance, strict_costs=strict)
    return instance, solution


def _select_routes(solution: Solution, route_ids: Optional[Sequence[int]]) -> list[Route]:
    if not route_ids:
        return list(solution.routes)
    wanted = set(route_ids)
    selected = [route for route in solution.routes if route.id in wanted]
    missing = wanted - {route.id for route in selected}
    if missing:
        raise ValueError(f"Unknown route ids: {sorted(missing)}")
    return selected


def resolution_scope(payload: GeometryRequest) -> str:
    """Generation scope of a geometry request: its session, or a digest of the texts it resolves."""
    if payload.session_id:
        return f"session:{payload.session_id}"
    digest = hashlib.sha1(f"{payload.instance_text}\0{payload.solution_text}".encode("utf-8")).hexdigest()
    return f"solution:{digest}"


async def resolve_geometry(payload: GeometryRequest, resolver: RouteGeometryResolver) -> GeometryResponse:
    instance, solution = load_solution(payload)
    resolver.hydrate_from_cache(solution, instance)
    solution.routes = _select_routes(solution, payload.route_ids)

    resolution_pass = await resolver.resolve_solution(
        solution, instance, RoutingMode(payload.mode), scope=resolution_scope(payload)
    )
    routes: list[RouteGeometryModel] = []
    for route in solution.routes:
        result = resolution_pass.results.get(route.id)
        path = result.path if result else route.path
        routes.append(
            RouteGeometryModel(
                route_id=route.id,
                color=route.color,
                source=result.source if result else "unresolved",
                path=path,
                length_km=round(path_length_km(path), 3),
                warning=result.warning.message if result and result.warning else None,
            )
        )
    return GeometryResponse(
        mode=payload.mode,
        generation=resolution_pass.generation,
        superseded=resolution_pass.superseded,
        routes=routes,
    )


def _timeline_model(timeline: RouteTimeline) -> RouteTimelineModel:
    return RouteTimelineModel(
        route_id=timeline.route_id,
        cost=timeline.cost,
        total_distance=timeline.total_distance,
        total_duration=timeline.total_duration,
        max_time=timeline.max_time,
        max_load=timeline.max_load,
        violations=timeline.violations,
        events=[
            TimelineEventModel(
                node_id=event.node_id,
                sequence_index=event.sequence_index,
                role=event.role,
                travel_time=event.travel_time,
                distance=event.distance,
                arrival_time=event.arrival_time,
                wait_time=event.wait_time,
                service_start=event.service_start,
                service_end=event.service_end,
                demand=event.demand,
                load=event.load,
                time_window=event.time_window,
                violation=event.violation,
            )
            for event in timeline.events
        ],
    )


def build_timelines(payload: TimelineRequest) -> TimelineResponse:
    instance, solution = load_solution(payload)
    if payload.route_ids:
        timelines = [simulate(route, instance) for route in _select_routes(solution, payload.route_ids)]
    else:
        timelines = summarize(solution, instance)

    output_dir: Optional[str] = None
    if payload.persist:
        storage = FileStorage()
        run_dir = storage.make_run_directory(prefix=f"timeline_{instance.name or 'instance'}")
        storage.write_json(run_dir / "timeline.json", timeline_to_json(timelines))
        storage.write_csv(run_dir / "timeline.csv", timeline_to_csv(timelines))
        output_dir = str(run_dir)
        logger.info(f"Saved timelines for {len(timelines)} routes to {run_dir}")

    return TimelineResponse(routes=[_timeline_model(timeline) for timeline in timelines], output_dir=output_dir)


async def generate_time_matrix(text: str, client: Optional[OSRMClient] = None) -> TimeMatrixResponse:
    instance = parse_instance(text)
    result = await build_time_matrix(instance, client)
    return TimeMatrixResponse(
        source=result.source,
        times=result.times,
        instance_text=serialize_instance(instance, times=result.times),
    )
