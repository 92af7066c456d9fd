"""Chronological schedule of a route: arrivals, waiting, service and load per stop."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ...config import settings
from ...models.domain import Instance, Number, Route, Solution
from ..geospatial import haversine_km

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TimelineEvent:
    node_id: int
    sequence_index: int
    role: str
    travel_time: float
    distance: float
    arrival_time: float
    wait_time: float
    service_start: float
    service_end: float
    demand: int
    load: int
    time_window: tuple[Number, Number]
    violation: bool


@dataclass(slots=True)
class RouteTimeline:
    route_id: int
    cost: Number
    events: List[TimelineEvent] = field(default_factory=list)
    total_distance: float = 0.0
    total_duration: float = 0.0
    max_time: float = 0.0
    max_load: int = 0
    violations: int = 0


def simulate(
    route: Route,
    instance: Instance,
    *,
    average_speed_kmh: Optional[float] = None,
    time_units_per_hour: Optional[float] = None,
) -> RouteTimeline:
    """Walk ``route.sequence`` and compute each stop's schedule.

    Travel times come from the instance matrix when present, otherwise from the
    great-circle distance at ``average_speed_kmh``. Node ids missing from the
    instance are skipped. Never raises.
    """
    speed = average_speed_kmh or settings.average_speed_kmh
    units_per_hour = time_units_per_hour or settings.time_units_per_hour

    timeline = RouteTimeline(route_id=route.id, cost=route.cost)
    current_time = 0.0
    current_load = 0
    latest_bound = 0.0
    previous = None

    for index, node_id in enumerate(route.sequence):
        node = instance.node(node_id)
        if node is None:
            logger.debug(f"Route {route.id}: node {node_id} not in instance, skipped in timeline")
            continue

        travel_time = 0.0
        distance = 0.0
        if index > 0 and previous is not None:
            matrix_time = instance.travel_time(previous.id, node.id)
            if matrix_time is not None:
                travel_time = float(matrix_time)
                distance = travel_time / units_per_hour * speed
            else:
                distance = haversine_km(*previous.coords, *node.coords)
                travel_time = distance / speed * units_per_hour

        earliest, latest = node.time_window if node.time_window else (0, 0)
        earliest = earliest or 0
        latest = latest if latest is not None else earliest
        service_duration = node.service_duration or 0

        arrival_time = current_time + travel_time
        wait_time = max(0.0, earliest - arrival_time)
        service_start = max(arrival_time, earliest)
        service_end = service_start + service_duration
        current_load += node.demand or 0

        violation = arrival_time > latest
        timeline.events.append(
            TimelineEvent(
                node_id=node.id,
                sequence_index=index,
                role=node.role.value,
                travel_time=travel_time,
                distance=distance,
                arrival_time=arrival_time,
                wait_time=wait_time,
                service_start=service_start,
                service_end=service_end,
                demand=node.demand or 0,
                load=current_load,
                time_window=(earliest, latest),
                violation=violation,
            )
        )

        timeline.total_distance += distance
        timeline.max_load = max(timeline.max_load, current_load)
        timeline.violations += int(violation)
        latest_bound = max(latest_bound, latest)
        current_time = service_end
        previous = node

    timeline.total_duration = current_time
    timeline.max_time = max(current_time, latest_bound)
    return timeline


def summarize(solution: Solution, instance: Instance) -> list[RouteTimeline]:
    """Timelines for every route that visits at least one customer."""
    return [simulate(route, instance) for route in solution.routes if len(route.sequence) > 2]
