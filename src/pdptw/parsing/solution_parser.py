"""Reader for PDPTW solution files."""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from ..config import settings
from ..models.domain import Instance, Route, Solution
from .errors import MissingEdgeError, MissingInstanceError, NoRoutesError, UnknownTokenError
from .tokenizer import split_lines, token_and_value

logger = logging.getLogger(__name__)

ROUTE_LINE = re.compile(r"^Route\s+(\d+)\s*:(.*)$")
INSTANCE_NAME_TOKENS = frozenset({"instance name", "instance"})


def parse_solution(
    text: str,
    instance: Optional[Instance],
    *,
    strict_costs: bool = False,
    palette: Optional[Sequence[str]] = None,
) -> Solution:
    """Build a :class:`Solution` for an already parsed instance.

    Everything after the ``Solution`` line is route data. Missing travel
    times are recorded on each route (``missing_edges``) and excluded from its
    cost; pass ``strict_costs=True`` to raise ``MissingEdgeError`` instead.
    """
    if instance is None or not instance.nodes:
        raise MissingInstanceError()

    lines = split_lines(text)
    name = author = date = reference = ""
    routes: list[Route] = []

    for index, line in enumerate(lines):
        parts = token_and_value(line)
        token = parts[0]
        value = parts[1] if len(parts) > 1 else ""
        normalized = " ".join(token.lower().split())

        if normalized == "":
            continue
        if normalized in INSTANCE_NAME_TOKENS:
            name = re.sub(r"\s+", "", value)
        elif normalized == "authors":
            author = value
        elif normalized == "date":
            date = value
        elif normalized == "reference":
            reference = value
        elif normalized == "solution":
            routes = _read_routes(lines, index + 1, instance, strict_costs)
            break
        else:
            raise UnknownTokenError(token, line_number=index + 1, source="solution")

    if not routes:
        raise NoRoutesError()

    if name and instance.name and name != instance.name:
        logger.warning(f"Solution targets instance '{name}' but the loaded instance is '{instance.name}'")

    solution = Solution(instance_name=name, author=author, date=date, reference=reference, routes=routes)
    assign_route_colors(solution, palette)
    if not solution.cost_complete:
        incomplete = [route.id for route in routes if not route.cost_complete]
        logger.warning(f"Route costs are under-counted for routes {incomplete}: travel times missing")
    logger.info(f"Parsed solution for '{name}' with {len(routes)} routes")
    return solution


def assign_route_colors(solution: Solution, palette: Optional[Sequence[str]] = None) -> None:
    colors = list(palette or settings.route_palette)
    if not colors:
        return
    for index, route in enumerate(solution.routes):
        route.color = colors[index % len(colors)]


def _read_routes(lines: Sequence[str], start: int, instance: Instance, strict_costs: bool) -> list[Route]:
    routes: list[Route] = []
    for index in range(start, len(lines)):
        line = lines[index].strip()
        if not line:
            break
        match = ROUTE_LINE.match(line)
        if not match:
            logger.debug(f"Skipping non-route line {index + 1}: {line!r}")
            continue
        route = _build_route(
            route_id=len(routes),
            label=int(match.group(1)),
            tokens=match.group(2).split(),
            instance=instance,
            strict_costs=strict_costs,
            line_number=index + 1,
        )
        routes.append(route)
    return routes


def _build_route(
    *,
    route_id: int,
    label: int,
    tokens: Sequence[str],
    instance: Instance,
    strict_costs: bool,
    line_number: int,
) -> Route:
    depot = instance.nodes[0]
    route = Route(id=route_id, label=label)
    route.push(depot.id, depot.coords)

    previous = depot.id
    for raw in tokens:
        try:
            node_id = int(raw)
        except ValueError:
            logger.warning(f"Route {label}: ignoring non-integer node id '{raw}' on line {line_number}")
            continue
        node = instance.node(node_id)
        if node is None:
            logger.warning(f"Route {label}: node {node_id} is not in the instance, skipping it")
            route.skipped_nodes.append(node_id)
            continue
        _add_edge_cost(route, previous, node_id, instance, strict_costs, line_number)
        route.push(node_id, node.coords)
        previous = node_id

    _add_edge_cost(route, previous, depot.id, instance, strict_costs, line_number)
    route.push(depot.id, depot.coords)
    return route


def _add_edge_cost(
    route: Route,
    from_id: int,
    to_id: int,
    instance: Instance,
    strict_costs: bool,
    line_number: int,
) -> None:
    travel_time = instance.travel_time(from_id, to_id)
    if travel_time is None:
        if strict_costs:
            raise MissingEdgeError(from_id, to_id, line_number=line_number)
        logger.warning(f"Route {route.label}: no travel time from {from_id} to {to_id}, cost excludes this edge")
        route.missing_edges.append((from_id, to_id))
        return
    route.cost += travel_time
