"""Reader for PDPTW instance files."""

from __future__ import annotations

import logging
import re
from typing import Sequence

from ..models.domain import Instance, Node, NodeRole, Number
from .errors import MalformedSectionError, UnknownTokenError
from .tokenizer import split_lines, token_and_value

logger = logging.getLogger(__name__)

NODE_FIELD_COUNT = 9
IGNORED_TOKENS = frozenset({"COMMENT", "DISTRIBUTION", "DEPOT", "ROUTE-TIME", "TIME-WINDOW"})


def parse_instance(text: str) -> Instance:
    """Build an :class:`Instance` from the text of an instance file.

    Raises ``UnknownTokenError`` for unrecognised keywords and
    ``MalformedSectionError`` when a header value, the NODES block or the
    EDGES block cannot be read. Nothing is returned on failure.
    """
    lines = split_lines(text)
    instance = Instance()
    saw_nodes = False

    index = 0
    while index < len(lines):
        line_number = index + 1
        parts = token_and_value(lines[index])
        token = parts[0]
        value = parts[1] if len(parts) > 1 else ""

        if token == "":
            pass
        elif token == "NAME":
            instance.name = re.sub(r"\s+", "", value)
        elif token == "LOCATION":
            instance.location = value
        elif token == "TYPE":
            instance.kind = value
        elif token == "SIZE":
            instance.size = _header_int(token, value, line_number)
        elif token == "CAPACITY":
            instance.capacity = _header_int(token, value, line_number)
        elif token in IGNORED_TOKENS:
            pass
        elif token == "NODES":
            instance.nodes = _read_nodes(lines, index + 1, instance.size)
            saw_nodes = True
            index += instance.size
        elif token == "EDGES":
            instance.times = _read_edges(lines, index + 1, instance.size)
            index += instance.size
        elif token == "EOF":
            break
        else:
            raise UnknownTokenError(token, line_number=line_number)
        index += 1

    _check_postconditions(instance, saw_nodes)
    logger.info(
        f"Parsed instance '{instance.name}': {len(instance.nodes)} nodes, "
        f"time matrix {'present' if instance.times is not None else 'absent'}"
    )
    return instance


def _header_int(token: str, value: str, line_number: int) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise MalformedSectionError(
            f"{token} expects an integer, got '{value}'.", token=token, line_number=line_number
        ) from exc


def _section_line(lines: Sequence[str], index: int, section: str) -> str:
    if index >= len(lines):
        raise MalformedSectionError(
            f"{section} section ended early: file has only {len(lines)} lines.",
            token=section,
            line_number=index + 1,
        )
    return lines[index]


def _number(value: str) -> Number:
    try:
        return int(value)
    except ValueError:
        return float(value)


def _read_nodes(lines: Sequence[str], start: int, size: int) -> list[Node]:
    if size <= 0:
        raise MalformedSectionError(
            "NODES section found before a positive SIZE.", token="NODES", line_number=start
        )

    nodes: list[Node] = []
    seen: set[int] = set()
    for offset in range(size):
        line_number = start + offset + 1
        fields = _section_line(lines, start + offset, "NODES").split()
        if len(fields) < NODE_FIELD_COUNT:
            raise MalformedSectionError(
                f"Node line needs {NODE_FIELD_COUNT} fields, found {len(fields)}.",
                token="NODES",
                line_number=line_number,
            )
        try:
            node_id = int(fields[0])
            lat, lon = float(fields[1]), float(fields[2])
            demand = int(fields[3])
            earliest, latest = _number(fields[4]), _number(fields[5])
            service_duration = _number(fields[6])
            pickup_ref, delivery_ref = int(fields[7]), int(fields[8])
        except ValueError as exc:
            raise MalformedSectionError(
                f"Node line has a non-numeric field: {exc}", token="NODES", line_number=line_number
            ) from exc

        if node_id in seen:
            raise MalformedSectionError(
                f"Duplicate node id {node_id}.", token="NODES", line_number=line_number
            )
        seen.add(node_id)
        role, pair = _infer_role(node_id, demand, pickup_ref, delivery_ref)
        nodes.append(
            Node(
                id=node_id,
                coords=(lat, lon),
                demand=demand,
                time_window=(earliest, latest),
                service_duration=service_duration,
                role=role,
                pair=pair,
            )
        )
    return nodes


def _infer_role(node_id: int, demand: int, pickup_ref: int, delivery_ref: int) -> tuple[NodeRole, int | None]:
    """Explicit pair references win; the demand sign is only a last resort."""
    if node_id == 0:
        return NodeRole.DEPOT, None
    if pickup_ref > 0:
        return NodeRole.DELIVERY, pickup_ref
    if delivery_ref > 0:
        return NodeRole.PICKUP, delivery_ref
    if demand < 0:
        return NodeRole.DELIVERY, None
    if demand == 0:
        logger.warning(f"Node {node_id} has zero demand and no pair references; treating it as a pickup")
    return NodeRole.PICKUP, None


def _read_edges(lines: Sequence[str], start: int, size: int) -> list[list[Number]]:
    if size <= 0:
        raise MalformedSectionError(
            "EDGES section found before a positive SIZE.", token="EDGES", line_number=start
        )

    times: list[list[Number]] = []
    for offset in range(size):
        line_number = start + offset + 1
        fields = _section_line(lines, start + offset, "EDGES").split()
        try:
            row = [_number(value) for value in fields]
        except ValueError as exc:
            raise MalformedSectionError(
                f"Edge row has a non-numeric value: {exc}", token="EDGES", line_number=line_number
            ) from exc
        if len(row) != size:
            logger.warning(f"Edge row on line {line_number} has {len(row)} values, expected {size}")
        times.append(row)
    return times


def _check_postconditions(instance: Instance, saw_nodes: bool) -> None:
    if not saw_nodes:
        raise MalformedSectionError("Instance file has no NODES section.", token="NODES")
    if len(instance.nodes) != instance.size:
        raise MalformedSectionError(
            f"Expected {instance.size} nodes, parsed {len(instance.nodes)}.", token="SIZE"
        )
    depot = instance.nodes[0]
    if depot.id != 0 or depot.role is not NodeRole.DEPOT:
        raise MalformedSectionError(f"First node must be the depot with id 0, found id {depot.id}.", token="NODES")
