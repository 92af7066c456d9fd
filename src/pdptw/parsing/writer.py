"""Serialize instances back into the instance file format."""

from __future__ import annotations

from typing import Optional

from ..config import settings
from ..models.domain import Instance, Node, NodeRole, Number
from ..services.geospatial import haversine_km


def node_line(node: Node) -> str:
    pickup_ref = node.pair if node.role is NodeRole.DELIVERY and node.pair is not None else 0
    delivery_ref = node.pair if node.role is NodeRole.PICKUP and node.pair is not None else 0
    lat, lon = node.coords
    earliest, latest = node.time_window
    return (
        f"{node.id} {lat:.6f} {lon:.6f} {node.demand} {earliest} {latest} "
        f"{node.service_duration} {pickup_ref} {delivery_ref}"
    )


def build_haversine_matrix(instance: Instance, speed_kmh: Optional[float] = None) -> list[list[int]]:
    """Whole-minute travel times estimated from straight-line distance (minimum 1 off the diagonal)."""
    speed = speed_kmh or settings.matrix_fallback_speed_kmh
    matrix: list[list[int]] = []
    for origin in instance.nodes:
        row: list[int] = []
        for destination in instance.nodes:
            if origin.id == destination.id:
                row.append(0)
                continue
            km = haversine_km(*origin.coords, *destination.coords)
            row.append(max(1, round(km / speed * 60)))
        matrix.append(row)
    return matrix


def serialize_instance(
    instance: Instance,
    *,
    times: Optional[list[list[Number]]] = None,
    include_edges: bool = True,
) -> str:
    lines = [
        f"NAME : {instance.name}",
        f"LOCATION : {instance.location}",
        f"TYPE : {instance.kind or 'PDPTW'}",
        f"SIZE : {len(instance.nodes)}",
        f"CAPACITY : {instance.capacity}",
        "NODES",
    ]
    lines.extend(node_line(node) for node in instance.nodes)

    if include_edges:
        matrix = times if times is not None else instance.times
        if matrix is None:
            matrix = build_haversine_matrix(instance)
        lines.append("EDGES")
        lines.extend(" ".join(str(value) for value in row) for row in matrix)

    lines.append("EOF")
    return "\n".join(lines)
