"""Domain models for PDPTW instances, solutions and routes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

Number = Union[int, float]
Coordinate = tuple[float, float]


class NodeRole(str, Enum):
    DEPOT = "depot"
    PICKUP = "pickup"
    DELIVERY = "delivery"


@dataclass(slots=True)
class Node:
    """A single stop. ``pair`` is ``None`` when the node has no partner."""

    id: int
    coords: Coordinate
    demand: int
    time_window: tuple[Number, Number]
    service_duration: Number
    role: NodeRole
    pair: Optional[int] = None

    @property
    def is_depot(self) -> bool:
        return self.role is NodeRole.DEPOT

    @property
    def is_pickup(self) -> bool:
        return self.role is NodeRole.PICKUP

    @property
    def is_delivery(self) -> bool:
        return self.role is NodeRole.DELIVERY


@dataclass(slots=True)
class Instance:
    """Problem definition: metadata, node table and optional travel-time matrix."""

    name: str = ""
    location: str = ""
    kind: str = ""
    size: int = 0
    capacity: int = 0
    nodes: List[Node] = field(default_factory=list)
    times: Optional[List[List[Number]]] = None

    def node(self, node_id: int) -> Optional[Node]:
        if 0 <= node_id < len(self.nodes) and self.nodes[node_id].id == node_id:
            return self.nodes[node_id]
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def travel_time(self, from_id: int, to_id: int) -> Optional[Number]:
        """Return ``times[from_id][to_id]`` or ``None`` when the entry is absent."""
        if self.times is None or from_id < 0 or to_id < 0:
            return None
        if from_id >= len(self.times):
            return None
        row = self.times[from_id]
        if row is None or to_id >= len(row):
            return None
        return row[to_id]

    @property
    def coordinates(self) -> list[Coordinate]:
        return [node.coords for node in self.nodes]

    def pair_issues(self) -> list[str]:
        """Describe every declared pair that breaks the pickup/delivery pairing rules."""
        issues: list[str] = []
        for node in self.nodes:
            if node.is_depot or node.pair is None:
                continue
            partner = self.node(node.pair)
            if partner is None:
                issues.append(f"Node {node.id} references missing partner {node.pair}.")
                continue
            expected = NodeRole.DELIVERY if node.is_pickup else NodeRole.PICKUP
            if partner.role is not expected:
                issues.append(
                    f"Node {node.id} ({node.role.value}) is paired with node {partner.id} "
                    f"which is a {partner.role.value}, expected {expected.value}."
                )
            elif partner.pair is not None and partner.pair != node.id:
                issues.append(
                    f"Node {node.id} is paired with node {partner.id}, "
                    f"but node {partner.id} is paired with node {partner.pair}."
                )
        return issues


@dataclass(slots=True)
class Route:
    """One vehicle itinerary; ``cost`` is fixed at parse time."""

    id: int
    label: Optional[int] = None
    sequence: List[int] = field(default_factory=list)
    path: List[Coordinate] = field(default_factory=list)
    cost: Number = 0
    color: str = "#000000"
    missing_edges: List[tuple[int, int]] = field(default_factory=list)
    skipped_nodes: List[int] = field(default_factory=list)

    def push(self, node_id: int, coords: Coordinate) -> None:
        self.sequence.append(node_id)
        self.path.append(coords)

    @property
    def cost_complete(self) -> bool:
        return not self.missing_edges


@dataclass(slots=True)
class Solution:
    instance_name: str
    author: str
    date: str
    reference: str
    routes: List[Route] = field(default_factory=list)

    def route(self, route_id: int) -> Optional[Route]:
        for route in self.routes:
            if route.id == route_id:
                return route
        return None

    @property
    def cost_complete(self) -> bool:
        return all(route.cost_complete for route in self.routes)

    @property
    def total_cost(self) -> Number:
        return sum(route.cost for route in self.routes)
