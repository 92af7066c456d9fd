"""Instance and solution request/response schemas."""

from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field


class InstanceTextRequest(BaseModel):
    text: str = Field(..., description="Raw instance file content.")


class NodeModel(BaseModel):
    id: int
    coords: Tuple[float, float]
    demand: int
    time_window: Tuple[float, float]
    service_duration: float
    role: str
    pair: Optional[int] = None


class InstanceModel(BaseModel):
    name: str
    location: str
    kind: str
    size: int
    capacity: int
    has_time_matrix: bool
    nodes: List[NodeModel]
    pair_issues: List[str] = Field(default_factory=list)


class TimeMatrixResponse(BaseModel):
    source: str = Field(..., description="'osrm' or 'haversine'.")
    times: List[List[int]]
    instance_text: str


class SolutionTextRequest(BaseModel):
    instance_text: str
    solution_text: str
    strict_costs: bool = Field(
        default=False,
        description="Fail the parse when a route uses an edge missing from the time matrix.",
    )


class RouteModel(BaseModel):
    id: int
    label: Optional[int] = None
    sequence: List[int]
    path: List[Tuple[float, float]]
    cost: float
    color: str
    cost_complete: bool
    missing_edges: List[Tuple[int, int]] = Field(default_factory=list)
    skipped_nodes: List[int] = Field(default_factory=list)


class SolutionModel(BaseModel):
    instance_name: str
    author: str
    date: str
    reference: str
    cost_complete: bool
    total_cost: float
    routes: List[RouteModel]
