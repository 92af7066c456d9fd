"""Geometry, timeline and cache schemas."""

from __future__ import annotations

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field


class GeometryRequest(BaseModel):
    instance_text: str
    solution_text: str
    mode: Literal["direct", "routed"] = "routed"
    route_ids: Optional[List[int]] = None
    session_id: Optional[str] = Field(
        default=None,
        description="Passes sharing a session supersede each other; defaults to one session per instance and solution text.",
    )


class RouteGeometryModel(BaseModel):
    route_id: int
    color: str
    source: str
    path: List[Tuple[float, float]]
    length_km: float
    warning: Optional[str] = None


class GeometryResponse(BaseModel):
    mode: str
    generation: int
    superseded: bool
    routes: List[RouteGeometryModel]


class TimelineRequest(BaseModel):
    instance_text: str
    solution_text: str
    route_ids: Optional[List[int]] = None
    persist: bool = False


class TimelineEventModel(BaseModel):
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
    time_window: Tuple[float, float]
    violation: bool


class RouteTimelineModel(BaseModel):
    route_id: int
    cost: float
    total_distance: float
    total_duration: float
    max_time: float
    max_load: int
    violations: int
    events: List[TimelineEventModel]


class TimelineResponse(BaseModel):
    routes: List[RouteTimelineModel]
    output_dir: Optional[str] = None


class CacheStatsModel(BaseModel):
    entries: int
    size_kb: float
    hits: int
    misses: int
    hit_rate: float
