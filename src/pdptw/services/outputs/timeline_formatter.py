"""Serializers for route timelines."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict
from typing import Sequence

from ..timeline.simulator import RouteTimeline


def timeline_to_json(timelines: Sequence[RouteTimeline]) -> dict:
    return {
        "routes": [
            {
                "route_id": timeline.route_id,
                "cost": timeline.cost,
                "total_distance": timeline.total_distance,
                "total_duration": timeline.total_duration,
                "max_time": timeline.max_time,
                "max_load": timeline.max_load,
                "violations": timeline.violations,
                "events": [asdict(event) for event in timeline.events],
            }
            for timeline in timelines
        ],
    }


def timeline_to_csv(timelines: Sequence[RouteTimeline]) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "route_id",
        "sequence_index",
        "node_id",
        "role",
        "travel_time",
        "distance",
        "arrival_time",
        "wait_time",
        "service_start",
        "service_end",
        "load",
        "earliest",
        "latest",
        "violation",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for timeline in timelines:
        for event in timeline.events:
            writer.writerow(
                {
                    "route_id": timeline.route_id,
                    "sequence_index": event.sequence_index,
                    "node_id": event.node_id,
                    "role": event.role,
                    "travel_time": event.travel_time,
                    "distance": event.distance,
                    "arrival_time": event.arrival_time,
                    "wait_time": event.wait_time,
                    "service_start": event.service_start,
                    "service_end": event.service_end,
                    "load": event.load,
                    "earliest": event.time_window[0],
                    "latest": event.time_window[1],
                    "violation": event.violation,
                }
            )
    return buffer.getvalue()
