import asyncio

import httpx

from pdptw.parsing import parse_instance
from pdptw.parsing.writer import build_haversine_matrix
from pdptw.services.routing.matrix import build_time_matrix


class DummyOSRM:
    def __init__(self, durations=None, error=None):
        self.durations = durations
        self.error = error

    async def table(self, coordinates):
        if self.error is not None:
            raise self.error
        return {"durations": self.durations, "distances": self.durations}


def test_osrm_durations_become_whole_minutes(instance_no_edges_text):
    instance = parse_instance(instance_no_edges_text)
    client = DummyOSRM([[0, 150, 300], [150, 0, 89], [300, 95, 0]])

    result = asyncio.run(build_time_matrix(instance, client))

    assert result.source == "osrm"
    assert result.times == [[0, 2, 5], [2, 0, 1], [5, 2, 0]]


def test_unreachable_cells_are_filled_from_haversine(instance_no_edges_text):
    instance = parse_instance(instance_no_edges_text)
    client = DummyOSRM([[0, 120, 240], [120, 0, None], [240, 60, 0]])

    result = asyncio.run(build_time_matrix(instance, client))

    assert result.source == "osrm"
    assert result.times[1][2] == build_haversine_matrix(instance)[1][2]


def test_mostly_unreachable_depot_row_falls_back(instance_no_edges_text):
    instance = parse_instance(instance_no_edges_text)
    client = DummyOSRM([[0, None, None], [None, 0, 60], [None, 60, 0]])

    result = asyncio.run(build_time_matrix(instance, client))

    assert result.source == "haversine"
    assert result.times == build_haversine_matrix(instance)


def test_provider_errors_fall_back_to_haversine(instance_no_edges_text):
    instance = parse_instance(instance_no_edges_text)
    client = DummyOSRM(error=httpx.ConnectTimeout("timed out"))

    result = asyncio.run(build_time_matrix(instance, client))

    assert result.source == "haversine"
