import pytest

from pdptw.parsing import (
    MissingEdgeError,
    MissingInstanceError,
    NoRoutesError,
    UnknownTokenError,
    parse_instance,
    parse_solution,
)


def test_parse_solution_reads_header_and_route(solution):
    assert solution.instance_name == "tinyinstance"
    assert solution.author == "Test Author"
    assert solution.date == "2024-01-01"
    assert solution.reference == "unit tests"
    assert len(solution.routes) == 1


def test_route_is_closed_at_depot_and_costed(solution, instance):
    route = solution.routes[0]

    assert route.id == 0
    assert route.label == 1
    assert route.sequence == [0, 1, 2, 0]
    assert route.path == [node.coords for node in (instance.nodes[0], instance.nodes[1], instance.nodes[2], instance.nodes[0])]
    # 0->1 (3) + 1->2 (5) + 2->0 (4)
    assert route.cost == 12
    assert route.cost_complete
    assert solution.total_cost == 12


def test_unknown_node_is_skipped_without_raising(instance):
    text = "Instance name : tiny instance\nSolution\nRoute 1 : 1 7 2\n"
    route = parse_solution(text, instance).routes[0]

    assert route.sequence == [0, 1, 2, 0]
    assert route.skipped_nodes == [7]
    assert route.cost == 12


def test_non_integer_node_ids_are_ignored(instance):
    text = "Solution\nRoute 1 : 1 x 2\n"
    route = parse_solution(text, instance).routes[0]

    assert route.sequence == [0, 1, 2, 0]
    assert route.skipped_nodes == []


def test_missing_instance_raises(solution_text):
    with pytest.raises(MissingInstanceError):
        parse_solution(solution_text, None)


def test_solution_without_routes_raises(instance):
    with pytest.raises(NoRoutesError):
        parse_solution("Instance name : tiny instance\nSolution\n", instance)


def test_solution_without_solution_line_raises(instance):
    with pytest.raises(NoRoutesError):
        parse_solution("Instance name : tiny instance\nAuthors : A\n", instance)


def test_unknown_header_token_raises(instance):
    with pytest.raises(UnknownTokenError) as excinfo:
        parse_solution("Instance name : tiny\nVehicles : 3\nSolution\nRoute 1 : 1 2\n", instance)
    assert excinfo.value.line_number == 2


def test_route_scan_stops_at_blank_line(instance):
    text = "Solution\nRoute 1 : 1 2\n\nRoute 2 : 2 1\n"

    assert len(parse_solution(text, instance).routes) == 1


def test_missing_edges_are_recorded(instance_no_edges_text, solution_text):
    instance = parse_instance(instance_no_edges_text)
    solution = parse_solution(solution_text, instance)
    route = solution.routes[0]

    assert route.cost == 0
    assert route.missing_edges == [(0, 1), (1, 2), (2, 0)]
    assert not route.cost_complete
    assert not solution.cost_complete


def test_strict_costs_raise_on_missing_edge(instance_no_edges_text, solution_text):
    instance = parse_instance(instance_no_edges_text)

    with pytest.raises(MissingEdgeError) as excinfo:
        parse_solution(solution_text, instance, strict_costs=True)
    assert (excinfo.value.from_id, excinfo.value.to_id) == (0, 1)


def test_route_colors_cycle_through_palette(instance):
    text = "Solution\nRoute 1 : 1 2\nRoute 2 : 2 1\nRoute 3 : 1\n"
    solution = parse_solution(text, instance, palette=["#111111", "#222222"])

    assert [route.color for route in solution.routes] == ["#111111", "#222222", "#111111"]
    assert [route.id for route in solution.routes] == [0, 1, 2]
    assert [route.label for route in solution.routes] == [1, 2, 3]
