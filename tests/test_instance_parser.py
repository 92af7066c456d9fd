import pytest

from pdptw.models.domain import NodeRole
from pdptw.parsing import MalformedSectionError, ParseError, UnknownTokenError, parse_instance


def test_parse_instance_reads_header_nodes_and_edges(instance_text):
    instance = parse_instance(instance_text)

    assert instance.name == "tinyinstance"
    assert instance.location == "test-city"
    assert instance.kind == "PDPTW"
    assert instance.size == 3
    assert instance.capacity == 10
    assert len(instance.nodes) == 3
    assert instance.times == [[0, 3, 4], [3, 0, 5], [4, 5, 0]]


def test_depot_is_node_zero(instance):
    depot = instance.nodes[0]

    assert depot.id == 0
    assert depot.role is NodeRole.DEPOT
    assert depot.pair is None


def test_pickup_and_delivery_pairs_are_symmetric(instance):
    pickup, delivery = instance.node(1), instance.node(2)

    assert pickup.role is NodeRole.PICKUP
    assert delivery.role is NodeRole.DELIVERY
    assert pickup.pair == 2
    assert delivery.pair == 1
    assert instance.pair_issues() == []


def test_node_fields_are_typed(instance):
    node = instance.node(2)

    assert node.coords == (42.02, 2.02)
    assert node.demand == -5
    assert node.time_window == (10, 60)
    assert node.service_duration == 2


def test_missing_edges_leaves_matrix_absent(instance_no_edges_text):
    instance = parse_instance(instance_no_edges_text)

    assert instance.times is None
    assert instance.travel_time(0, 1) is None


def test_unknown_token_raises_and_reports_line():
    text = "NAME : x\nFOO: bar\nSIZE : 1\nNODES\n0 1 1 0 0 10 0 0 0\n"

    with pytest.raises(UnknownTokenError) as excinfo:
        parse_instance(text)

    assert excinfo.value.token == "FOO"
    assert excinfo.value.line_number == 2
    assert str(excinfo.value).startswith("Line 2:")


def test_parse_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse_instance("BOGUS")
    assert issubclass(ParseError, ValueError)


def test_nodes_before_size_is_malformed():
    with pytest.raises(MalformedSectionError):
        parse_instance("NAME : x\nNODES\n0 1 1 0 0 10 0 0 0\n")


def test_non_integer_size_is_malformed():
    with pytest.raises(MalformedSectionError) as excinfo:
        parse_instance("NAME : x\nSIZE : three\n")
    assert excinfo.value.token == "SIZE"


def test_short_node_line_is_malformed():
    text = "NAME : x\nSIZE : 2\nNODES\n0 1 1 0 0 10 0 0 0\n1 1 1 5\n"

    with pytest.raises(MalformedSectionError) as excinfo:
        parse_instance(text)
    assert excinfo.value.line_number == 5


def test_duplicate_node_id_is_malformed():
    text = "NAME : x\nSIZE : 3\nNODES\n0 1 1 0 0 10 0 0 0\n1 1 1 5 0 10 0 0 2\n1 1 1 -5 0 10 0 1 0\n"

    with pytest.raises(MalformedSectionError, match="Duplicate node id 1") as excinfo:
        parse_instance(text)
    assert excinfo.value.line_number == 6


def test_truncated_nodes_section_is_malformed():
    with pytest.raises(MalformedSectionError):
        parse_instance("NAME : x\nSIZE : 3\nNODES\n0 1 1 0 0 10 0 0 0\n")


def test_missing_nodes_section_is_malformed():
    with pytest.raises(MalformedSectionError):
        parse_instance("NAME : x\nSIZE : 3\nEOF\n")


def test_first_node_must_be_depot():
    text = "NAME : x\nSIZE : 1\nNODES\n4 1 1 0 0 10 0 0 0\n"

    with pytest.raises(MalformedSectionError):
        parse_instance(text)


def test_explicit_references_win_over_demand_sign():
    text = (
        "NAME : x\nSIZE : 3\nNODES\n"
        "0 1 1 0 0 10 0 0 0\n"
        "1 1 1 -3 0 10 0 0 2\n"
        "2 1 1 3 0 10 0 1 0\n"
    )
    instance = parse_instance(text)

    assert instance.node(1).role is NodeRole.PICKUP
    assert instance.node(2).role is NodeRole.DELIVERY


def test_demand_sign_used_without_references():
    text = (
        "NAME : x\nSIZE : 3\nNODES\n"
        "0 1 1 0 0 10 0 0 0\n"
        "1 1 1 4 0 10 0 0 0\n"
        "2 1 1 -4 0 10 0 0 0\n"
    )
    instance = parse_instance(text)

    assert instance.node(1).role is NodeRole.PICKUP
    assert instance.node(2).role is NodeRole.DELIVERY
    assert instance.node(1).pair is None


def test_pair_issues_reports_mismatched_partner():
    text = (
        "NAME : x\nSIZE : 3\nNODES\n"
        "0 1 1 0 0 10 0 0 0\n"
        "1 1 1 4 0 10 0 0 2\n"
        "2 1 1 4 0 10 0 0 1\n"
    )
    issues = parse_instance(text).pair_issues()

    assert len(issues) == 2
    assert "expected delivery" in issues[0]


def test_blank_header_lines_are_ignored():
    text = "NAME : x\n\n   \nSIZE : 1\nNODES\n0 1 1 0 0 10 0 0 0\nEOF\n"

    assert parse_instance(text).size == 1


def test_lines_after_eof_are_not_read():
    text = "NAME : x\nSIZE : 1\nNODES\n0 1 1 0 0 10 0 0 0\nEOF\nNOT A TOKEN\n"

    assert len(parse_instance(text).nodes) == 1


def test_fractional_time_windows_are_kept():
    text = "NAME : x\nSIZE : 1\nNODES\n0 1 1 0 0.5 10.25 1.5 0 0\n"
    depot = parse_instance(text).nodes[0]

    assert depot.time_window == (0.5, 10.25)
    assert depot.service_duration == 1.5
