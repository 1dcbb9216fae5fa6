import os
import sys

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from locapp.utils.location_patterns import (
    HierarchyPattern,
    LocationNode,
    build_children,
    build_nested_nodes,
    expand_pattern,
    is_hierarchy_token,
    match_rule,
    parse_count,
    parse_location_string_advanced,
)


def _names(nodes):
    return [node.name for node in nodes]


def test_combined_pattern_pads_to_width_of_count():
    assert expand_pattern("PRT{2}-[3]") == [
        "PRT1-A",
        "PRT1-B",
        "PRT1-C",
        "PRT2-A",
        "PRT2-B",
        "PRT2-C",
    ]


def test_numeric_pattern_with_two_digit_count():
    expanded = expand_pattern("A{10}")
    assert len(expanded) == 10
    assert expanded[0] == "A01"
    assert expanded[8] == "A09"
    assert expanded[-1] == "A10"


def test_combined_pattern_with_empty_middle_and_prefix():
    assert expand_pattern("PRT{2}[2]") == ["PRT1A", "PRT1B", "PRT2A", "PRT2B"]
    assert expand_pattern("{2}[1]") == ["1A", "2A"]


def test_letter_patterns():
    assert expand_pattern("SH[3]") == ["SHA", "SHB", "SHC"]
    assert expand_pattern("[2]") == ["A", "B"]


def test_numeric_pattern_keeps_prefix_and_suffix():
    assert expand_pattern("Z{3}-X") == ["Z1-X", "Z2-X", "Z3-X"]
    assert expand_pattern("{2}") == ["1", "2"]


def test_unparsable_counts_default_to_one():
    assert expand_pattern("A{x}") == ["A1"]
    assert expand_pattern("A{0}") == ["A1"]
    assert expand_pattern("B[?]") == ["BA"]
    assert expand_pattern("C{3x}") == ["C1", "C2", "C3"]


def test_negative_count_expands_to_nothing():
    assert expand_pattern("A{-2}") == []


def test_literal_passthrough_does_not_raise():
    assert expand_pattern("JUSTNAME") == ["JUSTNAME"]
    assert expand_pattern("") == [""]
    assert expand_pattern("A(B") == ["A(B"]


def test_hierarchy_pattern_returns_descriptor():
    expanded = expand_pattern("20{2}*(+-[2])")
    assert expanded == HierarchyPattern(parents=["201", "202"], children_pattern="+-[2]")


@pytest.mark.parametrize(
    "token, rule",
    [
        ("20{2}*(+-[2])", "hierarchy"),
        ("PRT{2}-[3]", "combined"),
        ("SH[3]", "prefixed_letters"),
        ("[3]", "letters"),
        ("Z{3}", "numeric"),
        ("JUSTNAME", "literal"),
        ("A(B, C)", "literal"),
    ],
)
def test_rules_are_tried_in_order(token, rule):
    assert match_rule(token) == rule


def test_is_hierarchy_token():
    assert is_hierarchy_token("R{2}*(+[2])") is True
    assert is_hierarchy_token("R{2}") is False
    assert is_hierarchy_token("A*(B)*(C)") is True


def test_parse_count():
    assert parse_count("12") == 12
    assert parse_count(" 4 ") == 4
    assert parse_count("") == 1
    assert parse_count(None) == 1
    assert parse_count("abc") == 1


def test_hierarchy_builds_children_per_parent():
    nodes = parse_location_string_advanced("20{2}*(+-[2])")
    assert _names(nodes) == ["201", "202"]
    assert _names(nodes[0].children) == ["201-A", "201-B"]
    assert _names(nodes[1].children) == ["202-A", "202-B"]
    assert nodes[0].children[0].children == []


def test_hierarchy_children_without_separator():
    nodes = parse_location_string_advanced("R{2}*(+[3])")
    assert _names(nodes[1].children) == ["R2A", "R2B", "R2C"]


def test_hierarchy_with_literal_base():
    nodes = parse_location_string_advanced("R*(+-[2])")
    assert nodes == [
        LocationNode(
            name="R",
            children=[LocationNode(name="R-A"), LocationNode(name="R-B")],
        )
    ]


def test_unknown_children_pattern_yields_no_children():
    nodes = parse_location_string_advanced("R{2}*(Q)")
    assert _names(nodes) == ["R1", "R2"]
    assert all(node.children == [] for node in nodes)
    assert build_children("R1", "+-[0]") == []


def test_hierarchy_nodes_come_before_flat_names():
    nodes = parse_location_string_advanced("EXTRA, Z{2}*(+[2])")
    assert _names(nodes) == ["Z1", "Z2", "EXTRA"]
    assert _names(nodes[0].children) == ["Z1A", "Z1B"]
    assert nodes[2].children == []


def test_flat_patterns_keep_expansion_order():
    nodes = parse_location_string_advanced("PRT{2}-[3], X{2}, Y[2], Z")
    assert _names(nodes) == [
        "PRT1-A",
        "PRT1-B",
        "PRT1-C",
        "PRT2-A",
        "PRT2-B",
        "PRT2-C",
        "X1",
        "X2",
        "YA",
        "YB",
        "Z",
    ]
    assert all(node.children == [] for node in nodes)


def test_literal_parentheses_build_nested_tree():
    nodes = parse_location_string_advanced("A(B, C(D))")
    assert nodes == [
        LocationNode(
            name="A",
            children=[
                LocationNode(name="B"),
                LocationNode(name="C", children=[LocationNode(name="D")]),
            ],
        )
    ]


def test_ranges_expand_before_parentheses_are_scanned():
    # "W(Z{2})" expands to "W(Z1)" and "W(Z2)" first, so W appears twice.
    nodes = parse_location_string_advanced("W(Z{2}), X")
    assert _names(nodes) == ["W", "W", "X"]
    assert _names(nodes[0].children) == ["Z1"]
    assert _names(nodes[1].children) == ["Z2"]


def test_empty_tokens_are_dropped():
    assert parse_location_string_advanced("") == []
    assert parse_location_string_advanced(" , ,  ") == []
    assert _names(parse_location_string_advanced("A, , B,")) == ["A", "B"]


def test_unclosed_scope_keeps_children_attached():
    nodes = build_nested_nodes("A(B, C")
    assert _names(nodes) == ["A"]
    assert _names(nodes[0].children) == ["B", "C"]


def test_stray_close_stays_at_root():
    nodes = build_nested_nodes("A), B")
    assert _names(nodes) == ["A", "B"]


def test_open_without_name_is_ignored():
    assert build_nested_nodes("(A)") == [LocationNode(name="A")]


def test_location_node_to_dict():
    node = LocationNode(name="A", children=[LocationNode(name="A-A")])
    assert node.to_dict() == {
        "name": "A",
        "children": [{"name": "A-A", "children": []}],
    }
