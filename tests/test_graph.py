"""Tests for scenario graph construction and load-time validation."""

import pytest

from arena.engine.errors import (
    DanglingNextNode,
    DataIntegrityError,
    EmptyChoiceSet,
    InvalidScenario,
    NonContiguousOrder,
    UnknownCultureValue,
)
from arena.engine.graph import Node, NodeType

from conftest import five_node_nodes, make_choice, make_scenario


def test_nodes_sorted_by_order_index():
    scenario = make_scenario(nodes=list(reversed(five_node_nodes())))
    assert [n.order_index for n in scenario.nodes] == [0, 1, 2, 3, 4]
    assert scenario.node_at(3).id == "n3"
    assert scenario.node_at(5) is None
    assert len(scenario) == 5


def test_culture_impact_is_read_only(scenario):
    choice = scenario.node_at(1).choices[0]
    with pytest.raises(TypeError):
        choice.culture_impact["no-ego"] = 99


def test_behavior_tag_names_distinct_in_authored_order(scenario):
    assert scenario.behavior_tag_names() == ["Care A Lot", "Listen To Learn", "Get Clear From The Start"]
    assert scenario.behavior_tag_names(limit=1) == ["Care A Lot"]


def test_no_nodes():
    with pytest.raises(InvalidScenario):
        make_scenario(nodes=[])


def test_gap_in_order_indices():
    nodes = [Node("a", NodeType.REFLECTION, "p", 0), Node("b", NodeType.OUTCOME, "p", 2)]
    with pytest.raises(NonContiguousOrder):
        make_scenario(nodes=nodes)


def test_duplicate_order_index():
    nodes = [Node("a", NodeType.REFLECTION, "p", 0), Node("b", NodeType.OUTCOME, "p", 0)]
    with pytest.raises(NonContiguousOrder):
        make_scenario(nodes=nodes)


def test_decision_without_choices():
    nodes = [Node("a", NodeType.DECISION, "p", 0), Node("b", NodeType.OUTCOME, "p", 1)]
    with pytest.raises(EmptyChoiceSet) as exc:
        make_scenario(nodes=nodes)
    assert exc.value.scenario_id == "storm"


def test_reflection_with_choices_rejected():
    nodes = [Node("a", NodeType.REFLECTION, "p", 0, (make_choice("x", 1),))]
    with pytest.raises(InvalidScenario):
        make_scenario(nodes=nodes)


def test_next_node_must_exist():
    nodes = [Node("a", NodeType.DECISION, "p", 0, (make_choice("x", 1, next_node_id="missing"),))]
    with pytest.raises(DanglingNextNode):
        make_scenario(nodes=nodes)


def test_next_node_must_point_forward():
    nodes = [
        Node("a", NodeType.REFLECTION, "p", 0),
        Node("b", NodeType.DECISION, "p", 1, (make_choice("x", 1, next_node_id="a"),)),
        Node("c", NodeType.DECISION, "p", 2, (make_choice("y", 1),)),
    ]
    with pytest.raises(DanglingNextNode):
        make_scenario(nodes=nodes)


def test_null_next_only_on_terminal_decision():
    nodes = [
        Node("a", NodeType.DECISION, "p", 0, (make_choice("x", 1),)),
        Node("b", NodeType.DECISION, "p", 1, (make_choice("y", 1),)),
    ]
    with pytest.raises(DanglingNextNode):
        make_scenario(nodes=nodes)


def test_terminal_decision_may_end_the_chain():
    nodes = [
        Node("a", NodeType.REFLECTION, "p", 0),
        Node("b", NodeType.DECISION, "p", 1, (make_choice("y", 1),)),
    ]
    assert len(make_scenario(nodes=nodes)) == 2


def test_unknown_culture_value():
    nodes = [Node("a", NodeType.DECISION, "p", 0, (make_choice("x", 1, culture={"made-up": 2}),))]
    with pytest.raises(UnknownCultureValue):
        make_scenario(nodes=nodes)


def test_integrity_errors_share_a_base():
    with pytest.raises(DataIntegrityError):
        make_scenario(nodes=[])
