"""Tests for the session state machine."""

import json

import pytest

from arena.engine import session as machine
from arena.engine.errors import (
    EmptyReflection,
    InvalidChoice,
    InvalidScenario,
    OutOfOrderNode,
    SessionFinalized,
    SessionNotComplete,
    WrongNodeType,
)
from arena.engine.session import Session, SessionStatus

from conftest import make_choice


def play_through(scenario, first="c30", second="d30"):
    session = machine.start(scenario, "user-1")
    machine.complete_reflection_node(session, scenario, "n0", "I would set clear expectations first.")
    machine.complete_decision_node(session, scenario, "n1", scenario.node_at(1).choice_by_id(first))
    machine.complete_reflection_node(session, scenario, "n2", "Walk through her first 30 days together.")
    machine.complete_decision_node(session, scenario, "n3", scenario.node_at(3).choice_by_id(second))
    machine.complete_outcome_node(session, scenario, "n4")
    return session


class TestStart:
    def test_fresh_session(self, scenario):
        session = machine.start(scenario, "user-1")
        assert session.current_node_index == 0
        assert session.total_score == 0
        assert session.status is SessionStatus.IN_PROGRESS
        assert session.started_at is not None
        assert machine.current_node(session, scenario).id == "n0"

    def test_not_started_status(self):
        assert Session(user_id="u", scenario_id="s").status is SessionStatus.NOT_STARTED

    def test_scenario_without_nodes(self, scenario):
        empty = scenario.__class__(
            id="x", title="t", description="d",
            primary_dimension=scenario.primary_dimension,
            culture_value=scenario.culture_value,
            nodes=(),
        )
        with pytest.raises(InvalidScenario):
            machine.start(empty, "user-1")


class TestFullPlaythrough:
    def test_best_choices_total_80(self, scenario):
        session = play_through(scenario)
        assert session.total_score == 80
        assert session.engagement_score == 1 + 2
        assert session.culture_score == 3 + 1
        assert machine.is_complete(session, scenario)

    def test_index_advances_by_one_each_step(self, scenario):
        session = machine.start(scenario, "user-1")
        seen = [session.current_node_index]
        machine.complete_reflection_node(session, scenario, "n0", "Something thoughtful.")
        seen.append(session.current_node_index)
        machine.complete_decision_node(session, scenario, "n1", scenario.node_at(1).choices[2])
        seen.append(session.current_node_index)
        assert seen == [0, 1, 2]

    def test_tags_deduplicated_first_seen_order(self, scenario):
        session = play_through(scenario)
        assert [t.name for t in session.positive_tags] == ["Care A Lot", "Listen To Learn", "Get Clear From The Start"]
        assert session.negative_tags == []

    def test_negative_tags_flagged(self, scenario):
        session = play_through(scenario, first="cm10", second="d15")
        assert [t.id for t in session.negative_tags] == [1, 12, 6]
        assert session.total_score == 10 - 10 + 10 + 15

    def test_selection_keeps_sibling_set(self, scenario):
        session = play_through(scenario)
        first = session.selections[0]
        assert first.chosen.id == "c30"
        assert [c.id for c in first.siblings] == ["c30", "c10", "cm10"]

    def test_reflection_award_configurable(self, scenario):
        session = machine.start(scenario, "user-1")
        machine.complete_reflection_node(session, scenario, "n0", "text", award=25)
        assert session.total_score == 25


class TestInvalidOperations:
    def test_wrong_node_id(self, scenario):
        session = machine.start(scenario, "user-1")
        with pytest.raises(OutOfOrderNode):
            machine.complete_reflection_node(session, scenario, "n2", "skipping ahead")
        assert session.current_node_index == 0

    def test_wrong_node_type(self, scenario):
        session = machine.start(scenario, "user-1")
        with pytest.raises(WrongNodeType):
            machine.complete_outcome_node(session, scenario, "n0")

    def test_empty_reflection(self, scenario):
        session = machine.start(scenario, "user-1")
        with pytest.raises(EmptyReflection):
            machine.complete_reflection_node(session, scenario, "n0", "   \n ")
        assert session.total_score == 0

    def test_choice_from_another_node(self, scenario):
        session = machine.start(scenario, "user-1")
        machine.complete_reflection_node(session, scenario, "n0", "text")
        with pytest.raises(InvalidChoice):
            machine.complete_decision_node(session, scenario, "n1", scenario.node_at(3).choices[0])

    def test_choice_matched_by_id(self, scenario):
        session = machine.start(scenario, "user-1")
        machine.complete_reflection_node(session, scenario, "n0", "text")
        lookalike = make_choice("c30", 999)
        machine.complete_decision_node(session, scenario, "n1", lookalike)
        # points come from the authored choice, not the caller's copy
        assert session.total_score == 10 + 30

    def test_past_the_end(self, scenario):
        session = play_through(scenario)
        with pytest.raises(OutOfOrderNode):
            machine.complete_outcome_node(session, scenario, "n4")


class TestFinalize:
    def test_finalize_requires_completion(self, scenario):
        session = machine.start(scenario, "user-1")
        with pytest.raises(SessionNotComplete):
            machine.finalize(session, scenario)

    def test_finalize_once(self, scenario):
        session = play_through(scenario)
        machine.finalize(session, scenario)
        assert session.status is SessionStatus.COMPLETED
        with pytest.raises(SessionFinalized):
            machine.finalize(session, scenario)

    def test_finalized_rejects_mutation(self, scenario):
        session = play_through(scenario)
        machine.finalize(session, scenario)
        with pytest.raises(SessionFinalized):
            machine.complete_outcome_node(session, scenario, "n4")


class TestSnapshot:
    def test_round_trip_through_json(self, scenario):
        session = machine.start(scenario, "user-1")
        machine.complete_reflection_node(session, scenario, "n0", "text")
        machine.complete_decision_node(session, scenario, "n1", scenario.node_at(1).choices[0])

        restored = Session.from_snapshot(json.loads(json.dumps(session.to_snapshot())))

        assert restored.current_node_index == 2
        assert restored.total_score == session.total_score
        assert restored.started_at == session.started_at
        assert restored.selections[0].chosen.id == "c30"
        assert dict(restored.selections[0].siblings[0].culture_impact) == {"no-ego": 2, "truth": 1}
        assert [t.name for t in restored.positive_tags] == ["Care A Lot", "Listen To Learn"]

    def test_restored_session_continues(self, scenario):
        session = machine.start(scenario, "user-1")
        machine.complete_reflection_node(session, scenario, "n0", "text")
        restored = Session.from_snapshot(session.to_snapshot())
        machine.complete_decision_node(restored, scenario, "n1", scenario.node_at(1).choices[1])
        assert restored.total_score == 20
