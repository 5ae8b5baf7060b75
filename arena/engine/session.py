"""Session state machine: forward-only progress through a scenario's node chain.

Every completion must name the node at the session's current index; the index
then moves forward by exactly one. There is no way back. Once finalized a
session rejects all further mutation.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from arena.engine.errors import (
    EmptyReflection,
    InvalidChoice,
    InvalidScenario,
    OutOfOrderNode,
    SessionFinalized,
    SessionNotComplete,
    WrongNodeType,
)
from arena.engine.graph import BehaviorTag, Choice, Node, NodeType, Scenario
from arena.engine.scoring import REFLECTION_AWARD, culture_sum, score_choice

logger = logging.getLogger(__name__)


class SessionStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ReflectionRecord:
    node_id: str
    text: str


@dataclass(frozen=True)
class ChoiceSelection:
    """A decision as it was made, with the full sibling set that was on offer."""

    node_id: str
    chosen: Choice
    siblings: tuple[Choice, ...]


@dataclass
class Session:
    user_id: str
    scenario_id: str
    current_node_index: int = 0
    total_score: int = 0
    engagement_score: int = 0
    culture_score: int = 0
    reflections: list[ReflectionRecord] = field(default_factory=list)
    selections: list[ChoiceSelection] = field(default_factory=list)
    positive_tags: list[BehaviorTag] = field(default_factory=list)
    negative_tags: list[BehaviorTag] = field(default_factory=list)
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def status(self) -> SessionStatus:
        if self.completed_at is not None:
            return SessionStatus.COMPLETED
        if self.started_at is None:
            return SessionStatus.NOT_STARTED
        return SessionStatus.IN_PROGRESS

    @property
    def is_finalized(self) -> bool:
        return self.completed_at is not None

    # ---------- snapshots ----------

    def to_snapshot(self) -> dict[str, Any]:
        """JSON-compatible copy of the full session state."""
        return {
            "user_id": self.user_id,
            "scenario_id": self.scenario_id,
            "current_node_index": self.current_node_index,
            "total_score": self.total_score,
            "engagement_score": self.engagement_score,
            "culture_score": self.culture_score,
            "reflections": [{"node_id": r.node_id, "text": r.text} for r in self.reflections],
            "selections": [
                {
                    "node_id": s.node_id,
                    "chosen_id": s.chosen.id,
                    "siblings": [c.to_dict() for c in s.siblings],
                }
                for s in self.selections
            ],
            "positive_tags": [{"id": t.id, "name": t.name} for t in self.positive_tags],
            "negative_tags": [{"id": t.id, "name": t.name} for t in self.negative_tags],
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }

    @classmethod
    def from_snapshot(cls, data: Mapping[str, Any]) -> "Session":
        selections = []
        for raw in data.get("selections", []):
            siblings = tuple(Choice.from_dict(c) for c in raw["siblings"])
            chosen = next(c for c in siblings if c.id == raw["chosen_id"])
            selections.append(ChoiceSelection(node_id=raw["node_id"], chosen=chosen, siblings=siblings))
        return cls(
            user_id=str(data["user_id"]),
            scenario_id=str(data["scenario_id"]),
            current_node_index=int(data.get("current_node_index", 0)),
            total_score=int(data.get("total_score", 0)),
            engagement_score=int(data.get("engagement_score", 0)),
            culture_score=int(data.get("culture_score", 0)),
            reflections=[ReflectionRecord(r["node_id"], r["text"]) for r in data.get("reflections", [])],
            selections=selections,
            positive_tags=[BehaviorTag(int(t["id"]), t["name"]) for t in data.get("positive_tags", [])],
            negative_tags=[BehaviorTag(int(t["id"]), t["name"]) for t in data.get("negative_tags", [])],
            started_at=_parse_ts(data.get("started_at")),
            completed_at=_parse_ts(data.get("completed_at")),
        )


def _parse_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------- transitions ----------

def start(scenario: Scenario, user_id: str) -> Session:
    """Fresh session at node 0 with zeroed cumulatives."""
    if not scenario.nodes:
        raise InvalidScenario(f"Scenario {scenario.id!r} has no nodes", scenario_id=scenario.id)
    session = Session(user_id=str(user_id), scenario_id=scenario.id, started_at=_utcnow())
    logger.info("Session started: user=%s scenario=%s", session.user_id, scenario.id)
    return session


def current_node(session: Session, scenario: Scenario) -> Node | None:
    return scenario.node_at(session.current_node_index)


def is_complete(session: Session, scenario: Scenario) -> bool:
    return session.current_node_index >= len(scenario.nodes)


def require_current(session: Session, scenario: Scenario, node_id: str, expected: NodeType) -> Node:
    """The current node, provided it is ``node_id`` and of the expected type."""
    return _require_current(session, scenario, node_id, expected)


def complete_reflection_node(
    session: Session,
    scenario: Scenario,
    node_id: str,
    response_text: str,
    award: int = REFLECTION_AWARD,
) -> Session:
    node = _require_current(session, scenario, node_id, NodeType.REFLECTION)
    text = (response_text or "").strip()
    if not text:
        raise EmptyReflection(f"Reflection for node {node.id!r} is empty")
    session.reflections.append(ReflectionRecord(node_id=node.id, text=text))
    session.total_score += award
    _advance(session)
    return session


def complete_decision_node(session: Session, scenario: Scenario, node_id: str, chosen: Choice) -> Session:
    node = _require_current(session, scenario, node_id, NodeType.DECISION)
    # membership by id; the object may come from a deserialised request
    offered = node.choice_by_id(chosen.id)
    if offered is None:
        raise InvalidChoice(f"Choice {chosen.id!r} does not belong to node {node.id!r}")

    session.total_score += score_choice(offered)
    session.engagement_score += offered.engagement_impact
    session.culture_score += culture_sum(offered)
    _union_tags(session.positive_tags, offered.positive_tags)
    _union_tags(session.negative_tags, offered.negative_tags)
    session.selections.append(ChoiceSelection(node_id=node.id, chosen=offered, siblings=node.choices))
    _advance(session)
    return session


def complete_outcome_node(session: Session, scenario: Scenario, node_id: str) -> Session:
    _require_current(session, scenario, node_id, NodeType.OUTCOME)
    _advance(session)
    return session


def finalize(session: Session, scenario: Scenario) -> Session:
    if session.is_finalized:
        raise SessionFinalized("Session is already finalized")
    if not is_complete(session, scenario):
        raise SessionNotComplete(
            f"Session is at node {session.current_node_index} of {len(scenario.nodes)}"
        )
    session.completed_at = _utcnow()
    logger.info(
        "Session finalized: user=%s scenario=%s total=%s",
        session.user_id, session.scenario_id, session.total_score,
    )
    return session


def _require_current(session: Session, scenario: Scenario, node_id: str, expected: NodeType) -> Node:
    if session.is_finalized:
        raise SessionFinalized("Cannot mutate a finalized session")
    node = current_node(session, scenario)
    if node is None:
        raise OutOfOrderNode("Session has already passed the last node")
    if node.id != node_id:
        raise OutOfOrderNode(
            f"Expected node {node.id!r} at index {session.current_node_index}, got {node_id!r}"
        )
    if node.type is not expected:
        raise WrongNodeType(f"Node {node.id!r} is a {node.type.value} node, not {expected.value}")
    return node


def _advance(session: Session) -> None:
    session.current_node_index += 1


def _union_tags(accumulated: list[BehaviorTag], new_tags: tuple[BehaviorTag, ...]) -> None:
    seen = {t.id for t in accumulated}
    for tag in new_tags:
        if tag.id not in seen:
            accumulated.append(tag)
            seen.add(tag.id)
