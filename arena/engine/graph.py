"""Scenario graph: immutable scenario, node and choice value objects.

A scenario is a linear chain. Nodes are kept in a tuple sorted by order index,
so a node's position in ``Scenario.nodes`` *is* its order index. All structural
checks happen once, in :func:`build_scenario`, when content is loaded.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from arena.engine.errors import (
    DanglingNextNode,
    EmptyChoiceSet,
    InvalidScenario,
    NonContiguousOrder,
    UnknownCultureValue,
)

MAX_CONTEXT_BEHAVIORS = 6


class NodeType(str, enum.Enum):
    REFLECTION = "reflection"
    DECISION = "decision"
    OUTCOME = "outcome"


@dataclass(frozen=True)
class EngagementDimension:
    id: int
    title: str
    description: str = ""


@dataclass(frozen=True)
class CultureValue:
    id: str
    name: str
    description: str = ""


@dataclass(frozen=True)
class BehaviorTag:
    id: int
    name: str


@dataclass(frozen=True)
class Choice:
    id: str
    text: str
    explanation: str
    base_points: int
    engagement_impact: int = 0
    culture_impact: Mapping[str, int] = field(default_factory=dict)
    next_node_id: str | None = None
    positive_tags: tuple[BehaviorTag, ...] = ()
    negative_tags: tuple[BehaviorTag, ...] = ()

    def __post_init__(self) -> None:
        # read-only view; authored content is never mutated during play
        object.__setattr__(self, "culture_impact", MappingProxyType(dict(self.culture_impact)))
        object.__setattr__(self, "positive_tags", tuple(self.positive_tags))
        object.__setattr__(self, "negative_tags", tuple(self.negative_tags))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "explanation": self.explanation,
            "base_points": self.base_points,
            "engagement_impact": self.engagement_impact,
            "culture_impact": dict(self.culture_impact),
            "next_node_id": self.next_node_id,
            "positive_tags": [{"id": t.id, "name": t.name} for t in self.positive_tags],
            "negative_tags": [{"id": t.id, "name": t.name} for t in self.negative_tags],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Choice":
        return cls(
            id=str(data["id"]),
            text=data["text"],
            explanation=data.get("explanation", ""),
            base_points=int(data["base_points"]),
            engagement_impact=int(data.get("engagement_impact", 0)),
            culture_impact={k: int(v) for k, v in (data.get("culture_impact") or {}).items()},
            next_node_id=data.get("next_node_id"),
            positive_tags=tuple(BehaviorTag(int(t["id"]), t["name"]) for t in data.get("positive_tags", [])),
            negative_tags=tuple(BehaviorTag(int(t["id"]), t["name"]) for t in data.get("negative_tags", [])),
        )


@dataclass(frozen=True)
class Node:
    id: str
    type: NodeType
    prompt: str
    order_index: int
    choices: tuple[Choice, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", NodeType(self.type))
        object.__setattr__(self, "choices", tuple(self.choices))

    def choice_by_id(self, choice_id: str) -> Choice | None:
        return next((c for c in self.choices if c.id == choice_id), None)


@dataclass(frozen=True)
class Scenario:
    id: str
    title: str
    description: str
    primary_dimension: EngagementDimension
    culture_value: CultureValue
    nodes: tuple[Node, ...]
    difficulty: str = "Medium"
    estimated_minutes: int = 10
    secondary_dimension: EngagementDimension | None = None
    is_active: bool = True

    def __len__(self) -> int:
        return len(self.nodes)

    def node_at(self, index: int) -> Node | None:
        if 0 <= index < len(self.nodes):
            return self.nodes[index]
        return None

    def node_by_id(self, node_id: str) -> Node | None:
        return next((n for n in self.nodes if n.id == node_id), None)

    def behavior_tag_names(self, limit: int = MAX_CONTEXT_BEHAVIORS) -> list[str]:
        """Distinct tag names across all choices, in authored order."""
        names: list[str] = []
        for node in self.nodes:
            for choice in node.choices:
                for tag in choice.positive_tags + choice.negative_tags:
                    if tag.name and tag.name not in names:
                        names.append(tag.name)
        return names[:limit]


def build_scenario(
    *,
    id: str,
    title: str,
    description: str,
    primary_dimension: EngagementDimension,
    culture_value: CultureValue,
    nodes: Iterable[Node],
    culture_value_ids: Iterable[str] | None = None,
    **extra: Any,
) -> Scenario:
    """Sort nodes by order index and validate the chain; raise DataIntegrityError subclasses."""
    ordered = tuple(sorted(nodes, key=lambda n: n.order_index))
    if not ordered:
        raise InvalidScenario(f"Scenario {id!r} has no nodes", scenario_id=id)

    indices = [n.order_index for n in ordered]
    if indices != list(range(len(ordered))):
        raise NonContiguousOrder(
            f"Scenario {id!r} order indices must be 0..{len(ordered) - 1}, got {indices}",
            scenario_id=id,
        )

    known_values = set(culture_value_ids) if culture_value_ids is not None else None
    by_id = {n.id: n for n in ordered}
    if len(by_id) != len(ordered):
        raise InvalidScenario(f"Scenario {id!r} has duplicate node ids", scenario_id=id)

    decisions = [n for n in ordered if n.type is NodeType.DECISION]
    terminal_decision = decisions[-1] if decisions else None

    for node in ordered:
        if node.type is not NodeType.DECISION:
            if node.choices:
                raise InvalidScenario(
                    f"Node {node.id!r} is a {node.type.value} node but owns choices",
                    scenario_id=id,
                )
            continue
        if not node.choices:
            raise EmptyChoiceSet(f"Decision node {node.id!r} has no choices", scenario_id=id)
        for choice in node.choices:
            _check_next_node(id, node, choice, by_id, is_terminal=node is terminal_decision)
            if known_values is not None:
                unknown = set(choice.culture_impact) - known_values
                if unknown:
                    raise UnknownCultureValue(
                        f"Choice {choice.id!r} references unknown culture values: {sorted(unknown)}",
                        scenario_id=id,
                    )

    return Scenario(
        id=id,
        title=title,
        description=description,
        primary_dimension=primary_dimension,
        culture_value=culture_value,
        nodes=ordered,
        **extra,
    )


def _check_next_node(scenario_id: str, node: Node, choice: Choice, by_id: Mapping[str, Node], is_terminal: bool) -> None:
    if choice.next_node_id is None:
        if not is_terminal:
            raise DanglingNextNode(
                f"Choice {choice.id!r} on non-terminal decision {node.id!r} has no next node",
                scenario_id=scenario_id,
            )
        return
    target = by_id.get(choice.next_node_id)
    if target is None:
        raise DanglingNextNode(
            f"Choice {choice.id!r} points at unknown node {choice.next_node_id!r}",
            scenario_id=scenario_id,
        )
    if target.order_index <= node.order_index:
        raise DanglingNextNode(
            f"Choice {choice.id!r} points backwards ({node.order_index} -> {target.order_index})",
            scenario_id=scenario_id,
        )
