"""Pydantic schemas for playing a scenario: requests, session state, feedback."""
from datetime import datetime

from pydantic import BaseModel, Field

from arena.engine.feedback import DecisionFeedback
from arena.engine.graph import Node
from arena.engine.play import ScenarioPlay
from arena.engine.session import ChoiceSelection


class ChoiceOptionSchema(BaseModel):
    # points stay hidden until the choice is made
    id: str
    text: str


class NodeSchema(BaseModel):
    id: str
    type: str
    prompt: str
    order_index: int
    choices: list[ChoiceOptionSchema] = []

    @classmethod
    def from_node(cls, node: Node) -> "NodeSchema":
        return cls(
            id=node.id,
            type=node.type.value,
            prompt=node.prompt,
            order_index=node.order_index,
            choices=[ChoiceOptionSchema(id=c.id, text=c.text) for c in node.choices],
        )


class SessionStateSchema(BaseModel):
    scenario_id: str
    status: str
    current_node_index: int
    total_nodes: int
    current_node: NodeSchema | None = None
    total_score: int
    engagement_score: int
    culture_score: int
    positive_behaviors: list[str]
    negative_behaviors: list[str]
    progress_saved: bool
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_play(cls, play: ScenarioPlay) -> "SessionStateSchema":
        session = play.session
        node = play.current_node
        return cls(
            scenario_id=session.scenario_id,
            status=session.status.value,
            current_node_index=session.current_node_index,
            total_nodes=len(play.scenario),
            current_node=NodeSchema.from_node(node) if node is not None else None,
            total_score=session.total_score,
            engagement_score=session.engagement_score,
            culture_score=session.culture_score,
            positive_behaviors=[t.name for t in session.positive_tags],
            negative_behaviors=[t.name for t in session.negative_tags],
            progress_saved=play.progress_saved,
            started_at=session.started_at,
            completed_at=session.completed_at,
        )


class StartResponseSchema(BaseModel):
    """Either a live session, or notice that an unfinished one can be resumed."""

    resume_available: bool
    session: SessionStateSchema | None = None
    saved_node_index: int | None = None
    saved_total_score: int | None = None


class ReflectionRequestSchema(BaseModel):
    node_id: str
    response_text: str


class CoachingRequestSchema(BaseModel):
    text: str


class CoachingResponseSchema(BaseModel):
    node_id: str
    exchange_number: int
    coach_message: str
    can_continue: bool
    max_exchanges_reached: bool


class DecisionRequestSchema(BaseModel):
    node_id: str
    choice_id: str


class SelectionSchema(BaseModel):
    node_id: str
    choice_id: str
    choice_text: str
    explanation: str
    points: int

    @classmethod
    def from_selection(cls, selection: ChoiceSelection, points: int) -> "SelectionSchema":
        return cls(
            node_id=selection.node_id,
            choice_id=selection.chosen.id,
            choice_text=selection.chosen.text,
            explanation=selection.chosen.explanation,
            points=points,
        )


class DecisionResponseSchema(BaseModel):
    selection: SelectionSchema
    session: SessionStateSchema


class OutcomeRequestSchema(BaseModel):
    node_id: str


class FeedbackSchema(BaseModel):
    node_id: str
    kind: str
    is_optimal: bool
    message: str
    chosen_choice_id: str
    best_choice_id: str
    best_choice_preview: str | None = None

    @classmethod
    def from_feedback(cls, node_id: str, feedback: DecisionFeedback) -> "FeedbackSchema":
        return cls(
            node_id=node_id,
            kind=feedback.kind.value,
            is_optimal=feedback.is_optimal,
            message=feedback.message,
            chosen_choice_id=feedback.chosen.id,
            best_choice_id=feedback.optimal.id,
            best_choice_preview=feedback.optimal_preview,
        )


class ReviewSchema(BaseModel):
    session: SessionStateSchema
    decisions: list[FeedbackSchema] = Field(default_factory=list)
