from arena.schemas.play import (
    CoachingRequestSchema,
    CoachingResponseSchema,
    DecisionRequestSchema,
    DecisionResponseSchema,
    FeedbackSchema,
    NodeSchema,
    OutcomeRequestSchema,
    ReflectionRequestSchema,
    ReviewSchema,
    SelectionSchema,
    SessionStateSchema,
    StartResponseSchema,
)
from arena.schemas.scenario import ScenarioDetailSchema, ScenarioSummarySchema

__all__ = [
    "CoachingRequestSchema",
    "CoachingResponseSchema",
    "DecisionRequestSchema",
    "DecisionResponseSchema",
    "FeedbackSchema",
    "NodeSchema",
    "OutcomeRequestSchema",
    "ReflectionRequestSchema",
    "ReviewSchema",
    "ScenarioDetailSchema",
    "ScenarioSummarySchema",
    "SelectionSchema",
    "SessionStateSchema",
    "StartResponseSchema",
]
