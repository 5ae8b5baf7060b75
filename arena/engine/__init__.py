from arena.engine.coaching import CoachingContext, CoachingDialogue, CoachingExchange, CoachingService
from arena.engine.feedback import DecisionFeedback, DecisionFeedbackResolver, FeedbackKind
from arena.engine.graph import (
    BehaviorTag,
    Choice,
    CultureValue,
    EngagementDimension,
    Node,
    NodeType,
    Scenario,
    build_scenario,
)
from arena.engine.persistence import BestEffort, EngineEvent, EventKind, ResumeOffer
from arena.engine.play import PlayServices, ScenarioPlay, begin_play, restart_play, resume_play
from arena.engine.scoring import find_optimal, score_choice
from arena.engine.session import Session, SessionStatus

__all__ = [
    "BehaviorTag",
    "BestEffort",
    "Choice",
    "CoachingContext",
    "CoachingDialogue",
    "CoachingExchange",
    "CoachingService",
    "CultureValue",
    "DecisionFeedback",
    "DecisionFeedbackResolver",
    "EngagementDimension",
    "EngineEvent",
    "EventKind",
    "FeedbackKind",
    "Node",
    "NodeType",
    "PlayServices",
    "ResumeOffer",
    "Scenario",
    "ScenarioPlay",
    "Session",
    "SessionStatus",
    "begin_play",
    "build_scenario",
    "find_optimal",
    "restart_play",
    "resume_play",
    "score_choice",
]
