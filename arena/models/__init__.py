from arena.models.coaching import CoachingExchangeLog
from arena.models.event import EventLog
from arena.models.progress import ScenarioProgress
from arena.models.reference import BehaviorTag, CultureValue, EngagementDimension
from arena.models.reflection import ReflectionResponse
from arena.models.scenario import Choice, ChoiceBehavior, Scenario, ScenarioNode

__all__ = [
    "BehaviorTag",
    "Choice",
    "ChoiceBehavior",
    "CoachingExchangeLog",
    "CultureValue",
    "EngagementDimension",
    "EventLog",
    "ReflectionResponse",
    "Scenario",
    "ScenarioNode",
    "ScenarioProgress",
]
