"""SQLAlchemy declarative base and model imports so create_all sees every table."""
from arena.db.session import Base

# Import all models so metadata is complete
from arena.models.coaching import CoachingExchangeLog  # noqa: F401
from arena.models.event import EventLog  # noqa: F401
from arena.models.progress import ScenarioProgress  # noqa: F401
from arena.models.reference import BehaviorTag, CultureValue, EngagementDimension  # noqa: F401
from arena.models.reflection import ReflectionResponse  # noqa: F401
from arena.models.scenario import Choice, ChoiceBehavior, Scenario, ScenarioNode  # noqa: F401

__all__ = [
    "Base",
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
