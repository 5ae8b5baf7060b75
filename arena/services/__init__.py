from arena.services.audit import SqlCoachingLog, SqlEventSink, SqlReflectionStore
from arena.services.content import SqlScenarioProvider
from arena.services.progress_store import SqlSessionStore
from arena.services.registry import PlayRegistry, build_play_services
from arena.services.seeding import seed_scenarios

__all__ = [
    "PlayRegistry",
    "SqlCoachingLog",
    "SqlEventSink",
    "SqlReflectionStore",
    "SqlScenarioProvider",
    "SqlSessionStore",
    "build_play_services",
    "seed_scenarios",
]
