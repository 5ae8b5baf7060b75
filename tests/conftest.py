"""
Shared test fixtures for the Level Up Arena test suite.

Provides:
- MockLLMProvider: deterministic text-generation stub (no API key needed)
- In-memory fakes for the session store, reflection store, coaching log, event sink
- A five-node scenario (Reflection, Decision, Reflection, Decision, Outcome)
- Temporary-file SQLite session factory for the SQL collaborators and the API
"""

import asyncio
import os
import random
from collections import deque
from typing import Any

import pytest

# Set test environment BEFORE any arena imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ANTHROPIC_API_KEY", "")

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from arena.db.base import Base
from arena.engine.coaching import CoachingService
from arena.engine.graph import (
    BehaviorTag,
    Choice,
    CultureValue,
    EngagementDimension,
    Node,
    NodeType,
    build_scenario,
)
from arena.engine.play import PlayServices
from arena.llm.provider import LLMProvider, LLMResponse

CULTURE_IDS = {"no-ego", "better", "relentless", "truth"}

CARE = BehaviorTag(1, "Care A Lot")
CLARITY = BehaviorTag(6, "Get Clear From The Start")
LISTEN = BehaviorTag(12, "Listen To Learn")

# ---------------------------------------------------------------------------
# MockLLMProvider
# ---------------------------------------------------------------------------


class MockLLMProvider(LLMProvider):
    """Provider that returns canned responses from a queue.

    ``fail_with`` makes every call raise; ``delay`` makes every call sleep first.
    """

    def __init__(self, fail_with: Exception | None = None, delay: float = 0.0):
        super().__init__(api_key="mock-key", default_model="mock-model")
        self._response_queue: deque[LLMResponse] = deque()
        self._call_history: list[dict[str, Any]] = []
        self.fail_with = fail_with
        self.delay = delay

    def queue_response(self, content: str = "", **kwargs):
        self._response_queue.append(LLMResponse(content=content, model="mock-model", **kwargs))

    @property
    def call_history(self) -> list[dict[str, Any]]:
        return self._call_history

    @property
    def name(self) -> str:
        return "mock"

    def get_default_model(self) -> str:
        return "mock-model"

    async def complete(self, messages, system=None, model=None, max_tokens=300, temperature=0.4) -> LLMResponse:
        self._call_history.append({"messages": messages, "system": system, "max_tokens": max_tokens})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        if self._response_queue:
            return self._response_queue.popleft()
        return LLMResponse(content="mock response", model="mock-model")

    def _init_client(self):
        pass  # No real client needed


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class FakeSessionStore:
    """Keeps one incomplete snapshot per (user, scenario) and a list of completed sessions."""

    def __init__(self):
        self.incomplete: dict[tuple[str, str], dict] = {}
        self.completed: list = []
        self.calls: list[str] = []
        self.fail_checkpoint = False
        self.fail_finalize = False

    async def find_incomplete(self, user_id, scenario_id):
        from arena.engine.session import Session

        self.calls.append("find_incomplete")
        snapshot = self.incomplete.get((user_id, scenario_id))
        return Session.from_snapshot(snapshot) if snapshot else None

    async def checkpoint(self, session):
        self.calls.append("checkpoint")
        if self.fail_checkpoint:
            raise ConnectionError("database unavailable")
        self.incomplete[(session.user_id, session.scenario_id)] = session.to_snapshot()

    async def finalize_save(self, session):
        self.calls.append("finalize_save")
        if self.fail_finalize:
            raise ConnectionError("database unavailable")
        self.incomplete.pop((session.user_id, session.scenario_id), None)
        self.completed.append(session.to_snapshot())

    async def delete_incomplete(self, user_id, scenario_id):
        self.calls.append("delete_incomplete")
        self.incomplete.pop((user_id, scenario_id), None)


class FakeReflectionStore:
    def __init__(self, fail: bool = False):
        self.saved: list[tuple[str, str, str]] = []
        self.fail = fail

    async def save(self, node_id, user_id, text):
        if self.fail:
            raise ConnectionError("reflection store down")
        self.saved.append((node_id, user_id, text))


class FakeCoachingLog:
    def __init__(self):
        self.records: list = []

    async def record(self, user_id, scenario_id, node_id, exchange):
        self.records.append((user_id, scenario_id, node_id, exchange))


class FakeEventSink:
    def __init__(self, fail: bool = False):
        self.events: list = []
        self.fail = fail

    async def emit(self, event):
        if self.fail:
            raise ConnectionError("event sink down")
        self.events.append(event)

    def kinds(self) -> list[str]:
        return [e.kind.value for e in self.events]


# ---------------------------------------------------------------------------
# Scenario builders
# ---------------------------------------------------------------------------


def make_choice(id, base, engagement=0, culture=None, next_node_id=None, positive=(), negative=(), text=None):
    return Choice(
        id=id,
        text=text or f"Option {id}",
        explanation=f"Why {id}",
        base_points=base,
        engagement_impact=engagement,
        culture_impact=culture or {},
        next_node_id=next_node_id,
        positive_tags=tuple(positive),
        negative_tags=tuple(negative),
    )


def five_node_nodes() -> list[Node]:
    """R, D[30/10/-10], R, D[30/5/15], O; the listed points are full choice scores."""
    return [
        Node("n0", NodeType.REFLECTION, "What matters most in the first meeting?", 0),
        Node(
            "n1",
            NodeType.DECISION,
            "Marcus interrupts you in front of the team.",
            1,
            (
                make_choice("c30", 26, 1, {"no-ego": 2, "truth": 1}, "n2", positive=[CARE, LISTEN]),
                make_choice("c10", 10, next_node_id="n2", positive=[CLARITY]),
                make_choice("cm10", -8, -1, {"no-ego": -1}, "n2", negative=[CARE, LISTEN]),
            ),
        ),
        Node("n2", NodeType.REFLECTION, "How would you clarify Priya's role?", 2),
        Node(
            "n3",
            NodeType.DECISION,
            "The teams are still working in silos.",
            3,
            (
                make_choice("d30", 27, 2, {"better": 1}, "n4", positive=[CARE, CLARITY]),
                make_choice("d5", 5, next_node_id="n4"),
                make_choice("d15", 15, next_node_id="n4", negative=[CLARITY]),
            ),
        ),
        Node("n4", NodeType.OUTCOME, "Three months later the team has gelled.", 4),
    ]


def make_scenario(nodes=None, **overrides):
    kwargs = dict(
        id="storm",
        title="The Acquisition Storm",
        description="Integrate four anxious new team members.",
        primary_dimension=EngagementDimension(1, "Expectations", "I know what is expected of me at work."),
        culture_value=CultureValue("no-ego", "No Ego, All In", "Stay humble and work together."),
        nodes=five_node_nodes() if nodes is None else nodes,
        culture_value_ids=CULTURE_IDS,
    )
    kwargs.update(overrides)
    return build_scenario(**kwargs)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_provider():
    """Fresh MockLLMProvider instance."""
    return MockLLMProvider()


@pytest.fixture
def failing_provider():
    return MockLLMProvider(fail_with=RuntimeError("upstream exploded"))


@pytest.fixture
def scenario():
    return make_scenario()


@pytest.fixture
def session_store():
    return FakeSessionStore()


@pytest.fixture
def reflection_store():
    return FakeReflectionStore()


@pytest.fixture
def event_sink():
    return FakeEventSink()


@pytest.fixture
def coaching_log():
    return FakeCoachingLog()


@pytest.fixture
def coaching_service(failing_provider):
    """Coaching that always falls back, with a seeded template choice."""
    return CoachingService(failing_provider, timeout=1.0, rng=random.Random(7))


@pytest.fixture
def services(session_store, reflection_store, event_sink, coaching_log, coaching_service):
    return PlayServices(
        sessions=session_store,
        reflections=reflection_store,
        events=event_sink,
        coaching=coaching_service,
        coaching_log=coaching_log,
        autosave_debounce=0.01,
    )


@pytest.fixture
async def session_factory(tmp_path):
    """Fresh SQLite database file with all tables.

    Background audit writes run concurrently with request handling, so each
    session needs its own connection rather than one shared in-memory one.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'arena-test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()
