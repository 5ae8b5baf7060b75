"""Persistence bridge: collaborator contracts, best-effort calls, auto-save, resume/discard.

Two kinds of external calls exist here. Best-effort ones (checkpoints,
reflection text, coaching log, audit events) go through :func:`best_effort`
and hand back a :class:`BestEffort` result the caller is free to ignore.
``finalize_save`` is the exception: its failure is raised as
:class:`FinalizeSaveError`.
"""
from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Protocol

from arena.engine import session as machine
from arena.engine.coaching import CoachingExchange
from arena.engine.errors import FinalizeSaveError
from arena.engine.graph import Scenario
from arena.engine.session import Session

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5


# ---------- collaborator contracts ----------

class ScenarioProvider(Protocol):
    async def get_scenario(self, scenario_id: str) -> Scenario | None: ...


class SessionStore(Protocol):
    async def find_incomplete(self, user_id: str, scenario_id: str) -> Session | None: ...

    async def checkpoint(self, session: Session) -> None: ...

    async def finalize_save(self, session: Session) -> None: ...

    async def delete_incomplete(self, user_id: str, scenario_id: str) -> None: ...


class ReflectionStore(Protocol):
    async def save(self, node_id: str, user_id: str, text: str) -> None: ...


class CoachingLog(Protocol):
    async def record(self, user_id: str, scenario_id: str, node_id: str, exchange: CoachingExchange) -> None: ...


class EventKind(str, enum.Enum):
    SCENARIO_STARTED = "scenario_started"
    SCENARIO_RESUMED = "scenario_resumed"
    NODE_STARTED = "node_started"
    NODE_COMPLETED = "node_completed"
    REFLECTION_SUBMITTED = "reflection_submitted"
    CHOICE_SELECTED = "choice_selected"
    COACHING_EXCHANGE = "coaching_exchange"
    DECISION_FEEDBACK_SHOWN = "decision_feedback_shown"
    SCENARIO_COMPLETED = "scenario_completed"


@dataclass(frozen=True)
class EngineEvent:
    kind: EventKind
    user_id: str
    scenario_id: str
    metadata: dict[str, Any] = field(default_factory=dict)


class EventSink(Protocol):
    async def emit(self, event: EngineEvent) -> None: ...


# ---------- best-effort calls ----------

@dataclass(frozen=True)
class BestEffort:
    """Outcome of a call whose failure must never reach the play flow."""

    label: str
    ok: bool
    error: BaseException | None = None


async def best_effort(label: str, call: Awaitable[Any]) -> BestEffort:
    """Await ``call``; log and absorb any failure."""
    try:
        await call
    except Exception as exc:
        logger.warning("Best-effort %s failed: %s: %s", label, type(exc).__name__, exc)
        return BestEffort(label=label, ok=False, error=exc)
    return BestEffort(label=label, ok=True)


class BackgroundCalls:
    """Fire-and-forget best-effort calls, kept referenced until they finish."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    def fire(self, label: str, call: Awaitable[Any]) -> asyncio.Task:
        task = asyncio.ensure_future(best_effort(label, call))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> list[BestEffort]:
        """Wait for everything in flight (used at shutdown and in tests)."""
        if not self._tasks:
            return []
        return list(await asyncio.gather(*list(self._tasks)))


# ---------- auto-save ----------

class AutoSaver:
    """Debounced checkpointing: a burst of node advances produces one checkpoint."""

    def __init__(self, store: SessionStore, debounce: float = DEFAULT_DEBOUNCE_SECONDS):
        self.store = store
        self.debounce = debounce
        self.last_result: BestEffort | None = None
        self._task: asyncio.Task | None = None
        self._due: Session | None = None

    @property
    def progress_saved(self) -> bool:
        """False when the latest checkpoint failed ("progress may not have auto-saved")."""
        return self.last_result is None or self.last_result.ok

    def schedule(self, session: Session) -> None:
        # nothing worth resuming before the first node is done
        if session.current_node_index == 0 or session.is_finalized:
            return
        self._cancel_timer()
        self._due = session
        self._task = asyncio.ensure_future(self._run_later())

    async def flush(self) -> BestEffort | None:
        """Run a pending checkpoint now instead of waiting for the debounce."""
        if self._due is not None:
            self._cancel_timer()
            return await self._checkpoint()
        if self._task is not None and not self._task.done():
            await self._task
        return self.last_result

    def cancel(self) -> None:
        self._cancel_timer()
        self._due = None

    async def _run_later(self) -> None:
        await asyncio.sleep(self.debounce)
        await self._checkpoint()

    async def _checkpoint(self) -> BestEffort | None:
        session, self._due = self._due, None
        if session is None:
            return self.last_result
        self.last_result = await best_effort("checkpoint", self.store.checkpoint(session))
        return self.last_result

    def _cancel_timer(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None


# ---------- resume / discard ----------

@dataclass(frozen=True)
class ResumeOffer:
    """An incomplete session exists; the application must ask: resume or discard."""

    session: Session


class SessionBridge:
    def __init__(self, store: SessionStore):
        self.store = store

    async def begin(self, user_id: str, scenario: Scenario) -> Session | ResumeOffer:
        """Fresh session, or a ResumeOffer when an incomplete one is on record."""
        existing = await self.store.find_incomplete(str(user_id), scenario.id)
        if existing is not None:
            logger.info("Incomplete session found: user=%s scenario=%s index=%s",
                        user_id, scenario.id, existing.current_node_index)
            return ResumeOffer(session=existing)
        return machine.start(scenario, user_id)

    def resume(self, offer: ResumeOffer) -> Session:
        return offer.session

    async def discard_and_restart(self, user_id: str, scenario: Scenario) -> Session:
        await self.store.delete_incomplete(str(user_id), scenario.id)
        return machine.start(scenario, user_id)

    async def finalize_save(self, session: Session) -> None:
        try:
            await self.store.finalize_save(session)
        except Exception as exc:
            logger.error("Finalize save failed: user=%s scenario=%s: %s", session.user_id, session.scenario_id, exc)
            raise FinalizeSaveError(f"Could not save completed session: {exc}") from exc
