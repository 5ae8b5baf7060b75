"""Active plays for the HTTP layer, keyed by (user id, scenario id)."""
import logging
import random

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from arena.core.config import Settings
from arena.engine.coaching import CoachingService
from arena.engine.graph import Scenario
from arena.engine.persistence import ResumeOffer
from arena.engine.play import PlayServices, ScenarioPlay, begin_play, restart_play, resume_play
from arena.llm import LLMProvider
from arena.services.audit import SqlCoachingLog, SqlEventSink, SqlReflectionStore
from arena.services.progress_store import SqlSessionStore

logger = logging.getLogger(__name__)

PlayKey = tuple[str, str]


def build_play_services(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    provider: LLMProvider | None,
) -> PlayServices:
    coaching = CoachingService(
        provider,
        timeout=settings.coaching_timeout_seconds,
        rng=random.Random(settings.fallback_seed),
        max_tokens=settings.coaching_max_tokens,
        temperature=settings.coaching_temperature,
    )
    return PlayServices(
        sessions=SqlSessionStore(session_factory),
        reflections=SqlReflectionStore(session_factory),
        events=SqlEventSink(session_factory),
        coaching=coaching,
        coaching_log=SqlCoachingLog(session_factory),
        reflection_award=settings.reflection_award,
        max_exchanges=settings.max_coaching_exchanges,
        autosave_debounce=settings.autosave_debounce_seconds,
    )


class PlayRegistry:
    """Holds each user's live play and any resume offer awaiting an answer."""

    def __init__(self, services: PlayServices):
        self.services = services
        self._plays: dict[PlayKey, ScenarioPlay] = {}
        self._offers: dict[PlayKey, ResumeOffer] = {}

    def get(self, user_id: str, scenario_id: str) -> ScenarioPlay | None:
        return self._plays.get((user_id, scenario_id))

    def pending_offer(self, user_id: str, scenario_id: str) -> ResumeOffer | None:
        return self._offers.get((user_id, scenario_id))

    async def start(self, user_id: str, scenario: Scenario) -> ScenarioPlay | ResumeOffer:
        """A fresh play, or a ResumeOffer if an unfinished session is on record.

        A live play for the same scenario is flushed and retired first, so its
        progress comes back as a resume offer instead of being lost.
        """
        key = (user_id, scenario.id)
        await self._retire(key)
        outcome = await begin_play(self.services, user_id, scenario)
        if isinstance(outcome, ResumeOffer):
            self._offers[key] = outcome
            return outcome
        self._offers.pop(key, None)
        self._plays[key] = outcome
        return outcome

    async def resume(self, user_id: str, scenario: Scenario) -> ScenarioPlay | None:
        """Continue from the pending offer; None when there is nothing to resume."""
        key = (user_id, scenario.id)
        await self._retire(key)
        offer = self._offers.pop(key, None)
        if offer is None:
            existing = await self.services.sessions.find_incomplete(user_id, scenario.id)
            if existing is None:
                return None
            offer = ResumeOffer(session=existing)
        play = resume_play(self.services, scenario, offer)
        self._plays[key] = play
        return play

    async def restart(self, user_id: str, scenario: Scenario) -> ScenarioPlay:
        """Discard any unfinished session and start over."""
        key = (user_id, scenario.id)
        self._offers.pop(key, None)
        old = self._plays.pop(key, None)
        if old is not None:
            # the stale checkpoint must not land after the delete
            old.saver.cancel()
            await old.background.drain()
        play = await restart_play(self.services, user_id, scenario)
        self._plays[key] = play
        return play

    async def close_all(self) -> None:
        for key in list(self._plays):
            await self._retire(key)
        logger.info("Play registry closed")

    async def _retire(self, key: PlayKey) -> None:
        play = self._plays.pop(key, None)
        if play is not None:
            await play.close()
