"""Write-only collaborators: reflection text, coaching exchange log, event log."""
import json
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from arena.engine.coaching import CoachingExchange
from arena.engine.persistence import EngineEvent
from arena.models.coaching import CoachingExchangeLog
from arena.models.event import EventLog
from arena.models.reflection import ReflectionResponse

logger = logging.getLogger(__name__)


class SqlReflectionStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def save(self, node_id: str, user_id: str, text: str) -> None:
        async with self.session_factory() as db:
            db.add(ReflectionResponse(user_id=user_id, node_id=node_id, response_text=text))
            await db.commit()


class SqlCoachingLog:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def record(self, user_id: str, scenario_id: str, node_id: str, exchange: CoachingExchange) -> None:
        async with self.session_factory() as db:
            db.add(
                CoachingExchangeLog(
                    user_id=user_id,
                    scenario_id=scenario_id,
                    node_id=node_id,
                    exchange_number=exchange.exchange_number,
                    coach_message=exchange.coach_message,
                    from_fallback=exchange.from_fallback,
                )
            )
            await db.commit()


class SqlEventSink:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def emit(self, event: EngineEvent) -> None:
        logger.debug("event %s user=%s scenario=%s %s", event.kind.value, event.user_id, event.scenario_id, event.metadata)
        async with self.session_factory() as db:
            db.add(
                EventLog(
                    user_id=event.user_id,
                    event_type=event.kind.value,
                    scenario_id=event.scenario_id,
                    metadata_json=json.dumps(event.metadata, default=str),
                )
            )
            await db.commit()
