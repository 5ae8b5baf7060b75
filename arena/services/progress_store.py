"""Session store: incomplete-attempt checkpoints and completed-attempt records."""
import json
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from arena.engine.session import Session
from arena.models.progress import ScenarioProgress

logger = logging.getLogger(__name__)


def _latest_incomplete(user_id: str, scenario_id: str):
    return (
        select(ScenarioProgress)
        .where(
            ScenarioProgress.user_id == user_id,
            ScenarioProgress.scenario_id == scenario_id,
            ScenarioProgress.completed_at.is_(None),
        )
        .order_by(ScenarioProgress.started_at.desc(), ScenarioProgress.id.desc())
        .limit(1)
    )


def _apply_scores(row: ScenarioProgress, session: Session) -> None:
    row.current_node_index = session.current_node_index
    row.score_total = session.total_score
    row.engagement_score_total = session.engagement_score
    row.culture_score_total = session.culture_score


class SqlSessionStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def find_incomplete(self, user_id: str, scenario_id: str) -> Session | None:
        async with self.session_factory() as db:
            row = (await db.execute(_latest_incomplete(user_id, scenario_id))).scalar_one_or_none()
            if row is None or not row.game_state_json:
                return None
            return Session.from_snapshot(json.loads(row.game_state_json))

    async def checkpoint(self, session: Session) -> None:
        async with self.session_factory() as db:
            row = (await db.execute(_latest_incomplete(session.user_id, session.scenario_id))).scalar_one_or_none()
            if row is None:
                row = ScenarioProgress(user_id=session.user_id, scenario_id=session.scenario_id)
                if session.started_at is not None:
                    row.started_at = session.started_at
                db.add(row)
            _apply_scores(row, session)
            row.game_state_json = json.dumps(session.to_snapshot())
            await db.commit()

    async def finalize_save(self, session: Session) -> None:
        # the auto-save row, if any, becomes the completed record
        async with self.session_factory() as db:
            row = (await db.execute(_latest_incomplete(session.user_id, session.scenario_id))).scalar_one_or_none()
            if row is None:
                row = ScenarioProgress(user_id=session.user_id, scenario_id=session.scenario_id)
                if session.started_at is not None:
                    row.started_at = session.started_at
                db.add(row)
            _apply_scores(row, session)
            row.game_state_json = None
            row.choices_json = json.dumps(
                [{"choice_id": s.chosen.id, "choice_text": s.chosen.text} for s in session.selections]
            )
            row.completed_at = session.completed_at
            await db.commit()
        logger.info("Completed session saved: user=%s scenario=%s", session.user_id, session.scenario_id)

    async def delete_incomplete(self, user_id: str, scenario_id: str) -> None:
        async with self.session_factory() as db:
            await db.execute(
                delete(ScenarioProgress).where(
                    ScenarioProgress.user_id == user_id,
                    ScenarioProgress.scenario_id == scenario_id,
                    ScenarioProgress.completed_at.is_(None),
                )
            )
            await db.commit()

    async def completed_attempts(self, user_id: str, scenario_id: str) -> list[ScenarioProgress]:
        async with self.session_factory() as db:
            result = await db.execute(
                select(ScenarioProgress)
                .where(
                    ScenarioProgress.user_id == user_id,
                    ScenarioProgress.scenario_id == scenario_id,
                    ScenarioProgress.completed_at.is_not(None),
                )
                .order_by(ScenarioProgress.completed_at.desc())
            )
            return list(result.scalars().all())
