"""Scenario progress: one row per attempt; in-progress rows carry the session snapshot."""
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from arena.db.session import Base


class ScenarioProgress(Base):
    __tablename__ = "scenario_progress"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    scenario_id = Column(String(64), nullable=False, index=True)

    current_node_index = Column(Integer, nullable=False, default=0)
    score_total = Column(Integer, nullable=False, default=0)
    engagement_score_total = Column(Integer, nullable=False, default=0)
    culture_score_total = Column(Integer, nullable=False, default=0)
    # full Session.to_snapshot() as JSON; cleared once completed
    game_state_json = Column(Text, nullable=True)
    # chosen choice ids/text of a completed attempt
    choices_json = Column(Text, nullable=True)

    started_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)
