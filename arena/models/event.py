"""Structured audit events emitted by the engine."""
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from arena.db.session import Base


class EventLog(Base):
    __tablename__ = "event_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    event_type = Column(String(64), nullable=False, index=True)
    scenario_id = Column(String(64), nullable=True)
    metadata_json = Column(Text, nullable=False, default="{}")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
