"""Audit log of coaching exchanges; not part of scoring."""
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from arena.db.session import Base


class CoachingExchangeLog(Base):
    __tablename__ = "coaching_exchanges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    scenario_id = Column(String(64), nullable=False)
    node_id = Column(String(64), nullable=False, index=True)
    exchange_number = Column(Integer, nullable=False)  # 1..3
    coach_message = Column(Text, nullable=False)
    from_fallback = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
