"""Reflection text a user wrote on a reflection node."""
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from arena.db.session import Base


class ReflectionResponse(Base):
    __tablename__ = "reflection_responses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    node_id = Column(String(64), nullable=False, index=True)
    response_text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
