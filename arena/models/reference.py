"""Reference taxonomies: engagement dimensions, culture values, behavior tags."""
from sqlalchemy import Column, Integer, String, Text

from arena.db.session import Base


class EngagementDimension(Base):
    __tablename__ = "engagement_dimensions"

    id = Column(Integer, primary_key=True)
    title = Column(String(128), nullable=False)
    description = Column(Text, nullable=False, default="")


class CultureValue(Base):
    __tablename__ = "culture_values"

    id = Column(String(64), primary_key=True)  # slug, e.g. "no-ego"
    name = Column(String(128), nullable=False)
    description = Column(Text, nullable=False, default="")


class BehaviorTag(Base):
    __tablename__ = "behavior_tags"

    id = Column(Integer, primary_key=True)
    name = Column(String(128), nullable=False, unique=True)
    description = Column(Text, nullable=False, default="")
