"""Authored scenario content: scenario, ordered nodes, choices and their behavior links."""
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from arena.db.session import Base

# culture impact is stored as a JSON object in Text, like the rest of the
# authored payloads; it is validated against culture_values when loaded


class Scenario(Base):
    __tablename__ = "scenarios"

    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=False)
    difficulty = Column(String(32), nullable=False, default="Medium")  # Easy | Medium | Hard
    estimated_minutes = Column(Integer, nullable=False, default=10)
    primary_dimension_id = Column(Integer, ForeignKey("engagement_dimensions.id"), nullable=False)
    secondary_dimension_id = Column(Integer, ForeignKey("engagement_dimensions.id"), nullable=True)
    culture_value_id = Column(String(64), ForeignKey("culture_values.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    primary_dimension = relationship("EngagementDimension", foreign_keys=[primary_dimension_id])
    secondary_dimension = relationship("EngagementDimension", foreign_keys=[secondary_dimension_id])
    culture_value = relationship("CultureValue")
    nodes = relationship(
        "ScenarioNode",
        back_populates="scenario",
        order_by="ScenarioNode.order_index",
        cascade="all, delete-orphan",
    )


class ScenarioNode(Base):
    __tablename__ = "scenario_nodes"
    __table_args__ = (UniqueConstraint("scenario_id", "order_index"),)

    id = Column(String(64), primary_key=True)
    scenario_id = Column(String(64), ForeignKey("scenarios.id"), nullable=False, index=True)
    node_type = Column(String(16), nullable=False)  # reflection | decision | outcome
    content_text = Column(Text, nullable=False)
    order_index = Column(Integer, nullable=False)

    scenario = relationship("Scenario", back_populates="nodes")
    choices = relationship(
        "Choice",
        back_populates="node",
        foreign_keys="Choice.node_id",
        order_by="Choice.position",
        cascade="all, delete-orphan",
    )


class Choice(Base):
    __tablename__ = "choices"

    id = Column(String(64), primary_key=True)
    node_id = Column(String(64), ForeignKey("scenario_nodes.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)  # authored order, breaks score ties
    choice_text = Column(Text, nullable=False)
    explanation_text = Column(Text, nullable=False, default="")
    points_base = Column(Integer, nullable=False, default=0)
    engagement_impact = Column(Integer, nullable=False, default=0)  # typically -2..+2
    culture_impact_json = Column(Text, nullable=False, default="{}")
    next_node_id = Column(String(64), ForeignKey("scenario_nodes.id"), nullable=True)

    node = relationship("ScenarioNode", back_populates="choices", foreign_keys=[node_id])
    behaviors = relationship("ChoiceBehavior", back_populates="choice", cascade="all, delete-orphan")


class ChoiceBehavior(Base):
    __tablename__ = "choice_behaviors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    choice_id = Column(String(64), ForeignKey("choices.id"), nullable=False, index=True)
    behavior_id = Column(Integer, ForeignKey("behavior_tags.id"), nullable=False)
    impact = Column(String(16), nullable=False)  # positive | negative

    choice = relationship("Choice", back_populates="behaviors")
    behavior = relationship("BehaviorTag")
