"""Scenario content provider backed by the authored tables (read-only)."""
import json
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from arena.engine import graph
from arena.engine.errors import DataIntegrityError
from arena.models.reference import CultureValue
from arena.models.scenario import Choice, ChoiceBehavior, Scenario, ScenarioNode

logger = logging.getLogger(__name__)

POSITIVE = "positive"
NEGATIVE = "negative"


def _scenario_query():
    return select(Scenario).options(
        selectinload(Scenario.primary_dimension),
        selectinload(Scenario.secondary_dimension),
        selectinload(Scenario.culture_value),
        selectinload(Scenario.nodes)
        .selectinload(ScenarioNode.choices)
        .selectinload(Choice.behaviors)
        .selectinload(ChoiceBehavior.behavior),
    )


def _dimension(row) -> graph.EngagementDimension | None:
    if row is None:
        return None
    return graph.EngagementDimension(id=row.id, title=row.title, description=row.description)


def _choice(row: Choice) -> graph.Choice:
    def tags(impact: str) -> tuple[graph.BehaviorTag, ...]:
        return tuple(
            graph.BehaviorTag(id=link.behavior.id, name=link.behavior.name)
            for link in sorted(row.behaviors, key=lambda b: b.behavior_id)
            if link.impact == impact
        )

    return graph.Choice(
        id=row.id,
        text=row.choice_text,
        explanation=row.explanation_text,
        base_points=row.points_base,
        engagement_impact=row.engagement_impact,
        culture_impact=json.loads(row.culture_impact_json or "{}"),
        next_node_id=row.next_node_id,
        positive_tags=tags(POSITIVE),
        negative_tags=tags(NEGATIVE),
    )


def to_graph(row: Scenario, culture_value_ids: set[str]) -> graph.Scenario:
    """Convert a loaded scenario row to the engine's validated value objects."""
    nodes = [
        graph.Node(
            id=node.id,
            type=graph.NodeType(node.node_type),
            prompt=node.content_text,
            order_index=node.order_index,
            choices=tuple(_choice(c) for c in node.choices),
        )
        for node in row.nodes
    ]
    return graph.build_scenario(
        id=row.id,
        title=row.title,
        description=row.description,
        primary_dimension=_dimension(row.primary_dimension),
        secondary_dimension=_dimension(row.secondary_dimension),
        culture_value=graph.CultureValue(
            id=row.culture_value.id, name=row.culture_value.name, description=row.culture_value.description
        ),
        nodes=nodes,
        culture_value_ids=culture_value_ids,
        difficulty=row.difficulty,
        estimated_minutes=row.estimated_minutes,
        is_active=row.is_active,
    )


class SqlScenarioProvider:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_scenario(self, scenario_id: str) -> graph.Scenario | None:
        async with self.session_factory() as db:
            result = await db.execute(_scenario_query().where(Scenario.id == scenario_id))
            row = result.scalar_one_or_none()
            if row is None:
                return None
            culture_ids = set((await db.execute(select(CultureValue.id))).scalars().all())
            try:
                return to_graph(row, culture_ids)
            except DataIntegrityError:
                logger.error("Scenario %s failed content validation", scenario_id, exc_info=True)
                raise

    async def list_scenarios(self, active_only: bool = True) -> list[Scenario]:
        """Scenario rows (with references loaded) for catalogue listings."""
        async with self.session_factory() as db:
            query = _scenario_query().order_by(Scenario.title)
            if active_only:
                query = query.where(Scenario.is_active.is_(True))
            result = await db.execute(query)
            return list(result.scalars().all())
