"""Seed reference taxonomies and starter scenarios (idempotent)."""
import json
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from arena.models.reference import BehaviorTag, CultureValue, EngagementDimension
from arena.models.scenario import Choice, ChoiceBehavior, Scenario, ScenarioNode
from arena.services.seed_content import BEHAVIOR_TAGS, CULTURE_VALUES, ENGAGEMENT_DIMENSIONS, SCENARIOS

logger = logging.getLogger(__name__)


async def seed_reference_data(db: AsyncSession) -> None:
    for id_, title, description in ENGAGEMENT_DIMENSIONS:
        await db.merge(EngagementDimension(id=id_, title=title, description=description))
    for id_, name, description in CULTURE_VALUES:
        await db.merge(CultureValue(id=id_, name=name, description=description))
    for id_, name, description in BEHAVIOR_TAGS:
        await db.merge(BehaviorTag(id=id_, name=name, description=description))
    await db.commit()


def build_scenario_rows(data: dict) -> Scenario:
    """Scenario row with nodes, choices and behavior links; every choice leads to the next node."""
    scenario = Scenario(
        id=data["id"],
        title=data["title"],
        description=data["description"],
        difficulty=data["difficulty"],
        estimated_minutes=data["estimated_minutes"],
        primary_dimension_id=data["primary_dimension_id"],
        secondary_dimension_id=data.get("secondary_dimension_id"),
        culture_value_id=data["culture_value_id"],
        is_active=True,
    )
    node_ids = [f"{data['id']}-n{order}" for order in range(len(data["nodes"]))]
    for order, (node_type, content, choices) in enumerate(data["nodes"]):
        node = ScenarioNode(id=node_ids[order], node_type=node_type, content_text=content, order_index=order)
        next_id = node_ids[order + 1] if order + 1 < len(node_ids) else None
        for position, (text, explanation, engagement, points, culture, positive, negative) in enumerate(choices):
            choice = Choice(
                id=f"{node.id}-c{position}",
                position=position,
                choice_text=text,
                explanation_text=explanation,
                points_base=points,
                engagement_impact=engagement,
                culture_impact_json=json.dumps(culture),
                next_node_id=next_id,
            )
            choice.behaviors = [ChoiceBehavior(behavior_id=b, impact="positive") for b in positive] + [
                ChoiceBehavior(behavior_id=b, impact="negative") for b in negative
            ]
            node.choices.append(choice)
        scenario.nodes.append(node)
    return scenario


async def seed_scenarios(db: AsyncSession) -> None:
    """Insert reference data and any starter scenario not yet present."""
    await seed_reference_data(db)
    existing = set((await db.execute(select(Scenario.id))).scalars().all())
    added = 0
    for data in SCENARIOS:
        if data["id"] in existing:
            continue
        db.add(build_scenario_rows(data))
        added += 1
    await db.commit()
    if added:
        logger.info("Seeded %d scenario(s)", added)
