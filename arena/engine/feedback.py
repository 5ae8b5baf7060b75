"""Decision feedback: compare a recorded choice with the best sibling that was on offer."""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from arena.engine.coaching import CoachingContext, CoachingService
from arena.engine.graph import Choice
from arena.engine.prompts import AFFIRMING_PROMPT, CORRECTIVE_PROMPT
from arena.engine.scoring import find_optimal, gap_severity, score_choice, score_gap
from arena.engine.session import ChoiceSelection

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100


class FeedbackKind(str, enum.Enum):
    AFFIRMING = "affirming"
    CORRECTIVE = "corrective"


@dataclass(frozen=True)
class DecisionFeedback:
    kind: FeedbackKind
    message: str
    chosen: Choice
    optimal: Choice
    from_fallback: bool = False

    @property
    def is_optimal(self) -> bool:
        return self.kind is FeedbackKind.AFFIRMING

    @property
    def optimal_preview(self) -> str | None:
        if self.is_optimal:
            return None
        text = self.optimal.text
        return text[:PREVIEW_LENGTH] + ("..." if len(text) > PREVIEW_LENGTH else "")


def classify(selection: ChoiceSelection) -> tuple[FeedbackKind, Choice]:
    """Classification and optimal choice, computed over the stored sibling set only."""
    optimal = find_optimal(selection.siblings)
    if optimal.id == selection.chosen.id:
        return FeedbackKind.AFFIRMING, optimal
    return FeedbackKind.CORRECTIVE, optimal


class DecisionFeedbackResolver:
    """Side-effect free apart from the text generation call; safe to call repeatedly."""

    def __init__(self, service: CoachingService):
        self.service = service

    async def resolve(self, context: CoachingContext, selection: ChoiceSelection) -> DecisionFeedback:
        kind, optimal = classify(selection)
        chosen = selection.chosen
        if kind is FeedbackKind.AFFIRMING:
            prompt = AFFIRMING_PROMPT.format(
                title=context.scenario_title,
                culture_value=context.culture_value_name,
                culture_value_description=context.culture_value_description,
                dimension=context.engagement_dimension_title,
                node_prompt=context.node_prompt,
                chosen_text=chosen.text,
                chosen_explanation=chosen.explanation,
            )
        else:
            prompt = CORRECTIVE_PROMPT.format(
                title=context.scenario_title,
                culture_value=context.culture_value_name,
                culture_value_description=context.culture_value_description,
                dimension=context.engagement_dimension_title,
                node_prompt=context.node_prompt,
                chosen_text=chosen.text,
                chosen_score=score_choice(chosen),
                chosen_explanation=chosen.explanation,
                optimal_text=optimal.text,
                optimal_score=score_choice(optimal),
                optimal_explanation=optimal.explanation,
                severity=gap_severity(score_gap(chosen, optimal)).upper(),
            )

        message = await self.service.generate(prompt)
        from_fallback = message is None
        if from_fallback:
            if kind is FeedbackKind.AFFIRMING:
                message = self.service.affirming_fallback(context)
            else:
                message = self.service.corrective_fallback(context)

        logger.debug("Decision feedback for node %s: %s (fallback=%s)", selection.node_id, kind.value, from_fallback)
        return DecisionFeedback(kind=kind, message=message, chosen=chosen, optimal=optimal, from_fallback=from_fallback)
