"""Coaching dialogue: a bounded (max 3) coach/user loop on a reflection node.

The external text generator may fail or hang. Every call is bounded by a
timeout and any failure degrades to a templated fallback message, so a
round always produces text and never blocks the scenario.
"""
from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, replace
from typing import Sequence

from arena.engine.errors import CoachingClosed, CoachingInProgress
from arena.engine.graph import Node, Scenario
from arena.engine.prompts import (
    AFFIRMING_FALLBACKS,
    COACH_PERSONA,
    CORRECTIVE_FALLBACKS,
    DEFAULT_BEHAVIORS,
    EXCHANGE_GUIDANCE,
    NO_PRIOR_EXCHANGES,
    REFLECTION_FALLBACKS,
    REFLECTION_PROMPT,
)
from arena.llm.provider import LLMProvider

logger = logging.getLogger(__name__)

MAX_EXCHANGES = 3


@dataclass(frozen=True)
class CoachingContext:
    """Everything the text generator is told about the scenario."""

    scenario_title: str
    scenario_description: str
    culture_value_name: str
    culture_value_description: str
    engagement_dimension_title: str
    engagement_dimension_description: str
    behavior_tag_names: tuple[str, ...]
    node_prompt: str = ""

    @classmethod
    def for_scenario(cls, scenario: Scenario, node: Node | None = None) -> "CoachingContext":
        names = scenario.behavior_tag_names() or DEFAULT_BEHAVIORS
        return cls(
            scenario_title=scenario.title,
            scenario_description=scenario.description,
            culture_value_name=scenario.culture_value.name,
            culture_value_description=scenario.culture_value.description,
            engagement_dimension_title=scenario.primary_dimension.title,
            engagement_dimension_description=scenario.primary_dimension.description,
            behavior_tag_names=tuple(names),
            node_prompt=node.prompt if node else "",
        )

    def template_params(self) -> dict[str, str]:
        return {"culture_value": self.culture_value_name, "dimension": self.engagement_dimension_title}


@dataclass(frozen=True)
class CoachingExchange:
    exchange_number: int
    coach_message: str
    user_reply: str | None = None
    from_fallback: bool = False


class CoachingService:
    """Wraps the text generator: timeout, failure handling and fallback templates."""

    def __init__(
        self,
        provider: LLMProvider | None,
        timeout: float = 15.0,
        rng: random.Random | None = None,
        max_tokens: int = 300,
        temperature: float = 0.4,
    ):
        self.provider = provider
        self.timeout = timeout
        self.rng = rng or random.Random()
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(self, prompt: str, system: str = COACH_PERSONA) -> str | None:
        """Generated text, or None on any failure (timeout, error, empty reply)."""
        if self.provider is None:
            return None
        try:
            response = await asyncio.wait_for(
                self.provider.complete(
                    messages=[{"role": "user", "content": prompt}],
                    system=system,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Text generation timed out after %.1fs; using fallback", self.timeout)
            return None
        except Exception as exc:
            logger.warning("Text generation failed (%s: %s); using fallback", type(exc).__name__, exc)
            return None

        text = getattr(response, "content", None)
        if not isinstance(text, str) or not text.strip():
            logger.warning("Text generation returned an empty or malformed reply; using fallback")
            return None
        return text.strip()

    def pick(self, templates: Sequence[str], context: CoachingContext) -> str:
        return self.rng.choice(list(templates)).format(**context.template_params())

    def reflection_fallback(self, exchange_number: int, context: CoachingContext) -> str:
        templates = REFLECTION_FALLBACKS.get(exchange_number, REFLECTION_FALLBACKS[1])
        return self.pick(templates, context)

    def affirming_fallback(self, context: CoachingContext) -> str:
        return self.pick(AFFIRMING_FALLBACKS, context)

    def corrective_fallback(self, context: CoachingContext) -> str:
        return self.pick(CORRECTIVE_FALLBACKS, context)

    async def coach_reflection(
        self,
        context: CoachingContext,
        prior: Sequence[CoachingExchange],
        latest_text: str,
        exchange_number: int,
        max_exchanges: int = MAX_EXCHANGES,
    ) -> tuple[str, bool]:
        """Coach message for one round and whether it came from the fallback set."""
        prompt = build_reflection_prompt(context, prior, latest_text, exchange_number, max_exchanges)
        message = await self.generate(prompt)
        if message is None:
            return self.reflection_fallback(exchange_number, context), True
        return message, False


def format_transcript(prior: Sequence[CoachingExchange]) -> str:
    if not prior:
        return NO_PRIOR_EXCHANGES
    return "\n\n".join(
        f"Exchange {ex.exchange_number}:\nCoach: {ex.coach_message}\nManager: {ex.user_reply or ''}"
        for ex in prior
    )


def build_reflection_prompt(
    context: CoachingContext,
    prior: Sequence[CoachingExchange],
    latest_text: str,
    exchange_number: int,
    max_exchanges: int = MAX_EXCHANGES,
) -> str:
    guidance = EXCHANGE_GUIDANCE.get(exchange_number, EXCHANGE_GUIDANCE[1])
    return REFLECTION_PROMPT.format(
        title=context.scenario_title,
        description=context.scenario_description,
        culture_value=context.culture_value_name,
        culture_value_description=context.culture_value_description,
        dimension=context.engagement_dimension_title,
        dimension_description=context.engagement_dimension_description,
        behaviors=", ".join(context.behavior_tag_names),
        node_prompt=context.node_prompt,
        transcript=format_transcript(prior),
        which="LATEST" if prior else "INITIAL",
        latest=latest_text,
        exchange_number=exchange_number,
        max_exchanges=max_exchanges,
        guidance=guidance.format(**context.template_params()),
    )


class CoachingDialogue:
    """Coaching state for one reflection-node visit. Discarded when the node is left."""

    def __init__(
        self,
        service: CoachingService,
        context: CoachingContext,
        node_id: str,
        max_exchanges: int = MAX_EXCHANGES,
    ):
        self.service = service
        self.context = context
        self.node_id = node_id
        self.max_exchanges = max_exchanges
        self.exchange_number = 0
        self.initial_text: str | None = None
        self.exchanges: list[CoachingExchange] = []
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    @property
    def closed(self) -> bool:
        return self.exchange_number >= self.max_exchanges

    @property
    def can_continue(self) -> bool:
        return not self.closed

    async def submit(self, user_text: str) -> CoachingExchange:
        """Run one round: the user's text in, the coach's next message out."""
        if self._pending:
            raise CoachingInProgress(f"A coaching round for node {self.node_id!r} is still pending")
        if self.closed:
            raise CoachingClosed(f"Coaching on node {self.node_id!r} reached {self.max_exchanges} exchanges")

        self._pending = True
        try:
            prior = list(self.exchanges)
            if prior:
                prior[-1] = replace(prior[-1], user_reply=user_text)
            number = self.exchange_number + 1
            message, from_fallback = await self.service.coach_reflection(
                self.context, prior, user_text, number, self.max_exchanges
            )
        finally:
            self._pending = False

        # state changes only once the coach has answered; a cancelled round leaves none
        exchange = CoachingExchange(exchange_number=number, coach_message=message, from_fallback=from_fallback)
        if not prior:
            self.initial_text = user_text
        self.exchanges = prior + [exchange]
        self.exchange_number = number

        logger.debug(
            "Coaching exchange %d/%d on node %s (fallback=%s)",
            exchange.exchange_number, self.max_exchanges, self.node_id, exchange.from_fallback,
        )
        return exchange
