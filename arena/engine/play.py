"""One user's play through one scenario: the surface callers drive.

Wires the state machine to coaching, decision feedback, auto-save and the
audit sink. Collaborator failures stop here; engine errors go to the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from arena.engine import session as machine
from arena.engine.coaching import MAX_EXCHANGES, CoachingContext, CoachingDialogue, CoachingExchange, CoachingService
from arena.engine.errors import InvalidChoice, OutOfOrderNode, WrongNodeType
from arena.engine.feedback import DecisionFeedback, DecisionFeedbackResolver
from arena.engine.graph import Node, NodeType, Scenario
from arena.engine.persistence import (
    DEFAULT_DEBOUNCE_SECONDS,
    AutoSaver,
    BackgroundCalls,
    CoachingLog,
    EngineEvent,
    EventKind,
    EventSink,
    ReflectionStore,
    ResumeOffer,
    SessionBridge,
    SessionStore,
)
from arena.engine.scoring import REFLECTION_AWARD, score_choice
from arena.engine.session import ChoiceSelection, Session

logger = logging.getLogger(__name__)


@dataclass
class PlayServices:
    """Collaborators and tunables shared by every play."""

    sessions: SessionStore
    reflections: ReflectionStore
    events: EventSink
    coaching: CoachingService
    coaching_log: CoachingLog | None = None
    reflection_award: int = REFLECTION_AWARD
    max_exchanges: int = MAX_EXCHANGES
    autosave_debounce: float = DEFAULT_DEBOUNCE_SECONDS


class ScenarioPlay:
    def __init__(self, services: PlayServices, scenario: Scenario, session: Session):
        self.services = services
        self.scenario = scenario
        self.session = session
        self.bridge = SessionBridge(services.sessions)
        self.saver = AutoSaver(services.sessions, services.autosave_debounce)
        self.background = BackgroundCalls()
        self.resolver = DecisionFeedbackResolver(services.coaching)
        self._dialogue: CoachingDialogue | None = None

    # ---------- state ----------

    @property
    def current_node(self) -> Node | None:
        return machine.current_node(self.session, self.scenario)

    @property
    def is_complete(self) -> bool:
        return machine.is_complete(self.session, self.scenario)

    @property
    def dialogue(self) -> CoachingDialogue | None:
        return self._dialogue

    @property
    def progress_saved(self) -> bool:
        return self.saver.progress_saved

    # ---------- node completion ----------

    async def complete_reflection(self, node_id: str, text: str) -> Session:
        machine.complete_reflection_node(
            self.session, self.scenario, node_id, text, award=self.services.reflection_award
        )
        record = self.session.reflections[-1]
        self.background.fire(
            "reflection save", self.services.reflections.save(record.node_id, self.session.user_id, record.text)
        )
        self._emit(EventKind.REFLECTION_SUBMITTED, node_id=node_id, char_count=len(record.text))
        self._after_advance(node_id)
        return self.session

    async def complete_decision(self, node_id: str, choice_id: str) -> ChoiceSelection:
        node = machine.require_current(self.session, self.scenario, node_id, NodeType.DECISION)
        choice = node.choice_by_id(choice_id)
        if choice is None:
            raise InvalidChoice(f"Choice {choice_id!r} does not belong to node {node_id!r}")
        machine.complete_decision_node(self.session, self.scenario, node_id, choice)
        self._emit(EventKind.CHOICE_SELECTED, node_id=node_id, choice_id=choice.id, points=score_choice(choice))
        self._after_advance(node_id)
        return self.session.selections[-1]

    async def acknowledge_outcome(self, node_id: str) -> Session:
        machine.complete_outcome_node(self.session, self.scenario, node_id)
        self._after_advance(node_id)
        return self.session

    # ---------- coaching ----------

    def open_dialogue(self) -> CoachingDialogue:
        """Coaching dialogue for the current reflection node, created on first use."""
        node = self.current_node
        if self.session.is_finalized or node is None:
            raise OutOfOrderNode("No node is awaiting coaching")
        if node.type is not NodeType.REFLECTION:
            raise WrongNodeType(f"Coaching is only available on reflection nodes, not {node.type.value}")
        if self._dialogue is None or self._dialogue.node_id != node.id:
            self._dialogue = CoachingDialogue(
                self.services.coaching,
                CoachingContext.for_scenario(self.scenario, node),
                node.id,
                max_exchanges=self.services.max_exchanges,
            )
        return self._dialogue

    async def coach(self, text: str) -> CoachingExchange:
        """One coaching round on the current reflection node.

        If the node is completed while the round is in flight, the exchange
        is dropped and OutOfOrderNode is raised.
        """
        dialogue = self.open_dialogue()
        exchange = await dialogue.submit(text)
        current = self.current_node
        if self._dialogue is not dialogue or current is None or current.id != dialogue.node_id:
            logger.info("Dropping coaching exchange for node %s; the node was already completed", dialogue.node_id)
            raise OutOfOrderNode(f"Node {dialogue.node_id!r} was completed before coaching finished")

        if self.services.coaching_log is not None:
            self.background.fire(
                "coaching log",
                self.services.coaching_log.record(self.session.user_id, self.scenario.id, dialogue.node_id, exchange),
            )
        self._emit(
            EventKind.COACHING_EXCHANGE,
            node_id=dialogue.node_id,
            exchange_number=exchange.exchange_number,
            fallback=exchange.from_fallback,
        )
        return exchange

    # ---------- feedback ----------

    async def decision_feedback(self, node_id: str) -> DecisionFeedback:
        selection = self._selection_for(node_id)
        feedback = await self.resolver.resolve(self._context_for(selection.node_id), selection)
        self._emit(
            EventKind.DECISION_FEEDBACK_SHOWN,
            node_id=node_id,
            kind=feedback.kind.value,
            chosen_choice_id=feedback.chosen.id,
            best_choice_id=feedback.optimal.id,
        )
        return feedback

    async def review(self) -> list[DecisionFeedback]:
        """Feedback for every recorded decision, replayed from the stored sibling sets."""
        return [
            await self.resolver.resolve(self._context_for(s.node_id), s) for s in self.session.selections
        ]

    # ---------- completion ----------

    async def finish(self) -> Session:
        """Finalize and save. A FinalizeSaveError leaves the play retryable."""
        if not self.session.is_finalized:
            machine.finalize(self.session, self.scenario)
        self.saver.cancel()
        await self.bridge.finalize_save(self.session)
        self._emit(
            EventKind.SCENARIO_COMPLETED,
            total_score=self.session.total_score,
            engagement_score=self.session.engagement_score,
            culture_score=self.session.culture_score,
        )
        return self.session

    async def close(self) -> None:
        """Flush the pending checkpoint and wait for in-flight best-effort calls."""
        await self.saver.flush()
        await self.background.drain()

    # ---------- internals ----------

    def _after_advance(self, completed_node_id: str) -> None:
        # coaching state is per visit; leaving the node drops it
        self._dialogue = None
        self._emit(EventKind.NODE_COMPLETED, node_id=completed_node_id)
        upcoming = self.current_node
        if upcoming is not None:
            self._emit(EventKind.NODE_STARTED, node_id=upcoming.id, index=self.session.current_node_index)
        self.saver.schedule(self.session)

    def _selection_for(self, node_id: str) -> ChoiceSelection:
        for selection in self.session.selections:
            if selection.node_id == node_id:
                return selection
        raise OutOfOrderNode(f"No decision has been recorded for node {node_id!r}")

    def _context_for(self, node_id: str) -> CoachingContext:
        return CoachingContext.for_scenario(self.scenario, self.scenario.node_by_id(node_id))

    def _emit(self, kind: EventKind, /, **metadata: Any) -> None:
        event = EngineEvent(kind=kind, user_id=self.session.user_id, scenario_id=self.scenario.id, metadata=metadata)
        self.background.fire(f"event {kind.value}", self.services.events.emit(event))


# ---------- entry points ----------

async def begin_play(services: PlayServices, user_id: str, scenario: Scenario) -> ScenarioPlay | ResumeOffer:
    """Start a scenario, or hand back a ResumeOffer for the caller to decide on."""
    outcome = await SessionBridge(services.sessions).begin(user_id, scenario)
    if isinstance(outcome, ResumeOffer):
        return outcome
    return _started(services, scenario, outcome, EventKind.SCENARIO_STARTED)


def resume_play(services: PlayServices, scenario: Scenario, offer: ResumeOffer) -> ScenarioPlay:
    session = SessionBridge(services.sessions).resume(offer)
    return _started(services, scenario, session, EventKind.SCENARIO_RESUMED)


async def restart_play(services: PlayServices, user_id: str, scenario: Scenario) -> ScenarioPlay:
    session = await SessionBridge(services.sessions).discard_and_restart(user_id, scenario)
    return _started(services, scenario, session, EventKind.SCENARIO_STARTED)


def _started(services: PlayServices, scenario: Scenario, session: Session, kind: EventKind) -> ScenarioPlay:
    play = ScenarioPlay(services, scenario, session)
    play._emit(kind, index=session.current_node_index)
    node = play.current_node
    if node is not None:
        play._emit(EventKind.NODE_STARTED, node_id=node.id, index=session.current_node_index)
    return play
