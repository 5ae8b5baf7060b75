"""API routes: JSON for the scenario catalogue and for playing a scenario."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request

from arena.core.config import get_settings
from arena.core.rate_limit import FixedWindowLimiter
from arena.core.security import verify_session_token
from arena.engine.graph import Scenario
from arena.engine.persistence import ResumeOffer
from arena.engine.play import ScenarioPlay
from arena.engine.scoring import score_choice
from arena.schemas.play import (
    CoachingRequestSchema,
    CoachingResponseSchema,
    DecisionRequestSchema,
    DecisionResponseSchema,
    FeedbackSchema,
    OutcomeRequestSchema,
    ReflectionRequestSchema,
    ReviewSchema,
    SelectionSchema,
    SessionStateSchema,
    StartResponseSchema,
)
from arena.schemas.scenario import (
    CultureValueSchema,
    DimensionSchema,
    ScenarioDetailSchema,
    ScenarioSummarySchema,
)
from arena.services.content import SqlScenarioProvider
from arena.services.registry import PlayRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])
settings = get_settings()


# ---------- dependencies ----------

def get_current_user_id(request: Request) -> str:
    """User id from the signed auth cookie; 401 when absent or invalid."""
    user_id = verify_session_token(request.cookies.get(settings.auth_cookie_name))
    if user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user_id


def get_scenario_provider(request: Request) -> SqlScenarioProvider:
    return request.app.state.scenarios


def get_registry(request: Request) -> PlayRegistry:
    return request.app.state.registry


async def get_active_scenario(
    scenario_id: str,
    scenarios: Annotated[SqlScenarioProvider, Depends(get_scenario_provider)],
) -> Scenario:
    scenario = await scenarios.get_scenario(scenario_id)
    if scenario is None or not scenario.is_active:
        raise HTTPException(status_code=404, detail="Scenario not found")
    return scenario


def get_play(
    scenario_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    registry: Annotated[PlayRegistry, Depends(get_registry)],
) -> ScenarioPlay:
    play = registry.get(user_id, scenario_id)
    if play is None:
        raise HTTPException(status_code=404, detail="No active session for this scenario; start or resume it first")
    return play


def limit_coaching(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> None:
    """429 once the user exceeds the coaching request limit for the current window."""
    limiter: FixedWindowLimiter = request.app.state.coaching_limiter
    if not limiter.hit(f"coaching:{user_id}"):
        logger.info("Coaching rate limit hit for user %s", user_id)
        raise HTTPException(status_code=429, detail="Too many requests. Please slow down.")


def _check_length(text: str, minimum: int, what: str) -> None:
    length = len(text.strip())
    if length < minimum:
        raise HTTPException(status_code=400, detail=f"{what} must be at least {minimum} characters")
    if len(text) > settings.max_text_length:
        raise HTTPException(status_code=400, detail=f"{what} must be at most {settings.max_text_length} characters")


# ---------- catalogue ----------

@router.get("/scenarios", response_model=list[ScenarioSummarySchema])
async def list_scenarios(scenarios: Annotated[SqlScenarioProvider, Depends(get_scenario_provider)]):
    """Active scenarios, by title."""
    rows = await scenarios.list_scenarios()
    return [ScenarioSummarySchema.model_validate(row) for row in rows]


@router.get("/scenarios/{scenario_id}", response_model=ScenarioDetailSchema)
async def get_scenario(scenario: Annotated[Scenario, Depends(get_active_scenario)]):
    """One scenario with its engagement dimensions, culture value and behaviors."""
    return ScenarioDetailSchema(
        id=scenario.id,
        title=scenario.title,
        description=scenario.description,
        difficulty=scenario.difficulty,
        estimated_minutes=scenario.estimated_minutes,
        primary_dimension=DimensionSchema.model_validate(scenario.primary_dimension),
        secondary_dimension=(
            DimensionSchema.model_validate(scenario.secondary_dimension) if scenario.secondary_dimension else None
        ),
        culture_value=CultureValueSchema.model_validate(scenario.culture_value),
        node_count=len(scenario),
        behavior_tags=scenario.behavior_tag_names(),
    )


# ---------- session lifecycle ----------

@router.post("/play/{scenario_id}/start", response_model=StartResponseSchema)
async def start_play(
    scenario: Annotated[Scenario, Depends(get_active_scenario)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    registry: Annotated[PlayRegistry, Depends(get_registry)],
):
    """Start the scenario, or report an unfinished session to resume or discard."""
    outcome = await registry.start(user_id, scenario)
    if isinstance(outcome, ResumeOffer):
        return StartResponseSchema(
            resume_available=True,
            saved_node_index=outcome.session.current_node_index,
            saved_total_score=outcome.session.total_score,
        )
    return StartResponseSchema(resume_available=False, session=SessionStateSchema.from_play(outcome))


@router.post("/play/{scenario_id}/resume", response_model=SessionStateSchema)
async def resume_play(
    scenario: Annotated[Scenario, Depends(get_active_scenario)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    registry: Annotated[PlayRegistry, Depends(get_registry)],
):
    play = await registry.resume(user_id, scenario)
    if play is None:
        raise HTTPException(status_code=404, detail="No unfinished session to resume")
    return SessionStateSchema.from_play(play)


@router.post("/play/{scenario_id}/restart", response_model=SessionStateSchema)
async def restart_play(
    scenario: Annotated[Scenario, Depends(get_active_scenario)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    registry: Annotated[PlayRegistry, Depends(get_registry)],
):
    """Discard any unfinished session and start from the first node."""
    play = await registry.restart(user_id, scenario)
    return SessionStateSchema.from_play(play)


@router.get("/play/{scenario_id}", response_model=SessionStateSchema)
async def get_play_state(play: Annotated[ScenarioPlay, Depends(get_play)]):
    return SessionStateSchema.from_play(play)


# ---------- node completion ----------

@router.post("/play/{scenario_id}/reflection", response_model=SessionStateSchema)
async def submit_reflection(body: ReflectionRequestSchema, play: Annotated[ScenarioPlay, Depends(get_play)]):
    _check_length(body.response_text, settings.min_reflection_length, "Reflection")
    await play.complete_reflection(body.node_id, body.response_text)
    return SessionStateSchema.from_play(play)


@router.post("/play/{scenario_id}/coaching", response_model=CoachingResponseSchema)
async def coach(
    body: CoachingRequestSchema,
    play: Annotated[ScenarioPlay, Depends(get_play)],
    _: Annotated[None, Depends(limit_coaching)],
):
    """One coaching round on the current reflection node."""
    dialogue = play.open_dialogue()
    if dialogue.exchanges:
        _check_length(body.text, settings.min_reply_length, "Reply")
    else:
        _check_length(body.text, settings.min_reflection_length, "Reflection")

    exchange = await play.coach(body.text)
    return CoachingResponseSchema(
        node_id=dialogue.node_id,
        exchange_number=exchange.exchange_number,
        coach_message=exchange.coach_message,
        can_continue=dialogue.can_continue,
        max_exchanges_reached=dialogue.closed,
    )


@router.post("/play/{scenario_id}/decision", response_model=DecisionResponseSchema)
async def submit_decision(body: DecisionRequestSchema, play: Annotated[ScenarioPlay, Depends(get_play)]):
    selection = await play.complete_decision(body.node_id, body.choice_id)
    return DecisionResponseSchema(
        selection=SelectionSchema.from_selection(selection, score_choice(selection.chosen)),
        session=SessionStateSchema.from_play(play),
    )


@router.get("/play/{scenario_id}/decision/{node_id}/feedback", response_model=FeedbackSchema)
async def decision_feedback(node_id: str, play: Annotated[ScenarioPlay, Depends(get_play)]):
    """Affirming or corrective feedback on a decision already made."""
    feedback = await play.decision_feedback(node_id)
    return FeedbackSchema.from_feedback(node_id, feedback)


@router.post("/play/{scenario_id}/outcome", response_model=SessionStateSchema)
async def acknowledge_outcome(body: OutcomeRequestSchema, play: Annotated[ScenarioPlay, Depends(get_play)]):
    await play.acknowledge_outcome(body.node_id)
    return SessionStateSchema.from_play(play)


@router.post("/play/{scenario_id}/finish", response_model=SessionStateSchema)
async def finish_play(play: Annotated[ScenarioPlay, Depends(get_play)]):
    """Finalize scores and save the completed session."""
    await play.finish()
    logger.info("Scenario finished: user=%s scenario=%s score=%s",
                play.session.user_id, play.scenario.id, play.session.total_score)
    return SessionStateSchema.from_play(play)


@router.get("/play/{scenario_id}/review", response_model=ReviewSchema)
async def review_play(play: Annotated[ScenarioPlay, Depends(get_play)]):
    """Feedback for every decision made so far."""
    feedback = await play.review()
    decisions = [
        FeedbackSchema.from_feedback(selection.node_id, item)
        for selection, item in zip(play.session.selections, feedback)
    ]
    return ReviewSchema(session=SessionStateSchema.from_play(play), decisions=decisions)
