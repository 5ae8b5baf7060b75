"""Tests for the HTTP surface (httpx over ASGI, SQLite, no lifespan)."""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from arena.core.config import get_settings
from arena.core.rate_limit import FixedWindowLimiter
from arena.core.security import create_session_token
from arena.main import app, init_state
from arena.services.seeding import seed_scenarios

from conftest import MockLLMProvider

SCENARIO = "acquisition-storm"
REFLECTION = "I want them to know their expertise matters here."


@pytest.fixture
async def client(session_factory):
    async with session_factory() as db:
        await seed_scenarios(db)
    init_state(app, session_factory, provider=None)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        ac.cookies.set(get_settings().auth_cookie_name, create_session_token("user-1"))
        yield ac
    await app.state.registry.close_all()


async def play_to_end(client):
    await client.post(f"/api/play/{SCENARIO}/reflection", json={"node_id": f"{SCENARIO}-n0", "response_text": REFLECTION})
    await client.post(f"/api/play/{SCENARIO}/decision", json={"node_id": f"{SCENARIO}-n1", "choice_id": f"{SCENARIO}-n1-c2"})
    await client.post(f"/api/play/{SCENARIO}/reflection", json={"node_id": f"{SCENARIO}-n2", "response_text": REFLECTION})
    await client.post(f"/api/play/{SCENARIO}/decision", json={"node_id": f"{SCENARIO}-n3", "choice_id": f"{SCENARIO}-n3-c0"})
    return await client.post(f"/api/play/{SCENARIO}/outcome", json={"node_id": f"{SCENARIO}-n4"})


async def test_health(client):
    resp = await client.get("/health")
    assert resp.json() == {"status": "ok"}


async def test_list_scenarios(client):
    resp = await client.get("/api/scenarios")
    assert resp.status_code == 200
    body = resp.json()
    assert [s["id"] for s in body] == ["acquisition-storm", "burnout-blind-spot"]
    assert body[0]["culture_value"]["name"] == "No Ego, All In"


async def test_scenario_detail(client):
    resp = await client.get(f"/api/scenarios/{SCENARIO}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["node_count"] == 5
    assert body["primary_dimension"]["title"] == "Expectations"
    assert len(body["behavior_tags"]) <= 6


async def test_unknown_scenario_404(client):
    assert (await client.get("/api/scenarios/missing")).status_code == 404
    assert (await client.post("/api/play/missing/start")).status_code == 404


async def test_requires_cookie(client):
    client.cookies.clear()
    resp = await client.post(f"/api/play/{SCENARIO}/start")
    assert resp.status_code == 401


async def test_full_play(client):
    start = await client.post(f"/api/play/{SCENARIO}/start")
    assert start.status_code == 200
    assert start.json()["resume_available"] is False
    node = start.json()["session"]["current_node"]
    assert node["type"] == "reflection"

    outcome = await play_to_end(client)
    assert outcome.json()["current_node"] is None

    finish = await client.post(f"/api/play/{SCENARIO}/finish")
    assert finish.status_code == 200
    assert finish.json()["status"] == "completed"
    # 10 + (-10 - 2 - 4) + 10 + (30 + 2 + 6)
    assert finish.json()["total_score"] == 42

    review = await client.get(f"/api/play/{SCENARIO}/review")
    kinds = [d["kind"] for d in review.json()["decisions"]]
    assert kinds == ["corrective", "affirming"]
    assert review.json()["decisions"][0]["best_choice_preview"].startswith('"Marcus, I hear you.')


async def test_decision_feedback(client):
    await client.post(f"/api/play/{SCENARIO}/start")
    await client.post(f"/api/play/{SCENARIO}/reflection", json={"node_id": f"{SCENARIO}-n0", "response_text": REFLECTION})
    decision = await client.post(
        f"/api/play/{SCENARIO}/decision", json={"node_id": f"{SCENARIO}-n1", "choice_id": f"{SCENARIO}-n1-c0"}
    )
    assert decision.json()["selection"]["points"] == 36

    resp = await client.get(f"/api/play/{SCENARIO}/decision/{SCENARIO}-n1/feedback")
    assert resp.status_code == 200
    assert resp.json()["kind"] == "affirming"
    assert resp.json()["is_optimal"] is True
    assert resp.json()["best_choice_preview"] is None


async def test_error_mapping(client):
    await client.post(f"/api/play/{SCENARIO}/start")

    wrong_node = await client.post(f"/api/play/{SCENARIO}/outcome", json={"node_id": f"{SCENARIO}-n4"})
    assert wrong_node.status_code == 409
    assert wrong_node.json()["error"] == "OutOfOrderNode"

    too_short = await client.post(f"/api/play/{SCENARIO}/reflection", json={"node_id": f"{SCENARIO}-n0", "response_text": "short"})
    assert too_short.status_code == 400

    await client.post(f"/api/play/{SCENARIO}/reflection", json={"node_id": f"{SCENARIO}-n0", "response_text": REFLECTION})
    bad_choice = await client.post(
        f"/api/play/{SCENARIO}/decision", json={"node_id": f"{SCENARIO}-n1", "choice_id": "not-a-choice"}
    )
    assert bad_choice.status_code == 400

    early_finish = await client.post(f"/api/play/{SCENARIO}/finish")
    assert early_finish.status_code == 409


async def test_no_active_play(client):
    assert (await client.get(f"/api/play/{SCENARIO}")).status_code == 404


async def test_coaching_rounds(client):
    await client.post(f"/api/play/{SCENARIO}/start")
    url = f"/api/play/{SCENARIO}/coaching"

    first = await client.post(url, json={"text": REFLECTION})
    second = await client.post(url, json={"text": "I'd ask Marcus first."})
    third = await client.post(url, json={"text": "Then follow up weekly."})
    fourth = await client.post(url, json={"text": "One more thought here."})

    assert [r.json()["exchange_number"] for r in (first, second, third)] == [1, 2, 3]
    assert first.json()["can_continue"] is True
    assert third.json()["max_exchanges_reached"] is True
    assert fourth.status_code == 409


async def test_resume_and_restart(client):
    await client.post(f"/api/play/{SCENARIO}/start")
    await client.post(f"/api/play/{SCENARIO}/reflection", json={"node_id": f"{SCENARIO}-n0", "response_text": REFLECTION})

    again = await client.post(f"/api/play/{SCENARIO}/start")
    assert again.json()["resume_available"] is True
    assert again.json()["saved_node_index"] == 1

    resumed = await client.post(f"/api/play/{SCENARIO}/resume")
    assert resumed.status_code == 200
    assert resumed.json()["current_node_index"] == 1
    assert resumed.json()["total_score"] == 10

    restarted = await client.post(f"/api/play/{SCENARIO}/restart")
    assert restarted.json()["current_node_index"] == 0
    assert restarted.json()["total_score"] == 0

    state = await client.get(f"/api/play/{SCENARIO}")
    assert state.json()["current_node_index"] == 0


async def test_resume_without_saved_session(client):
    assert (await client.post(f"/api/play/{SCENARIO}/resume")).status_code == 404


async def test_reflection_submitted_while_coaching_pending(client, session_factory):
    init_state(app, session_factory, provider=MockLLMProvider(delay=0.2))
    await client.post(f"/api/play/{SCENARIO}/start")

    coaching = asyncio.ensure_future(client.post(f"/api/play/{SCENARIO}/coaching", json={"text": REFLECTION}))
    await asyncio.sleep(0.05)
    reflection = await client.post(
        f"/api/play/{SCENARIO}/reflection", json={"node_id": f"{SCENARIO}-n0", "response_text": REFLECTION}
    )
    late = await coaching

    assert reflection.status_code == 200
    assert late.status_code == 409
    assert late.json()["error"] == "OutOfOrderNode"
    state = await client.get(f"/api/play/{SCENARIO}")
    assert state.json()["current_node_index"] == 1


async def test_coaching_rate_limited(client):
    app.state.coaching_limiter = FixedWindowLimiter(limit=2, window_seconds=60)
    await client.post(f"/api/play/{SCENARIO}/start")
    url = f"/api/play/{SCENARIO}/coaching"

    first = await client.post(url, json={"text": REFLECTION})
    second = await client.post(url, json={"text": "I'd ask Marcus first."})
    third = await client.post(url, json={"text": "Then follow up weekly."})

    assert [first.status_code, second.status_code] == [200, 200]
    assert third.status_code == 429
    assert third.json()["detail"] == "Too many requests. Please slow down."
