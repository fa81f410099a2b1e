"""HTTP API tests over the in-memory services."""

import pytest


async def _queue(client, host_headers, ticket) -> dict:
    response = await client.post("/v1/nps/events/ticket-resolved", json=ticket, headers=host_headers)
    assert response.status_code == 200
    return response.json()


async def _token_for(services, survey_id: str) -> str:
    for survey in await services.surveys.list_surveys():
        if survey.id == survey_id:
            return survey.token
    raise AssertionError(f"survey {survey_id} not found")


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# ---------------------------------------------------------------------------
# Host events
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_host_events_require_api_key(client, host_key, sample_ticket):
    response = await client.post("/v1/nps/events/ticket-resolved", json=sample_ticket)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_API_KEY"


@pytest.mark.asyncio
async def test_host_events_rejected_when_key_unconfigured(client, sample_ticket):
    response = await client.post(
        "/v1/nps/events/ticket-resolved",
        json=sample_ticket,
        headers={"X-API-Key": "anything"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_ticket_resolved_then_sweep(client, host_headers, sample_ticket, clock, transport):
    body = await _queue(client, host_headers, sample_ticket)

    assert body["queued"] is True
    assert body["decision"] == "queued"
    assert body["survey"]["status"] == "pending"
    assert "token" not in body["survey"]

    clock.advance(hours=25)
    response = await client.post("/v1/nps/events/sweep", headers=host_headers)

    assert response.status_code == 200
    processed = response.json()["processed"]
    assert [s["status"] for s in processed] == ["sent"]
    assert len(transport.sent) == 1


@pytest.mark.asyncio
async def test_ticket_resolved_reports_decision(client, host_headers):
    body = await _queue(client, host_headers, {"id": "T1"})

    assert body == {"queued": False, "decision": "missing_ids", "survey": None}


@pytest.mark.asyncio
async def test_activate_and_deactivate(client, host_headers, broadcaster):
    activated = await client.post("/v1/nps/events/activate", headers=host_headers)
    deactivated = await client.post("/v1/nps/events/deactivate", headers=host_headers)

    assert activated.json() == {"status": "activated"}
    assert deactivated.json() == {"status": "deactivated"}
    assert broadcaster.events[-1][1] == "nps.deactivated"


# ---------------------------------------------------------------------------
# Public survey
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_public_survey_form_and_submit(client, services, host_headers, sample_ticket):
    body = await _queue(client, host_headers, sample_ticket)
    token = await _token_for(services, body["survey"]["id"])

    form = await client.get(f"/v1/nps/survey/{token}", params={"score": 12})
    assert form.status_code == 200
    assert form.json()["score"] == 10
    assert form.json()["branding"]["primary_color"] == "#3b82f6"

    submitted = await client.post(
        f"/v1/nps/survey/{token}",
        json={"score": 3, "comment": "Slow", "follow_up_response": "Waited two days"},
    )
    assert submitted.status_code == 200
    assert submitted.json()["classification"] == "detractor"
    assert submitted.json()["score"] == 3

    again = await client.post(f"/v1/nps/survey/{token}", json={"score": 9})
    unknown = await client.post("/v1/nps/survey/unknown-token", json={"score": 9})
    assert again.status_code == unknown.status_code == 404
    assert again.json() == unknown.json()
    assert (await client.get(f"/v1/nps/survey/{token}")).status_code == 404


@pytest.mark.asyncio
async def test_public_submit_clamps_score(client, services, host_headers, sample_ticket):
    body = await _queue(client, host_headers, sample_ticket)
    token = await _token_for(services, body["survey"]["id"])

    response = await client.post(f"/v1/nps/survey/{token}", json={"score": -20})

    assert response.json()["score"] == 0


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_dashboard_requires_admin(client, agent_headers):
    assert (await client.get("/v1/nps/config")).status_code == 401

    response = await client.get("/v1/nps/config", headers=agent_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_config_get_and_put(client, admin_headers):
    response = await client.put(
        "/v1/nps/config",
        json={"trigger_delay_hours": 1, "branding": {"primary_color": "#111111"}},
        headers=admin_headers,
    )

    assert response.status_code == 200
    config = (await client.get("/v1/nps/config", headers=admin_headers)).json()
    assert config["trigger_delay_hours"] == 1
    assert config["frequency_limit_days"] == 90
    assert config["branding"] == {"primary_color": "#111111", "logo_url": ""}


@pytest.mark.asyncio
async def test_reports(client, services, admin_headers):
    await services.responses.save({"agent_id": "A1", "category": "billing", "score": 10})
    await services.responses.save({"agent_id": "A2", "score": 2})

    score = (await client.get("/v1/nps/reports/score", headers=admin_headers)).json()
    assert score["total"] == 2
    assert score["score"] == 0

    filtered = await client.get(
        "/v1/nps/reports/score", params={"agent_id": "A1"}, headers=admin_headers
    )
    assert filtered.json()["score"] == 100

    trend = (await client.get(
        "/v1/nps/reports/trend", params={"months": 3}, headers=admin_headers
    )).json()
    assert [p["month"] for p in trend] == ["2026-01-01", "2026-02-01", "2026-03-01"]
    assert trend[-1]["total"] == 2

    breakdown = (await client.get(
        "/v1/nps/reports/breakdown/category", headers=admin_headers
    )).json()
    assert [item["key"] for item in breakdown] == ["billing", "uncategorized"]

    widget = (await client.get("/v1/nps/reports/widget", headers=admin_headers)).json()
    assert widget["trend"] == "stable"


@pytest.mark.asyncio
async def test_breakdown_unknown_dimension(client, admin_headers):
    response = await client.get("/v1/nps/reports/breakdown/weather", headers=admin_headers)

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_responses_history_and_ticket_score(client, services, admin_headers, clock):
    await services.responses.save({"contact_id": "C1", "ticket_id": "T1", "score": 5})
    clock.advance(minutes=1)
    await services.responses.save({"contact_id": "C1", "ticket_id": "T2", "score": 9})

    listing = (await client.get(
        "/v1/nps/responses", params={"contact_id": "C1", "limit": 1}, headers=admin_headers
    )).json()
    assert [r["ticket_id"] for r in listing["items"]] == ["T2"]

    history = (await client.get(
        "/v1/nps/contacts/C1/history", headers=admin_headers
    )).json()
    assert len(history["responses"]) == 2
    assert history["nps"]["total"] == 2

    ticket = (await client.get("/v1/nps/tickets/T1/score", headers=admin_headers)).json()
    assert ticket == {"ticket_id": "T1", "score": 5}

    missing = (await client.get("/v1/nps/tickets/T9/score", headers=admin_headers)).json()
    assert missing["score"] is None


@pytest.mark.asyncio
async def test_manual_send_and_queue_listing(client, admin_headers, sample_ticket):
    sent = await client.post("/v1/nps/surveys", json=sample_ticket, headers=admin_headers)
    assert sent.json()["decision"] == "queued"

    listing = (await client.get(
        "/v1/nps/surveys", params={"status": "pending"}, headers=admin_headers
    )).json()
    assert listing["total"] == 1
    assert listing["items"][0]["ticket_id"] == "T1"


@pytest.mark.asyncio
async def test_export(client, services, admin_headers, sample_ticket):
    await services.events.on_ticket_resolved(sample_ticket)
    await services.responses.save({"contact_id": "C9", "score": 8})

    export = (await client.get("/v1/nps/export", headers=admin_headers)).json()

    assert set(export) == {"config", "responses", "surveys"}
    assert export["config"]["enabled"] is True
    assert export["responses"][0]["score"] == 8
    assert export["surveys"][0]["status"] == "pending"
