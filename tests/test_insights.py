"""Tests for GET /api/insights/{person_id}."""

import pytest
from httpx import AsyncClient

from ministering.schemas.ai import VisitInsights
from ministering.services.analysis_service import AnalysisError


async def _person(client: AsyncClient) -> int:
    response = await client.post("/api/people", json={"name": "The Smiths"})
    return response.json()["id"]


@pytest.mark.asyncio
async def test_no_entries_returns_empty_insights_without_model_call(
    authed_client: AsyncClient, analyzer
):
    person_id = await _person(authed_client)

    response = await authed_client.get(f"/api/insights/{person_id}")

    assert response.status_code == 200
    assert response.json() == {"patterns": [], "suggestions": []}
    assert analyzer.insight_calls == []


@pytest.mark.asyncio
async def test_insights_from_visit_history(authed_client: AsyncClient, analyzer):
    analyzer.insights = VisitInsights(
        patterns=["Family often mentions missionary preparation"],
        suggestions=["Share a talk on missionary service"],
    )
    person_id = await _person(authed_client)
    for day, text in (("2024-01-10", "January visit"), ("2024-02-10", "February visit")):
        await authed_client.post(
            "/api/save_entry",
            json={"personId": person_id, "date": day, "transcript": text},
        )

    response = await authed_client.get(f"/api/insights/{person_id}")

    assert response.status_code == 200
    assert response.json()["patterns"] == ["Family often mentions missionary preparation"]
    [entries] = analyzer.insight_calls
    assert [e.transcript for e in entries] == ["February visit", "January visit"]
    assert entries[0].date.startswith("2024-02-10")


@pytest.mark.asyncio
async def test_insights_for_foreign_person_404(
    authed_client: AsyncClient, other_client: AsyncClient, analyzer
):
    person_id = await _person(authed_client)
    await authed_client.post(
        "/api/save_entry", json={"personId": person_id, "transcript": "private"}
    )

    response = await other_client.get(f"/api/insights/{person_id}")

    assert response.status_code == 404
    assert analyzer.insight_calls == []


@pytest.mark.asyncio
async def test_insights_model_failure_returns_500(authed_client: AsyncClient, analyzer):
    analyzer.error = AnalysisError("Failed to generate insights: bad gateway")
    person_id = await _person(authed_client)
    await authed_client.post(
        "/api/save_entry", json={"personId": person_id, "transcript": "visit"}
    )

    response = await authed_client.get(f"/api/insights/{person_id}")

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to generate insights"
