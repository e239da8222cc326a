"""Tests for POST /api/analyze."""

import json

import httpx
import pytest
from httpx import AsyncClient

from ministering.core.deps import get_analysis_service
from ministering.main import app
from ministering.services.ai_provider import (
    AIProvider,
    ChatMessage,
    ChatResponse,
    OpenAIProvider,
)
from ministering.services.analysis_service import AnalysisError, AnalysisService


class FakeChatProvider(AIProvider):
    """Returns a canned completion and remembers what it was asked."""

    def __init__(self, content: str):
        self.content = content
        self.calls: list[dict] = []

    async def chat(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        response_format: dict | None = None,
    ) -> ChatResponse:
        self.calls.append(
            {"messages": messages, "model": model, "response_format": response_format}
        )
        return ChatResponse(
            content=self.content,
            prompt_tokens=10,
            completion_tokens=10,
            total_tokens=20,
            model=model or "gpt-4o",
        )


SMITHS_TRANSCRIPT = (
    "Visited the Smiths. Their son is leaving on a mission next month and "
    "Sister Smith has been unwell. They asked for a blessing."
)


@pytest.mark.asyncio
async def test_analyze_visit(authed_client: AsyncClient):
    provider = FakeChatProvider(
        json.dumps(
            {
                "summary": "The Smiths are preparing their son for a mission.",
                "followups": ["Arrange a priesthood blessing for Sister Smith"],
                "scriptures": ["Alma 37:37"],
                "talks": ["Sustaining missionaries"],
            }
        )
    )
    app.dependency_overrides[get_analysis_service] = lambda: AnalysisService(provider)

    response = await authed_client.post("/api/analyze", json={"transcript": SMITHS_TRANSCRIPT})

    assert response.status_code == 200
    assert response.json() == {
        "summary": "The Smiths are preparing their son for a mission.",
        "followups": ["Arrange a priesthood blessing for Sister Smith"],
        "scriptures": ["Alma 37:37"],
        "talks": ["Sustaining missionaries"],
    }
    [call] = provider.calls
    assert call["response_format"] == {"type": "json_object"}
    assert SMITHS_TRANSCRIPT in call["messages"][-1].content


@pytest.mark.asyncio
async def test_analyze_fills_missing_fields(authed_client: AsyncClient):
    provider = FakeChatProvider(json.dumps({"followups": "Call on Tuesday"}))
    app.dependency_overrides[get_analysis_service] = lambda: AnalysisService(provider)

    response = await authed_client.post("/api/analyze", json={"transcript": "short visit"})

    assert response.status_code == 200
    assert response.json() == {
        "summary": "Visit completed successfully.",
        "followups": ["Call on Tuesday"],
        "scriptures": [],
        "talks": [],
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"transcript": ""}, {"transcript": "   "}])
async def test_analyze_requires_transcript(authed_client: AsyncClient, analyzer, body):
    response = await authed_client.post("/api/analyze", json=body)

    assert response.status_code == 400
    assert response.json() == {"message": "Transcript is required"}
    assert analyzer.analyze_calls == []


@pytest.mark.asyncio
async def test_analyze_model_failure_returns_500(authed_client: AsyncClient, analyzer):
    analyzer.error = AnalysisError("Failed to analyze ministering entry: timeout")

    response = await authed_client.post("/api/analyze", json={"transcript": "hello"})

    assert response.status_code == 500
    assert response.json() == {
        "message": "Failed to analyze entry",
        "error": "Failed to analyze ministering entry: timeout",
    }


@pytest.mark.asyncio
async def test_analyze_unparseable_reply_returns_500(authed_client: AsyncClient):
    provider = FakeChatProvider("I'm sorry, I can't help with that.")
    app.dependency_overrides[get_analysis_service] = lambda: AnalysisService(provider)

    response = await authed_client.post("/api/analyze", json={"transcript": "hello"})

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to analyze entry"


@pytest.mark.asyncio
async def test_analyze_malformed_vendor_reply_returns_500(authed_client: AsyncClient):
    provider = OpenAIProvider(
        "sk-test",
        base_url="https://openai.test/v1",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": []})),
    )
    app.dependency_overrides[get_analysis_service] = lambda: AnalysisService(provider)

    response = await authed_client.post("/api/analyze", json={"transcript": "hello"})

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Failed to analyze entry"
    assert "no choices" in body["error"]
