"""Visit analysis service - summaries, follow-ups and insights from the chat model.

Results are opaque snapshots of a single model call; nothing is retried or cached.
"""

import logging

import httpx
from pydantic import ValidationError

from ministering.schemas.ai import InsightEntry, VisitAnalysis, VisitInsights
from ministering.services.ai_prompt_registry import get_prompt
from ministering.services.ai_provider import AIProvider, ChatMessage
from ministering.services.ai_response_validation import parse_json_object

logger = logging.getLogger(__name__)

JSON_RESPONSE_FORMAT = {"type": "json_object"}
INSIGHT_SEPARATOR = "\n\n---\n\n"


class AnalysisError(Exception):
    """The language model call failed or returned unusable output."""

    pass


def format_insight_entries(entries: list[InsightEntry]) -> str:
    return INSIGHT_SEPARATOR.join(
        f"Date: {entry.date}\nContent: {entry.transcript}" for entry in entries
    )


class AnalysisService:
    def __init__(self, provider: AIProvider, model: str = "gpt-4o"):
        self.provider = provider
        self.model = model

    async def _complete_json(self, prompt_key: str, **render_kwargs) -> dict:
        template = get_prompt(prompt_key)
        messages = [
            ChatMessage(role="system", content=template.system),
            ChatMessage(role="user", content=template.render_user(**render_kwargs)),
        ]
        response = await self.provider.chat(
            messages,
            model=self.model,
            response_format=JSON_RESPONSE_FORMAT,
        )
        data = parse_json_object(response.content)
        if data is None:
            raise ValueError("Model response was not a JSON object")
        return data

    async def analyze(self, transcript: str) -> VisitAnalysis:
        """
        Summarize a visit transcript and suggest follow-ups, scriptures and talks.

        Raises:
            AnalysisError: The model call or response parsing failed
        """
        try:
            data = await self._complete_json("visit_analysis", transcript=transcript)
            return VisitAnalysis.model_validate(data)
        except (httpx.HTTPError, KeyError, ValueError, ValidationError) as exc:
            raise AnalysisError(f"Failed to analyze ministering entry: {exc}") from exc

    async def generate_insights(self, entries: list[InsightEntry]) -> VisitInsights:
        """
        Find patterns across a person's visits and suggest future approaches.

        Raises:
            AnalysisError: The model call or response parsing failed
        """
        try:
            data = await self._complete_json(
                "visit_insights", transcripts=format_insight_entries(entries)
            )
            return VisitInsights.model_validate(data)
        except (httpx.HTTPError, KeyError, ValueError, ValidationError) as exc:
            raise AnalysisError(f"Failed to generate insights: {exc}") from exc
