"""AI provider abstraction layer.

Chat completions over the OpenAI REST API with a provider-neutral interface.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"


@dataclass
class ChatMessage:
    """A single message in a conversation."""

    role: str  # 'system', 'user', 'assistant'
    content: str


@dataclass
class ChatResponse:
    """Response from an AI provider."""

    content: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    model: str


class AIProvider(ABC):
    """Abstract base class for AI providers."""

    @abstractmethod
    async def chat(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        response_format: dict | None = None,
    ) -> ChatResponse:
        """Send a chat completion request."""
        pass


def parse_chat_completion(data: Any, model: str) -> ChatResponse:
    """
    Pull the first choice and token usage out of a chat completion body.

    Raises:
        ValueError: The body does not have the chat completion shape
    """
    if not isinstance(data, dict):
        raise ValueError("Chat completion response is not a JSON object")
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ValueError("Chat completion response has no choices")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        raise ValueError("Chat completion choice has no message")
    content = message.get("content") or ""
    if not isinstance(content, str):
        raise ValueError("Chat completion message content is not text")

    usage = data.get("usage")
    if not isinstance(usage, dict):
        usage = {}
    return ChatResponse(
        content=content,
        prompt_tokens=usage.get("prompt_tokens", 0),
        completion_tokens=usage.get("completion_tokens", 0),
        total_tokens=usage.get("total_tokens", 0),
        model=model,
    )


class OpenAIProvider(AIProvider):
    """OpenAI API provider."""

    def __init__(
        self,
        api_key: str,
        default_model: str = "gpt-4o",
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.default_model = default_model
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    async def chat(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        response_format: dict | None = None,
    ) -> ChatResponse:
        model = model or self.default_model

        body: dict[str, Any] = {
            "model": model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format:
            body["response_format"] = response_format

        async with httpx.AsyncClient(timeout=60.0, transport=self.transport) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=body,
            )
            response.raise_for_status()
            data = response.json()

        result = parse_chat_completion(data, model)
        logger.info(
            "OpenAI chat completion used %d tokens (model=%s)", result.total_tokens, model
        )
        return result
