"""Client for the Anthropic Messages API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from agents.errors import LLMFailedError
from config.settings import Settings, get_settings
from llm.base import BaseLLMClient
from sessions.models import Turn

LOGGER = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.anthropic.com"
API_VERSION = "2023-06-01"


def text_segments(data: Any) -> list[str]:
    """Extract the ``text`` blocks of a Messages API response, in order."""

    if not isinstance(data, dict) or not isinstance(data.get("content"), list):
        raise LLMFailedError("Anthropic response has no content blocks.")
    segments = [
        block["text"]
        for block in data["content"]
        if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str)
    ]
    if not segments:
        raise LLMFailedError("Anthropic response contains no text.")
    return segments


class AnthropicClient(BaseLLMClient):
    """Minimal Messages API client over httpx."""

    def __init__(self, settings: Settings | None = None, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        settings = settings or get_settings()
        if not settings.llm_api_key:
            raise ValueError("LLM API key must be configured for Anthropic client.")

        self._model = settings.llm_model
        self._max_tokens = settings.llm_max_tokens
        self._client = httpx.AsyncClient(
            base_url=(settings.llm_endpoint or DEFAULT_ENDPOINT).rstrip("/"),
            timeout=settings.llm_timeout_seconds,
            transport=transport,
            headers={
                "x-api-key": settings.llm_api_key,
                "anthropic-version": API_VERSION,
                "content-type": "application/json",
            },
        )

    async def generate(self, system: str, turns: Sequence[Turn]) -> list[str]:
        payload = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "system": system,
            "messages": [turn.as_message() for turn in turns],
        }
        try:
            response = await self._client.post("/v1/messages", json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise LLMFailedError(f"Anthropic request failed: {exc}") from exc
        return text_segments(data)

    async def aclose(self) -> None:
        await self._client.aclose()
