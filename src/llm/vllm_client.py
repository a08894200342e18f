"""Client for self-hosted vLLM or TGI compatible inference endpoints."""

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


def choice_segments(data: Any) -> list[str]:
    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices:
        raise LLMFailedError("LLM response contains no choices.")
    segments: list[str] = []
    for choice in choices:
        content = (choice.get("message") or {}).get("content") if isinstance(choice, dict) else None
        if isinstance(content, str) and content:
            segments.append(content)
    if not segments:
        raise LLMFailedError("LLM response contains no text.")
    return segments


class VLLMClient(BaseLLMClient):
    """Minimal client for a self-hosted inference server."""

    def __init__(self, settings: Settings | None = None, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        settings = settings or get_settings()
        if not settings.llm_endpoint:
            raise ValueError("Self-hosted LLM endpoint must be configured.")

        headers = {"Content-Type": "application/json"}
        if settings.llm_api_key:
            headers["Authorization"] = f"Bearer {settings.llm_api_key}"

        self._model = settings.llm_model
        self._max_tokens = settings.llm_max_tokens
        self._client = httpx.AsyncClient(
            base_url=settings.llm_endpoint.rstrip("/"),
            timeout=settings.llm_timeout_seconds,
            transport=transport,
            headers=headers,
        )

    async def generate(self, system: str, turns: Sequence[Turn]) -> list[str]:
        payload = {
            "model": self._model,
            "messages": [{"role": "system", "content": system}, *(turn.as_message() for turn in turns)],
            "max_tokens": self._max_tokens,
        }
        try:
            response = await self._client.post("/v1/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise LLMFailedError(f"LLM request failed: {exc}") from exc
        return choice_segments(data)

    async def aclose(self) -> None:
        await self._client.aclose()
