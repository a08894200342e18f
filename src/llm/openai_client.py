"""OpenAI/Azure OpenAI client wrapper."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from openai import AsyncOpenAI, OpenAIError

from agents.errors import LLMFailedError
from config.settings import Settings, get_settings
from llm.base import BaseLLMClient
from sessions.models import Turn

LOGGER = logging.getLogger(__name__)


class OpenAIClient(BaseLLMClient):
    """Wrapper for OpenAI or Azure OpenAI Chat Completion API."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        if not settings.llm_api_key:
            raise ValueError("LLM API key must be configured for OpenAI client.")

        self._client = AsyncOpenAI(
            api_key=settings.llm_api_key,
            base_url=settings.llm_endpoint or None,
            timeout=settings.llm_timeout_seconds,
        )
        self._model = settings.llm_model
        self._max_tokens = settings.llm_max_tokens

    async def generate(self, system: str, turns: Sequence[Turn]) -> list[str]:
        messages = [{"role": "system", "content": system}]
        messages.extend(turn.as_message() for turn in turns)
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                max_tokens=self._max_tokens,
            )
        except OpenAIError as exc:
            raise LLMFailedError(f"OpenAI request failed: {exc}") from exc

        segments = [
            choice.message.content
            for choice in response.choices
            if choice.message and choice.message.content
        ]
        if not segments:
            raise LLMFailedError("OpenAI response contains no text.")
        return segments

    async def aclose(self) -> None:
        await self._client.close()
