"""Shared abstractions for language model clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from sessions.models import Turn


class BaseLLMClient(ABC):
    """Abstract base class for LLM providers.

    Providers are stateless between calls: the whole transcript is sent every time.
    """

    @abstractmethod
    async def generate(self, system: str, turns: Sequence[Turn]) -> list[str]:
        """Return the ordered text segments of the model reply.

        Raises ``LLMFailedError`` on error responses or malformed output.
        """

    async def aclose(self) -> None:
        """Release network resources held by the client."""
