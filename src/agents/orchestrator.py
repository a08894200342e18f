"""Turns inbound caller messages into assistant replies with conversational memory."""

from __future__ import annotations

import asyncio
import logging

from agents.errors import LLMFailedError
from llm.base import BaseLLMClient
from sessions.models import Turn
from sessions.store import SessionStore

LOGGER = logging.getLogger(__name__)


class DialogueOrchestrator:
    """Feeds each caller's full transcript to the LLM backend.

    The backend keeps no state between calls, so every request replays the whole
    session. A failed backend call leaves only the user turn in the transcript.

    Two overlapping calls for the same identity are not serialized: their user
    and assistant turns may interleave in the transcript. Each call still appends
    its own user turn before its assistant turn.
    """

    def __init__(
        self,
        store: SessionStore,
        backend: BaseLLMClient,
        *,
        system_prompt: str,
        fallback_reply: str,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._store = store
        self._backend = backend
        self._system_prompt = system_prompt
        self._fallback_reply = fallback_reply
        self._timeout = timeout_seconds

    @property
    def fallback_reply(self) -> str:
        return self._fallback_reply

    async def handle_turn(self, identity: str, incoming_text: str) -> str:
        session = await self._store.get_or_create(identity)
        session.append(Turn(role="user", content=incoming_text))

        try:
            segments = await asyncio.wait_for(
                self._backend.generate(self._system_prompt, session.turns()),
                timeout=self._timeout,
            )
            reply = self._join_segments(segments)
        except asyncio.TimeoutError:
            LOGGER.error("LLM call for %s timed out after %.1fs", identity, self._timeout)
            return self._fallback_reply
        except LLMFailedError as exc:
            LOGGER.error("LLM call for %s failed: %s", identity, exc.detail)
            return self._fallback_reply
        except Exception:
            LOGGER.exception("Unexpected LLM failure for %s", identity)
            return self._fallback_reply

        session.append(Turn(role="assistant", content=reply))
        self._store.record_activity(session)
        return reply

    async def seed_greeting(self, identity: str, greeting: str) -> None:
        """Record an unsolicited assistant message so later turns have context."""

        session = await self._store.get_or_create(identity)
        session.append(Turn(role="assistant", content=greeting))
        self._store.record_activity(session)

    @staticmethod
    def _join_segments(segments: list[str]) -> str:
        if not isinstance(segments, list) or not all(isinstance(seg, str) for seg in segments):
            raise LLMFailedError("LLM returned malformed segments.")
        return "\n".join(segments)
