"""Conversation records kept in memory per caller."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Role = Literal["user", "assistant"]


@dataclass(frozen=True, slots=True)
class Turn:
    """One message of a conversation, tagged with its speaker."""

    role: Role
    content: str

    def as_message(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class Session:
    """Transcript and freshness timestamp for one caller identity.

    The transcript only ever grows; callers append through :meth:`append`.
    """

    identity: str
    last_activity: float
    transcript: list[Turn] = field(default_factory=list)

    def append(self, turn: Turn) -> None:
        self.transcript.append(turn)

    def touch(self, now: float) -> None:
        if now > self.last_activity:
            self.last_activity = now

    def is_live(self, now: float, ttl_seconds: float) -> bool:
        return now - self.last_activity < ttl_seconds

    def turns(self) -> tuple[Turn, ...]:
        return tuple(self.transcript)
