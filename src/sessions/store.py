"""In-memory, TTL-bounded store of conversation sessions.

Note: This is a single-process store. Sessions do not survive a restart and are
not shared between workers.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from sessions.models import Session

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], float]


class SessionStore:
    """Maps caller identities to their live :class:`Session`.

    Expired entries are treated as absent on access and reclaimed by
    :meth:`sweep`. Memory is bounded only by the TTL.
    """

    def __init__(self, ttl_seconds: float = 60 * 60, *, clock: Clock = time.time) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._lock = asyncio.Lock()
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, identity: object) -> bool:
        return identity in self._sessions

    async def get_or_create(self, identity: str) -> Session:
        now = self._clock()
        async with self._lock:
            session = self._sessions.get(identity)
            if session is not None and session.is_live(now, self._ttl):
                session.touch(now)
                return session
            if session is not None:
                LOGGER.debug("Session for %s expired; starting a fresh one", identity)
            session = Session(identity=identity, last_activity=now)
            self._sessions[identity] = session
            return session

    def record_activity(self, session: Session) -> None:
        """Mark a session as used now, e.g. after writing to its transcript."""

        session.touch(self._clock())

    async def peek(self, identity: str) -> Session | None:
        """Return the stored session without refreshing it."""

        async with self._lock:
            return self._sessions.get(identity)

    async def sweep(self, now: float | None = None) -> None:
        if now is None:
            now = self._clock()
        async with self._lock:
            expired = [
                identity
                for identity, session in self._sessions.items()
                if not session.is_live(now, self._ttl)
            ]
            for identity in expired:
                del self._sessions[identity]
        if expired:
            LOGGER.debug("Swept %d expired session(s)", len(expired))

    async def run_sweeper(self, interval_seconds: float) -> None:
        """Sweep expired sessions forever; meant to run as a background task."""

        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await self.sweep()
            except Exception:
                LOGGER.exception("Session sweep failed")
