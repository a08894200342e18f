from __future__ import annotations

import asyncio

import pytest

from sessions.models import Turn
from sessions.store import SessionStore

TTL = 3600.0


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _run(coro):
    return asyncio.run(coro)


def test_new_identity_gets_empty_session_stamped_now():
    clock = FakeClock()
    store = SessionStore(TTL, clock=clock)

    session = _run(store.get_or_create("+15551234567"))

    assert session.identity == "+15551234567"
    assert session.transcript == []
    assert session.last_activity == clock.now
    assert "+15551234567" in store


def test_expired_session_is_replaced_with_fresh_one():
    clock = FakeClock()
    store = SessionStore(TTL, clock=clock)
    stale = _run(store.get_or_create("+15551234567"))
    stale.append(Turn(role="user", content="old news"))
    stale.last_activity = clock.now - TTL - 0.001

    fresh = _run(store.get_or_create("+15551234567"))

    assert fresh is not stale
    assert fresh.transcript == []
    assert fresh.last_activity == clock.now
    assert len(store) == 1


def test_session_exactly_at_ttl_counts_as_expired():
    clock = FakeClock()
    store = SessionStore(TTL, clock=clock)
    first = _run(store.get_or_create("a"))
    clock.now += TTL

    assert _run(store.get_or_create("a")) is not first


def test_access_within_ttl_keeps_continuity_and_refreshes_activity():
    clock = FakeClock()
    store = SessionStore(TTL, clock=clock)
    first = _run(store.get_or_create("a"))
    first.append(Turn(role="user", content="hello"))

    clock.now += TTL - 1
    second = _run(store.get_or_create("a"))

    assert second is first
    assert second.transcript == [Turn(role="user", content="hello")]
    assert second.last_activity == clock.now

    # Refreshed, so still live almost a full TTL later.
    clock.now += TTL - 1
    assert _run(store.get_or_create("a")) is first


def test_last_activity_never_moves_backwards():
    clock = FakeClock()
    store = SessionStore(TTL, clock=clock)
    session = _run(store.get_or_create("a"))
    clock.now -= 5

    _run(store.get_or_create("a"))

    assert session.last_activity == clock.now + 5


def test_sweep_removes_only_expired_sessions():
    clock = FakeClock()
    store = SessionStore(TTL, clock=clock)
    old = _run(store.get_or_create("old"))
    _run(store.get_or_create("new"))
    old.last_activity = clock.now - 2 * TTL

    _run(store.sweep(clock.now))

    assert "old" not in store
    assert "new" in store
    assert len(store) == 1

    _run(store.sweep(clock.now))
    assert len(store) == 1


def test_peek_does_not_refresh_or_create():
    clock = FakeClock()
    store = SessionStore(TTL, clock=clock)
    assert _run(store.peek("missing")) is None

    session = _run(store.get_or_create("a"))
    clock.now += 10
    assert _run(store.peek("a")) is session
    assert session.last_activity == clock.now - 10


def test_concurrent_access_for_distinct_identities():
    store = SessionStore(TTL)

    async def scenario():
        sessions = await asyncio.gather(*(store.get_or_create(f"id-{i}") for i in range(50)))
        await store.sweep()
        return sessions

    sessions = _run(scenario())

    assert len({s.identity for s in sessions}) == 50
    assert len(store) == 50


def test_concurrent_access_for_same_identity_yields_one_session():
    store = SessionStore(TTL)

    async def scenario():
        return await asyncio.gather(*(store.get_or_create("same") for _ in range(20)))

    sessions = _run(scenario())

    assert all(s is sessions[0] for s in sessions)


def test_sweeper_task_evicts_in_background():
    clock = FakeClock()
    store = SessionStore(TTL, clock=clock)

    async def scenario():
        session = await store.get_or_create("a")
        session.last_activity = clock.now - 2 * TTL
        task = asyncio.create_task(store.run_sweeper(0.01))
        for _ in range(100):
            if "a" not in store:
                break
            await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    _run(scenario())
    assert "a" not in store


def test_invalid_durations_are_rejected():
    with pytest.raises(ValueError):
        SessionStore(0)

    with pytest.raises(ValueError):
        _run(SessionStore(TTL).run_sweeper(0))
