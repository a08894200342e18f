from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from agents.errors import LLMFailedError  # noqa: E402
from config.settings import Settings  # noqa: E402
from llm.base import BaseLLMClient  # noqa: E402

CLINIC = "Happy Paws Vet"


class FakeLLM(BaseLLMClient):
    def __init__(self, *, segments: list[str] | None = None, error: Exception | None = None, delay: float = 0.0) -> None:
        self._segments = segments if segments is not None else ["Sure, happy to help!"]
        self._error = error
        self._delay = delay
        self.calls: list[tuple[str, list[tuple[str, str]]]] = []

    async def generate(self, system, turns):
        self.calls.append((system, [(turn.role, turn.content) for turn in turns]))
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return list(self._segments)


class FailingLLM(FakeLLM):
    def __init__(self) -> None:
        super().__init__(error=LLMFailedError("upstream 529 overloaded"))


class FakeMessenger:
    def __init__(self, *, succeed: bool = True) -> None:
        self._succeed = succeed
        self.sent: list[tuple[str, str]] = []

    async def send(self, to: str, body: str) -> bool:
        self.sent.append((to, body))
        return self._succeed


def make_settings(**overrides) -> Settings:
    values = {
        "twilio_account_sid": "AC123",
        "twilio_auth_token": "token",
        "twilio_phone_number": "+15005550006",
        "llm_api_key": "sk-test",
        "clinic_name": CLINIC,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def app(settings):
    from main import create_app

    return create_app(settings)
