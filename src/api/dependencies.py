"""Shared FastAPI dependencies.

Collaborators are built once in the application lifespan and kept on
``app.state``; route handlers receive them through these accessors so tests can
override them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

if TYPE_CHECKING:  # pragma: no cover
    from agents.orchestrator import DialogueOrchestrator
    from config.settings import Settings
    from integrations.twilio_client import TwilioMessenger


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_orchestrator(request: Request) -> DialogueOrchestrator:
    return request.app.state.orchestrator


def get_messenger(request: Request) -> TwilioMessenger:
    return request.app.state.messenger
