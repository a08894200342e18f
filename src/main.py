"""Entry point for the PawPing missed-call SMS assistant service."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from agents.errors import ConfigurationError
from agents.orchestrator import DialogueOrchestrator
from api.routes import SERVICE_NAME
from api.routes import router as service_router
from api.webhooks import router as webhook_router
from config.settings import Settings, get_settings
from integrations.twilio_client import TwilioMessenger, build_twilio_client, get_twilio_config
from llm.factory import build_llm_client
from prompts.loader import load_prompt, render_prompt
from sessions.store import SessionStore

LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_orchestrator(settings: Settings, store: SessionStore, backend) -> DialogueOrchestrator:
    template = load_prompt(settings.system_prompt_file or "system_prompt.txt")
    return DialogueOrchestrator(
        store,
        backend,
        system_prompt=render_prompt(template, clinic_name=settings.clinic_name),
        fallback_reply=render_prompt(settings.fallback_reply_template, clinic_name=settings.clinic_name),
        timeout_seconds=settings.llm_timeout_seconds,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = SessionStore(settings.session_ttl_seconds)
        backend = build_llm_client(settings)
        twilio_cfg = get_twilio_config(settings)

        app.state.settings = settings
        app.state.session_store = store
        app.state.orchestrator = build_orchestrator(settings, store, backend)
        app.state.messenger = TwilioMessenger(build_twilio_client(twilio_cfg), twilio_cfg.phone_number)

        sweeper = asyncio.create_task(
            store.run_sweeper(settings.session_sweep_interval_seconds),
            name="session-sweeper",
        )
        LOGGER.info("%s ready for %s on %s", SERVICE_NAME, settings.clinic_name, settings.twilio_phone_number)
        LOGGER.info("Endpoints: POST /webhook/call-status, POST /webhook/sms")
        try:
            yield
        finally:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper
            await backend.aclose()

    app = FastAPI(
        title="PawPing",
        description="Texts back missed callers of a veterinary clinic and answers their SMS replies.",
        lifespan=lifespan,
    )
    app.include_router(service_router)
    app.include_router(webhook_router)
    return app


def run() -> None:
    """Console entry point: validate configuration, then serve."""

    try:
        settings = get_settings()
    except ConfigurationError as exc:
        logging.basicConfig(level="ERROR", format=LOG_FORMAT)
        LOGGER.error("%s See .env.example", exc.detail)
        sys.exit(1)

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    import uvicorn

    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
