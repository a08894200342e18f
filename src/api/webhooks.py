"""Twilio webhooks for missed calls and inbound SMS.

- ``/webhook/call-status``: status callback on the clinic number. A call that
  ends as ``no-answer`` or ``busy`` gets an SMS greeting.
- ``/webhook/sms``: messaging webhook. Replies are returned synchronously as
  TwiML so Twilio delivers them.

Malformed payloads degrade to empty values; these handlers always acknowledge
so Twilio does not retry.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from api.dependencies import get_app_settings, get_messenger, get_orchestrator
from api.twiml import twiml_empty, twiml_message, twiml_response
from prompts.loader import render_prompt

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["twilio"])

MISSED_CALL_STATUSES = frozenset({"no-answer", "busy"})


async def _form_fields(request: Request) -> dict[str, str]:
    try:
        form = await request.form()
    except Exception as exc:
        LOGGER.warning("Could not parse webhook payload: %s", exc)
        return {}
    return {key: str(value) for key, value in form.items() if isinstance(value, str)}


@router.post("/call-status")
async def call_status_webhook(
    request: Request,
    settings=Depends(get_app_settings),
    messenger=Depends(get_messenger),
    orchestrator=Depends(get_orchestrator),
) -> Response:
    form = await _form_fields(request)
    status = form.get("CallStatus", "").strip().lower()
    caller = form.get("From", "").strip()
    called = form.get("To", "").strip()

    LOGGER.info("Call status: %s from %s to %s", status or "<none>", caller or "<unknown>", called or "<unknown>")

    if status not in MISSED_CALL_STATUSES or not caller:
        return Response(status_code=200)

    greeting = render_prompt(settings.greeting_template, clinic_name=settings.clinic_name)
    try:
        if await messenger.send(caller, greeting):
            await orchestrator.seed_greeting(caller, greeting)
            LOGGER.info("Sent missed-call SMS to %s", caller)
    except Exception:
        LOGGER.exception("Missed-call greeting failed for %s", caller)

    return Response(status_code=200)


@router.post("/sms")
async def sms_webhook(
    request: Request,
    orchestrator=Depends(get_orchestrator),
) -> Response:
    form = await _form_fields(request)
    caller = form.get("From", "").strip()
    incoming_text = form.get("Body", "").strip()

    LOGGER.info("SMS from %s: %s", caller or "<unknown>", incoming_text)

    if not caller:
        LOGGER.warning("Inbound SMS without a sender; nothing to reply to")
        return twiml_response(twiml_empty())

    try:
        reply = await orchestrator.handle_turn(caller, incoming_text)
    except Exception:
        LOGGER.exception("SMS handling failed for %s", caller)
        reply = orchestrator.fallback_reply

    return twiml_response(twiml_message(reply))
