from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from agents.errors import MessageDeliveryError
from config.settings import Settings, get_settings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TwilioConfig:
    account_sid: str
    auth_token: str
    phone_number: str


def get_twilio_config(settings: Settings | None = None) -> TwilioConfig:
    settings = settings or get_settings()
    return TwilioConfig(
        account_sid=settings.twilio_account_sid,
        auth_token=settings.twilio_auth_token,
        phone_number=settings.twilio_phone_number,
    )


def build_twilio_client(cfg: TwilioConfig | None = None):
    from twilio.rest import Client

    cfg = cfg or get_twilio_config()
    return Client(cfg.account_sid, cfg.auth_token)


class TwilioMessenger:
    """Outbound SMS channel. Failures are logged and reported, never retried."""

    def __init__(self, client, from_number: str) -> None:
        self._client = client
        self._from_number = from_number

    async def send(self, to: str, body: str) -> bool:
        try:
            await self._deliver(self._from_number, to, body)
        except MessageDeliveryError as exc:
            LOGGER.error("Failed to send SMS to %s: %s", to, exc.detail)
            return False
        return True

    async def _deliver(self, from_: str, to: str, body: str) -> str:
        from twilio.base.exceptions import TwilioException

        # The Twilio SDK is blocking; keep it off the event loop.
        try:
            message = await asyncio.to_thread(
                self._client.messages.create,
                body=body,
                from_=from_,
                to=to,
            )
        except (TwilioException, OSError) as exc:
            raise MessageDeliveryError(str(exc)) from exc
        return str(getattr(message, "sid", ""))
