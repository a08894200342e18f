"""TwiML rendering for synchronous Twilio webhook replies."""

from __future__ import annotations

from xml.sax.saxutils import escape

from fastapi import Response

XML_HEADER = "<?xml version=\"1.0\" encoding=\"UTF-8\"?>"


def twiml_message(body: str) -> str:
    return f"{XML_HEADER}<Response><Message>{escape(body)}</Message></Response>"


def twiml_empty() -> str:
    return f"{XML_HEADER}<Response></Response>"


def twiml_response(xml: str) -> Response:
    # Twilio accepts text/xml and application/xml
    return Response(content=xml, media_type="application/xml")
