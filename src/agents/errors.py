"""Domain-specific exceptions for assistant operations.

These exceptions are safe to import from API and config layers without pulling in
provider SDKs.
"""

from __future__ import annotations


class AssistantError(Exception):
    default_detail: str = "Assistant error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail


class ConfigurationError(AssistantError):
    default_detail = "Configuration is missing or invalid."


class LLMFailedError(AssistantError):
    default_detail = "LLM request failed."


class MessageDeliveryError(AssistantError):
    default_detail = "Outbound message delivery failed."
