"""Application-wide configuration loading and validation."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from agents.errors import ConfigurationError

DEFAULT_GREETING = (
    "Hi! Thanks for calling {clinic_name}. \U0001F43E Sorry we missed you - "
    "how can we help? Reply APPT to book, REFILL for meds, or just tell us what you need!"
)

DEFAULT_FALLBACK_REPLY = (
    "Sorry, we're having a little trouble right now. "
    "Please try again or call {clinic_name} directly. \U0001F43E"
)


class Settings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    log_level: str = Field(default="INFO")
    port: int = Field(default=3000, ge=1, le=65535)

    # Twilio (Messaging)
    twilio_account_sid: str = Field(min_length=1)
    twilio_auth_token: str = Field(min_length=1)
    twilio_phone_number: str = Field(min_length=1, description="E.164, e.g. +1555...")

    # LLM connectivity
    llm_provider: Literal["anthropic", "openai", "self_hosted_vllm"] = Field(default="anthropic")
    llm_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("llm_api_key", "anthropic_api_key"),
    )
    llm_endpoint: str | None = Field(
        default=None,
        description="Override for the provider base URL (required for self-hosted vLLM).",
    )
    llm_model: str = Field(default="claude-sonnet-4-20250514")
    llm_max_tokens: int = Field(default=256, gt=0)
    llm_timeout_seconds: float = Field(default=30.0, gt=0)

    # Clinic / conversation
    clinic_name: str = Field(default="Our Veterinary Clinic")
    system_prompt_file: Path | None = Field(
        default=None,
        description="Optional path to a system prompt template; defaults to the bundled prompt.",
    )
    greeting_template: str = Field(default=DEFAULT_GREETING)
    fallback_reply_template: str = Field(default=DEFAULT_FALLBACK_REPLY)

    # Session lifecycle
    session_ttl_seconds: float = Field(default=60 * 60, gt=0)
    session_sweep_interval_seconds: float = Field(default=10 * 60, gt=0)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @model_validator(mode="after")
    def check_llm_credentials(self) -> Settings:
        if self.llm_provider in {"anthropic", "openai"} and not self.llm_api_key:
            raise ValueError(f"LLM_API_KEY (or ANTHROPIC_API_KEY) is required for {self.llm_provider}")
        if self.llm_provider == "self_hosted_vllm" and not self.llm_endpoint:
            raise ValueError("LLM_ENDPOINT is required for the self-hosted vLLM provider")
        return self


def load_settings() -> Settings:
    """Build Settings, converting validation failures into ConfigurationError."""

    try:
        return Settings()
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'settings'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return load_settings()
