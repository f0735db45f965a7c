from __future__ import annotations

import os

from pydantic import BaseModel, ValidationInfo, field_validator

from ..application.conditions import ExpiryPolicy


class Settings(BaseModel):
    """Typed sender settings built from environment variables."""

    # HTTP settings
    http_timeout: float = 10.0

    # Transfer state polling
    poll_attempts: int = 5
    poll_interval: float = 1.0

    # Expiry settings, in seconds
    destination_expiry_duration: float = 5.0
    min_message_window: float = 1.0
    case_expiry_duration: float = 10.0

    @field_validator(
        "http_timeout",
        "poll_attempts",
        "poll_interval",
        "destination_expiry_duration",
        "min_message_window",
        "case_expiry_duration",
    )
    @classmethod
    def validate_positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return v

    def expiry_policy(self) -> ExpiryPolicy:
        return ExpiryPolicy(
            destination_expiry_duration=self.destination_expiry_duration,
            min_message_window=self.min_message_window,
        )


def get_settings() -> Settings:
    """Return typed settings instance sourced from env vars."""
    return Settings(
        http_timeout=float(os.environ.get("CHAINSEND_HTTP_TIMEOUT", "10.0")),
        poll_attempts=int(os.environ.get("CHAINSEND_POLL_ATTEMPTS", "5")),
        poll_interval=float(os.environ.get("CHAINSEND_POLL_INTERVAL", "1.0")),
        destination_expiry_duration=float(
            os.environ.get("CHAINSEND_DESTINATION_EXPIRY", "5.0")
        ),
        min_message_window=float(
            os.environ.get("CHAINSEND_MIN_MESSAGE_WINDOW", "1.0")
        ),
        case_expiry_duration=float(os.environ.get("CHAINSEND_CASE_EXPIRY", "10.0")),
    )
