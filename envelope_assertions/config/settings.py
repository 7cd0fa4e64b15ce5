"""Pydantic Settings for the envelope assertion helpers.

All environment variables use the RESPONDER_ prefix.
Example: RESPONDER_INCLUDE_STATUS_CODE=false, RESPONDER_MAX_DATA_DEPTH=64
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class ResponderSettings(BaseSettings):
    """Envelope configuration validated from environment variables."""

    # Error envelopes carry the HTTP status in their body
    include_status_code: bool = True

    # Nesting limit when walking expected success data
    max_data_depth: int = Field(default=32, ge=1, le=1024)

    log_level: str = "INFO"

    model_config = {"env_prefix": "RESPONDER_"}


@lru_cache(maxsize=1)
def get_settings() -> ResponderSettings:
    """Return the process-wide settings, loaded once from the environment."""
    return ResponderSettings()
