"""Configuration module: responder settings."""

from envelope_assertions.config.settings import ResponderSettings, get_settings

__all__ = [
    "ResponderSettings",
    "get_settings",
]
