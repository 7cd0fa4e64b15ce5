"""Public envelope models."""

from envelope_assertions.models.envelope import (
    ErrorBody,
    ErrorEnvelope,
    SuccessEnvelope,
    parse_envelope,
)

__all__ = [
    "ErrorBody",
    "ErrorEnvelope",
    "SuccessEnvelope",
    "parse_envelope",
]
