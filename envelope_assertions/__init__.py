"""Assertion helpers for API responses wrapped in success/error envelopes."""

from envelope_assertions.assertions import ResponseAssertions
from envelope_assertions.exceptions import EnvelopeAssertionError, InvalidStatusCodeError
from envelope_assertions.primitives import HttpxResponseContext, ResponseContext
from envelope_assertions.responder import Responder

__all__ = [
    "EnvelopeAssertionError",
    "HttpxResponseContext",
    "InvalidStatusCodeError",
    "Responder",
    "ResponseAssertions",
    "ResponseContext",
]
