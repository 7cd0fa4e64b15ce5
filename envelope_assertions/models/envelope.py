"""Success and error envelope models.

Every API response is wrapped in one of two envelopes:
  success: { success: true, status: int, data: T }
  error:   { success: false, status?: int, error: { code: str, message?: str, ... } }
"""

from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ErrorBody(BaseModel):
    """The ``error`` object of an error envelope.

    Extra keys (validation fields, details) are preserved.
    """

    model_config = ConfigDict(extra="allow")

    code: str = Field(..., min_length=1)
    message: str | None = None


class SuccessEnvelope(BaseModel, Generic[T]):
    """JSON envelope for successful responses."""

    model_config = ConfigDict(extra="allow")

    success: Literal[True] = True
    status: int = Field(default=200, ge=200, le=299)
    data: T | None


class ErrorEnvelope(BaseModel):
    """JSON envelope for error responses."""

    model_config = ConfigDict(extra="allow")

    success: Literal[False] = False
    status: int | None = Field(default=None, ge=400, le=599)
    error: ErrorBody


def parse_envelope(body: Any) -> SuccessEnvelope | ErrorEnvelope:
    """Validate a decoded JSON body into the envelope variant its ``success`` flag names.

    Raises pydantic's ``ValidationError`` when the body's fields contradict
    the flag, and ``ValueError`` when the body is not an envelope at all.
    """
    if not isinstance(body, dict) or not isinstance(body.get("success"), bool):
        raise ValueError("Response body is not an envelope: missing boolean 'success'")

    if body["success"]:
        return SuccessEnvelope.model_validate(body)
    return ErrorEnvelope.model_validate(body)
