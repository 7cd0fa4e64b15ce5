"""API error hierarchy and FastAPI exception handlers.

All application errors extend ApiException. The handlers catch these errors
(plus FastAPI's RequestValidationError and unhandled exceptions) and render
them through a Responder as error envelopes:
{ success: false, status?, error: { code, message, ... } }.
"""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from envelope_assertions.responder import Responder

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error hierarchy
# ---------------------------------------------------------------------------


class ApiException(Exception):
    """Base error for all errors rendered as error envelopes."""

    status_code: int = 500
    error_code: str = "server_error"
    message: str = "An internal server error occurred"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class UnauthenticatedError(ApiException):
    """Request carries no valid credentials."""

    status_code = 401
    error_code = "unauthenticated"
    message = "You must be authenticated to access this resource"


class UnauthorizedError(ApiException):
    """Authenticated caller lacks permission."""

    status_code = 403
    error_code = "unauthorized"
    message = "You are not authorized to perform this action"


class ResourceNotFoundError(ApiException):
    """Requested resource does not exist."""

    status_code = 404
    error_code = "resource_not_found"
    message = "The requested resource was not found"


class ValidationFailedError(ApiException):
    """Payload validation failures: includes field-level details."""

    status_code = 422
    error_code = "validation_failed"
    message = "The given data failed to pass validation"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------


def register_error_handlers(app: FastAPI, responder: Responder | None = None) -> None:
    """Wire up all exception handlers on the FastAPI application."""
    responder = responder or Responder()

    async def _api_exception_handler(_request: Request, exc: ApiException) -> JSONResponse:
        return responder.error(exc.error_code, exc.status_code, exc.message, exc.details)

    async def _validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        field_errors = [
            {
                "field": " -> ".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        return responder.error(
            ValidationFailedError.error_code,
            ValidationFailedError.status_code,
            ValidationFailedError.message,
            {"fields": field_errors},
        )

    async def _unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception: %s\n%s",
            exc,
            traceback.format_exc(),
        )
        return responder.error(ApiException.error_code, 500, ApiException.message)

    app.add_exception_handler(ApiException, _api_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)  # type: ignore[arg-type]
