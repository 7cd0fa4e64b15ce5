"""Middleware package: API error hierarchy and exception handlers."""

from envelope_assertions.middleware.error_handler import (
    ApiException,
    ResourceNotFoundError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationFailedError,
    register_error_handlers,
)

__all__ = [
    "ApiException",
    "ResourceNotFoundError",
    "UnauthenticatedError",
    "UnauthorizedError",
    "ValidationFailedError",
    "register_error_handlers",
]
