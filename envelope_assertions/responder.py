"""Builds success and error envelopes as FastAPI JSON responses.

The same ``Responder`` is used by an application to render its responses
and by ``ResponseAssertions`` to produce the response a test expects.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from envelope_assertions.config.settings import ResponderSettings, get_settings
from envelope_assertions.exceptions import InvalidStatusCodeError

logger = logging.getLogger(__name__)


class Responder:
    """Renders envelopes with a fixed configuration.

    Parameters
    ----------
    include_status_code:
        Whether error envelopes carry a ``status`` field. Success envelopes
        always do. Defaults to the value from ``ResponderSettings``.
    """

    def __init__(
        self,
        *,
        include_status_code: bool | None = None,
        settings: ResponderSettings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.include_status_code = (
            settings.include_status_code
            if include_status_code is None
            else include_status_code
        )

    def success_body(
        self,
        data: Any = None,
        status: int = 200,
        meta: dict | None = None,
    ) -> dict[str, Any]:
        """Return the success envelope as a plain dict."""
        if not 200 <= status <= 299:
            raise InvalidStatusCodeError(status, "success (2xx)")

        body: dict[str, Any] = {
            "success": True,
            "status": status,
            "data": jsonable_encoder(data),
        }
        if meta:
            body["meta"] = jsonable_encoder(meta)
        return body

    def error_body(
        self,
        code: str,
        status: int = 500,
        message: str | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return the error envelope as a plain dict.

        ``details`` are merged into the ``error`` object after ``code`` and
        ``message``; a detail named ``code`` or ``message`` never replaces them.
        """
        if not 400 <= status <= 599:
            raise InvalidStatusCodeError(status, "error (4xx/5xx)")

        body: dict[str, Any] = {"success": False}
        if self.include_status_code:
            body["status"] = status
        error: dict[str, Any] = {"code": code, "message": message}
        for key, value in jsonable_encoder(details or {}).items():
            error.setdefault(key, value)
        body["error"] = error
        return body

    def success(
        self,
        data: Any = None,
        status: int = 200,
        meta: dict | None = None,
    ) -> JSONResponse:
        """Build a success envelope response."""
        return JSONResponse(status_code=status, content=self.success_body(data, status, meta))

    def error(
        self,
        code: str,
        status: int = 500,
        message: str | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> JSONResponse:
        """Build an error envelope response."""
        logger.debug("Rendering error envelope", extra={"error_code": code, "status_code": status})
        return JSONResponse(
            status_code=status,
            content=self.error_body(code, status, message, details),
        )
