"""Envelope assertion helpers for integration tests.

``ResponseAssertions`` composes the primitives of a ``ResponseContext`` into
checks for the success envelope ``{ success: true, status, data }`` and the
error envelope ``{ success: false, status?, error: { code, ... } }``::

    client = TestClient(app)
    check = ResponseAssertions.for_response(client.get("/users/1"))
    check.assert_success({"user": {"id": 1}})

The expected success response is rendered by the same ``Responder`` the
application uses, so expected and actual bodies are encoded identically.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx
from fastapi.responses import JSONResponse

from envelope_assertions.config.settings import ResponderSettings, get_settings
from envelope_assertions.exceptions import EnvelopeAssertionError
from envelope_assertions.models.envelope import ErrorEnvelope, parse_envelope
from envelope_assertions.primitives import HttpxResponseContext, ResponseContext
from envelope_assertions.responder import Responder

logger = logging.getLogger(__name__)


class ResponseAssertions:
    """Success and error envelope checks over a ``ResponseContext``.

    Parameters
    ----------
    context:
        Supplies the primitive assertions against the response under test.
    responder:
        Produces the expected success response. Defaults to a ``Responder``
        built from *settings*.
    include_status:
        Whether error envelopes are expected to carry a ``status`` field.
        Defaults to the responder's ``include_status_code``.
    max_depth:
        Deepest nesting accepted in expected data. Defaults to
        ``settings.max_data_depth``.
    """

    def __init__(
        self,
        context: ResponseContext,
        responder: Responder | None = None,
        *,
        include_status: bool | None = None,
        max_depth: int | None = None,
        settings: ResponderSettings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.context = context
        self.responder = responder or Responder(settings=settings)
        self.include_status = (
            self.responder.include_status_code if include_status is None else include_status
        )
        self.max_depth = settings.max_data_depth if max_depth is None else max_depth

    @classmethod
    def for_response(cls, response: httpx.Response, **kwargs: Any) -> ResponseAssertions:
        """Build assertions against a single ``httpx.Response``."""
        return cls(HttpxResponseContext(response), **kwargs)

    # ------------------------------------------------------------------
    # Success envelope
    # ------------------------------------------------------------------

    def assert_success(self, data: Any = None, status: int = 200) -> ResponseAssertions:
        """Assert a success envelope whose body contains every leaf of *data*."""
        response = self.assert_success_response(data, status)
        data = _decode(response)["data"]
        if data is not None:
            # nesting was checked on the data the response was built from
            self._assert_data(data)
        return self

    def assert_success_equals(self, data: Any = None, status: int = 200) -> ResponseAssertions:
        """Assert the body equals the success envelope for *data* exactly."""
        response = self.assert_success_response(data, status)
        self.context.see_json_equals(_decode(response))
        return self

    def assert_success_response(self, data: Any = None, status: int = 200) -> JSONResponse:
        """Assert the status code and envelope markers of a success response.

        Returns the expected response rendered by the responder, for further
        inspection.
        """
        _check_nesting(data, self.max_depth)
        response = self.responder.success(data, status)

        logger.debug(
            "Asserting success envelope",
            extra={"assertion": "success", "status_code": response.status_code},
        )
        self.context.see_status_code(response.status_code).see_json(
            {"success": True, "status": response.status_code}
        ).see_json_structure(["data"])

        return response

    def assert_success_data(self, data: Any = None) -> ResponseAssertions:
        """Assert each leaf key/value of *data* appears somewhere in the body.

        Mappings, and lists made only of mappings, are walked recursively.
        Any other value is a leaf and must match as a whole. ``None`` skips
        the check. Non-mapping top-level data is matched as the ``data``
        field itself.
        """
        if data is None:
            return self

        _check_nesting(data, self.max_depth)
        self._assert_data(data)
        return self

    def _assert_data(self, data: Any) -> None:
        if isinstance(data, Mapping) or _is_mapping_list(data):
            self._assert_leaves(data)
        else:
            self.context.see_json({"data": data})

    def _assert_leaves(self, data: Mapping[str, Any] | list[Any]) -> None:
        items = data.items() if isinstance(data, Mapping) else enumerate(data)
        for key, value in items:
            if isinstance(value, Mapping) or _is_mapping_list(value):
                self._assert_leaves(value)
            else:
                self.context.see_json({key: value})

    def get_success_data(self) -> Any:
        """Decode the last response body and return its ``data`` field."""
        body = self.context.decode_response_json()
        try:
            envelope = parse_envelope(body)
        except ValueError as exc:
            raise EnvelopeAssertionError(
                "Response body is not a valid envelope", actual=body
            ) from exc

        if isinstance(envelope, ErrorEnvelope):
            raise EnvelopeAssertionError(
                "Error envelope has no 'data' field", actual=body
            )
        return body["data"]

    # ------------------------------------------------------------------
    # Error envelope
    # ------------------------------------------------------------------

    def assert_error(
        self,
        code: str,
        status: int | None = None,
        *,
        include_status: bool | None = None,
    ) -> ResponseAssertions:
        """Assert an error envelope carrying ``error.code == code``.

        The HTTP status is only checked when *status* is given; the body's
        ``status`` field is additionally checked when status codes are
        included in error bodies.
        """
        if include_status is None:
            include_status = self.include_status

        logger.debug(
            "Asserting error envelope",
            extra={"assertion": "error", "status_code": status, "error_code": code},
        )
        if status is not None:
            self.context.see_status_code(status)
            if include_status:
                self.context.see_json({"status": status})

        self.context.see_json({"success": False}).see_json_subset({"error": {"code": code}})
        return self


def _decode(response: JSONResponse) -> Any:
    return json.loads(response.body)


def _is_mapping_list(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(item, Mapping) for item in value)


def _check_nesting(data: Any, max_depth: int) -> None:
    """Reject expected data nested deeper than *max_depth* or holding a cycle."""
    stack: list[tuple[Any, int, frozenset[int]]] = [(data, 1, frozenset())]
    while stack:
        node, depth, ancestors = stack.pop()
        if not isinstance(node, (Mapping, list, tuple)):
            continue
        if id(node) in ancestors:
            raise EnvelopeAssertionError("Expected data contains a reference cycle")
        if depth > max_depth:
            raise EnvelopeAssertionError(
                "Expected data is nested too deeply",
                max_depth=max_depth,
            )
        children = node.values() if isinstance(node, Mapping) else node
        inner = ancestors | {id(node)}
        stack.extend((child, depth + 1, inner) for child in children)
