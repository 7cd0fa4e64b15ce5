"""Primitive JSON response assertions.

``ResponseContext`` is the contract the envelope helpers compose: six
primitive checks against the last response a test produced. Any test harness
can implement it; ``HttpxResponseContext`` implements it over the
``httpx.Response`` objects returned by FastAPI's / Starlette's ``TestClient``
(or a plain ``httpx.Client``).

Every primitive raises ``EnvelopeAssertionError`` on mismatch and returns the
context otherwise, so calls chain.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from envelope_assertions.exceptions import EnvelopeAssertionError


# ---------------------------------------------------------------------------
# JSON comparison helpers
# ---------------------------------------------------------------------------


def json_equal(actual: Any, expected: Any) -> bool:
    """Strict JSON equality: ``true`` never equals ``1``, key order is ignored."""
    if isinstance(actual, bool) or isinstance(expected, bool):
        return type(actual) is type(expected) and actual == expected
    if isinstance(expected, Mapping):
        return (
            isinstance(actual, Mapping)
            and actual.keys() == expected.keys()
            and all(json_equal(actual[key], value) for key, value in expected.items())
        )
    if _is_list(expected):
        return (
            _is_list(actual)
            and len(actual) == len(expected)
            and all(json_equal(a, e) for a, e in zip(actual, expected))
        )
    return actual == expected


def json_subset(actual: Any, expected: Any) -> bool:
    """True when ``actual`` contains everything in ``expected``.

    Mappings compare key-wise, lists index-wise, scalars with ``json_equal``.
    """
    if isinstance(expected, Mapping):
        return isinstance(actual, Mapping) and all(
            key in actual and json_subset(actual[key], value)
            for key, value in expected.items()
        )
    if _is_list(expected):
        return (
            _is_list(actual)
            and len(actual) >= len(expected)
            and all(json_subset(a, e) for a, e in zip(actual, expected))
        )
    return json_equal(actual, expected)


def contains_pair(node: Any, key: str, value: Any) -> bool:
    """True when some mapping at any depth of ``node`` holds ``key`` matching ``value``."""
    if isinstance(node, Mapping):
        if key in node and _pair_matches(node[key], value):
            return True
        return any(contains_pair(child, key, value) for child in node.values())
    if _is_list(node):
        return any(contains_pair(child, key, value) for child in node)
    return False


def _pair_matches(actual: Any, expected: Any) -> bool:
    if isinstance(expected, Mapping):
        return json_subset(actual, expected)
    return json_equal(actual, expected)


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


# ---------------------------------------------------------------------------
# Abstract contract
# ---------------------------------------------------------------------------


class ResponseContext(ABC):
    """The six primitive assertions a host test harness supplies."""

    @abstractmethod
    def see_status_code(self, status: int) -> ResponseContext:
        """Assert the HTTP status code of the response equals *status*."""

    @abstractmethod
    def see_json(self, data: Mapping[str, Any], negate: bool = False) -> ResponseContext:
        """Assert every key/value pair of *data* appears somewhere in the body.

        With *negate*, assert none of the pairs appear.
        """

    @abstractmethod
    def see_json_structure(
        self,
        structure: Sequence[Any] | Mapping[str, Any],
        response_data: Any = None,
    ) -> ResponseContext:
        """Assert the body (or *response_data*) has the given key structure."""

    @abstractmethod
    def see_json_subset(self, data: Mapping[str, Any]) -> ResponseContext:
        """Assert the body is a superset of *data*."""

    @abstractmethod
    def see_json_equals(self, data: Any) -> ResponseContext:
        """Assert the body equals *data* exactly."""

    @abstractmethod
    def decode_response_json(self) -> Any:
        """Validate and return the decoded response JSON."""


# ---------------------------------------------------------------------------
# httpx implementation
# ---------------------------------------------------------------------------


class HttpxResponseContext(ResponseContext):
    """Primitive assertions over the most recent ``httpx.Response``.

    Tests hand each response over with :meth:`use` (or the constructor)
    before asserting against it.
    """

    def __init__(self, response: httpx.Response | None = None) -> None:
        self.response = response

    def use(self, response: httpx.Response) -> HttpxResponseContext:
        """Make *response* the one subsequent assertions inspect."""
        self.response = response
        return self

    def _require_response(self) -> httpx.Response:
        if self.response is None:
            raise EnvelopeAssertionError("No response has been recorded")
        return self.response

    def see_status_code(self, status: int) -> HttpxResponseContext:
        actual = self._require_response().status_code
        if actual != status:
            raise EnvelopeAssertionError(
                f"Expected status code {status}, got {actual}",
                expected=status,
                actual=actual,
            )
        return self

    def see_json(self, data: Mapping[str, Any], negate: bool = False) -> HttpxResponseContext:
        body = self.decode_response_json()
        for key, value in data.items():
            found = contains_pair(body, key, value)
            if found and negate:
                raise EnvelopeAssertionError(
                    f"Did not expect JSON fragment {{{key!r}: {value!r}}} in response",
                    actual=body,
                )
            if not found and not negate:
                raise EnvelopeAssertionError(
                    f"Unable to find JSON fragment {{{key!r}: {value!r}}} in response",
                    actual=body,
                )
        return self

    def see_json_structure(
        self,
        structure: Sequence[Any] | Mapping[str, Any],
        response_data: Any = None,
    ) -> HttpxResponseContext:
        if response_data is None:
            response_data = self.decode_response_json()
        _check_structure(structure, response_data, path="$")
        return self

    def see_json_subset(self, data: Mapping[str, Any]) -> HttpxResponseContext:
        body = self.decode_response_json()
        if not json_subset(body, data):
            raise EnvelopeAssertionError(
                "Response is not a superset of the expected JSON",
                expected=dict(data),
                actual=body,
            )
        return self

    def see_json_equals(self, data: Any) -> HttpxResponseContext:
        body = self.decode_response_json()
        if not json_equal(body, data):
            raise EnvelopeAssertionError(
                "Response JSON does not equal the expected JSON",
                expected=data,
                actual=body,
            )
        return self

    def decode_response_json(self) -> Any:
        response = self._require_response()
        try:
            return response.json()
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError (non UTF-8 bodies)
            raise EnvelopeAssertionError(
                "Invalid JSON was returned from the route",
                actual=response.text[:200],
            ) from exc


def _check_structure(structure: Any, data: Any, path: str) -> None:
    """Walk a ``["key", {"key": [...]}, {"*": [...]}]`` style structure against *data*."""
    entries = structure.items() if isinstance(structure, Mapping) else [(None, s) for s in structure]

    for key, value in entries:
        if key is None and isinstance(value, Mapping):
            _check_structure(value, data, path)
        elif key is None:
            if not isinstance(data, Mapping) or value not in data:
                raise EnvelopeAssertionError(
                    f"Missing key {value!r} at {path}",
                    path=path,
                    actual=data,
                )
        elif key == "*":
            if not _is_list(data):
                raise EnvelopeAssertionError(
                    f"Expected a list at {path}",
                    path=path,
                    actual=data,
                )
            for index, item in enumerate(data):
                _check_structure(value, item, f"{path}[{index}]")
        else:
            if not isinstance(data, Mapping) or key not in data:
                raise EnvelopeAssertionError(
                    f"Missing key {key!r} at {path}",
                    path=path,
                    actual=data,
                )
            _check_structure(value, data[key], f"{path}.{key}")
