"""Error types raised by the envelope assertion helpers."""

from __future__ import annotations


class EnvelopeAssertionError(AssertionError):
    """A response diverged from the expected envelope.

    Subclasses ``AssertionError`` so test runners report it as a failure,
    not an error. ``details`` holds the ``expected`` / ``actual`` / ``path``
    context passed as keyword arguments.
    """

    message: str = "Response does not match the expected envelope"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self._render())

    def _render(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} ({context})"


class InvalidStatusCodeError(ValueError):
    """A status code outside the range allowed for the envelope variant."""

    def __init__(self, status: int, expected_range: str) -> None:
        self.status = status
        self.expected_range = expected_range
        super().__init__(f"Status code {status} is not a valid {expected_range} status")
