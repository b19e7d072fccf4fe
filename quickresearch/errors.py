"""Error kinds raised by the research object lifecycle.

    ValidationError — bad local input, raised before any remote call
    TransportError  — the HTTP request never produced a response
    RemoteRejected  — the service answered with a non-success status
"""

from __future__ import annotations

from typing import Any


class QuickResearchError(RuntimeError):
    """Base class. ``operation`` names the store call that failed (submit/fetch/delete)."""

    def __init__(self, message: str, *, operation: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation


class ValidationError(QuickResearchError):
    """Raised for an empty or whitespace-only question."""

    def __init__(self, message: str = "Please enter a question") -> None:
        super().__init__(message, operation="validate")


class TransportError(QuickResearchError):
    """Raised when the request fails at the network level."""


class RemoteRejected(QuickResearchError):
    """Raised when the service responds with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
        status_code: int = 0,
        body: Any | None = None,
    ) -> None:
        super().__init__(message, operation=operation)
        self.status_code = status_code
        self.body = body
