"""Call audit log — every remote call the store client makes, newest first.

Each submit/fetch/delete produces exactly one CallLogEntry, successful or not.
Failed calls record the error payload (``{"error": ...}``) where the response
body would be.

Retention is unbounded unless ``max_entries`` is set, in which case the oldest
entries fall off the end.
"""

from __future__ import annotations

from collections import deque
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from quickresearch.utils.clock import MonotonicMillis, now_utc


class CallLogEntry(BaseModel):
    """A single remote call as seen by the client."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Strictly increasing epoch-millisecond stamp")
    timestamp: datetime = Field(default_factory=now_utc)
    method: str = Field(description="HTTP method: POST, GET, DELETE")
    url: str = Field(description="Request path, e.g. /api_tools/return_data/research_1")
    request_body: dict[str, Any] | None = None
    response_body: Any = None

    @property
    def is_error(self) -> bool:
        return isinstance(self.response_body, dict) and "error" in self.response_body


class CallAuditLog:
    """In-memory, newest-first record of remote calls.

    Appends happen synchronously (no awaits), so concurrent research flows on
    one event loop can share a log without locking.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        self._entries: deque[CallLogEntry] = deque(maxlen=max_entries)
        self._ids = MonotonicMillis()

    def record(
        self,
        method: str,
        url: str,
        request_body: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> CallLogEntry:
        """Prepend a new entry and return it."""
        entry = CallLogEntry(
            id=self._ids.next(),
            method=method,
            url=url,
            request_body=request_body,
            response_body=response_body,
        )
        # deque(maxlen) drops from the opposite end, i.e. the oldest entry
        self._entries.appendleft(entry)
        return entry

    def entries(self) -> list[CallLogEntry]:
        """Snapshot of the log, newest first."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    @property
    def max_entries(self) -> int | None:
        return self._entries.maxlen

    def __len__(self) -> int:
        return len(self._entries)
