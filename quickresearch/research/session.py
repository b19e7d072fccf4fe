"""ResearchSession — UI-facing state projected from coordinator outcomes.

The CLI reads ``session.state`` to decide what to render. Nothing here is
authoritative: the coordinator owns the registry, the call log and the last
answer; the session only mirrors the most recent outcome.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from quickresearch.errors import (
    QuickResearchError,
    RemoteRejected,
    TransportError,
    ValidationError,
)
from quickresearch.models.audit import CallLogEntry
from quickresearch.models.schemas import DeleteOutcome
from quickresearch.research.coordinator import ResearchCoordinator


class UIState(BaseModel):
    answer: str = ""
    error: str = ""
    loading: bool = False
    raw_payload: Any = None
    show_raw: bool = False


def describe_error(exc: QuickResearchError) -> str:
    """User-facing text for a failed research call."""
    if isinstance(exc, ValidationError):
        return exc.message
    if exc.operation == "fetch":
        if isinstance(exc, RemoteRejected):
            return "Failed to retrieve research results"
        if isinstance(exc, TransportError):
            return f"Error retrieving results: {exc.message}"
    if exc.operation == "submit" and isinstance(exc, RemoteRejected):
        return f"Research failed: Research request failed: {exc.message}"
    return f"Research failed: {exc.message}"


class ResearchSession:
    """Forwards user intents to a ResearchCoordinator and tracks UIState."""

    def __init__(self, coordinator: ResearchCoordinator | None = None) -> None:
        self.coordinator = coordinator or ResearchCoordinator()
        self.state = UIState()

    async def submit(self, question: str) -> UIState:
        self.state.error = ""
        self.state.answer = ""
        self.state.raw_payload = None
        self.state.loading = True
        try:
            answer = await self.coordinator.research(question)
        except QuickResearchError as exc:
            self.state.error = describe_error(exc)
        else:
            self.state.answer = answer.text
            self.state.raw_payload = answer.raw
        finally:
            self.state.loading = False
        return self.state

    def toggle_raw(self) -> bool:
        self.state.show_raw = not self.state.show_raw
        return self.state.show_raw

    async def delete_all(self) -> list[DeleteOutcome]:
        outcomes = await self.coordinator.delete_all()
        self.state.answer = ""
        self.state.raw_payload = None
        return outcomes

    @property
    def call_log(self) -> list[CallLogEntry]:
        return self.coordinator.call_log()

    @property
    def object_count(self) -> int:
        return self.coordinator.pending_objects

    async def close(self) -> None:
        await self.coordinator.close()
