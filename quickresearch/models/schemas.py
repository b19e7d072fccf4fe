"""Core schemas — requests, raw store responses, answers and delete outcomes."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

NO_RESULTS_TEXT = "No results found"

GOAL_TEMPLATE = (
    "Research and provide a concise, authoritative paragraph summary "
    "answering this question: {question}"
)


class ResearchRequest(BaseModel):
    """One submission to the research service.

    Built by the coordinator at submit time and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    object_name: str = Field(description="Unique remote object name, e.g. research_1718000000000")
    goal: str = Field(description="Templated instruction sent as the submit body's goal")
    question: str = Field(default="", description="The user's question the goal was built from")

    @classmethod
    def for_question(cls, object_name: str, question: str) -> "ResearchRequest":
        return cls(
            object_name=object_name,
            goal=GOAL_TEMPLATE.format(question=question),
            question=question,
        )


class RawResponse(BaseModel):
    """What the store returned for one call — status plus the decoded JSON body."""

    method: str
    url: str
    status_code: int
    body: Any = Field(default=None, description="Decoded JSON body; None when not JSON")

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def json_dict(self) -> dict[str, Any]:
        """The body when it is a JSON object, else an empty dict."""
        return self.body if isinstance(self.body, dict) else {}


class ResearchAnswer(BaseModel):
    """A completed research round-trip."""

    object_name: str
    question: str = ""
    text: str = Field(description="text_value from the fetched object, or NO_RESULTS_TEXT")
    raw: Any = Field(default=None, description="The full fetch response body")

    @property
    def has_results(self) -> bool:
        return self.text != NO_RESULTS_TEXT


class DeleteOutcome(BaseModel):
    """Result of deleting one remote object during bulk teardown."""

    object_name: str
    success: bool
    status_code: int | None = None
    error: str = ""
