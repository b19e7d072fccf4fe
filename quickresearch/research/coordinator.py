"""ResearchCoordinator — drives one remote object per question.

Lifecycle of a research call:
    1. Validate the question (no remote work for blank input).
    2. Generate a unique object name and register it immediately.
    3. Submit the templated goal to the object store.
    4. Sleep for the settle delay while the service processes the object.
    5. Fetch the object; ``text_value`` becomes the answer text.

The settle delay is a fixed wait, not a completion signal. With
``fetch_attempts > 1`` an object that still has no ``text_value`` is fetched
again after ``settle_delay * backoff ** n`` seconds, up to the attempt cap.

Teardown:
    ``delete_all()`` deletes every registered name, collects a DeleteOutcome
    per name, then drops those names and the last answer regardless of
    individual failures. Names registered while the batch runs stay for the
    next teardown.

Dependency injection:
    Pass ``store``, ``audit_log`` and/or ``registry`` to inject fakes in tests.
    In production leave them None — the coordinator builds its own.
"""

from __future__ import annotations

import asyncio

import structlog

from quickresearch.config import settings
from quickresearch.errors import QuickResearchError, ValidationError
from quickresearch.models.audit import CallAuditLog, CallLogEntry
from quickresearch.models.schemas import (
    NO_RESULTS_TEXT,
    DeleteOutcome,
    RawResponse,
    ResearchAnswer,
    ResearchRequest,
)
from quickresearch.research.registry import ObjectRegistry
from quickresearch.utils.clock import MonotonicMillis

logger = structlog.get_logger().bind(component="research.coordinator")

# Shared by every coordinator so object names are unique process-wide
_name_stamps = MonotonicMillis()


def extract_text(body: object) -> str | None:
    """Return the fetched object's ``text_value`` if it holds any text."""
    if isinstance(body, dict):
        text = body.get("text_value")
        if isinstance(text, str) and text:
            return text
    return None


class ResearchCoordinator:
    """Owns the object registry, the call log and the last answer for one session.

    Args:
        store:          ObjectStoreClient (or compatible fake).
        audit_log:      Shared call log; the store's own log is used if omitted.
        registry:       ObjectRegistry to register names in.
        settle_delay:   Seconds to wait between submit and fetch.
        fetch_attempts: Total fetches allowed while ``text_value`` is missing.
        backoff:        Multiplier applied to the delay between re-fetches.
        object_prefix:  Prefix for generated object names.
    """

    def __init__(
        self,
        store=None,
        audit_log: CallAuditLog | None = None,
        registry: ObjectRegistry | None = None,
        *,
        settle_delay: float | None = None,
        fetch_attempts: int | None = None,
        backoff: float | None = None,
        object_prefix: str | None = None,
    ) -> None:
        if store is None:
            from quickresearch.tools.object_store import ObjectStoreClient

            if audit_log is None:
                audit_log = CallAuditLog(max_entries=settings.audit_log_max_entries)
            store = ObjectStoreClient(audit_log=audit_log)
        elif audit_log is None:
            audit_log = getattr(store, "audit_log", None)
            if audit_log is None:
                audit_log = CallAuditLog()

        self.store = store
        self.audit_log = audit_log
        self.registry = registry if registry is not None else ObjectRegistry()
        self.settle_delay = (
            settle_delay if settle_delay is not None else settings.research_settle_delay_seconds
        )
        self.fetch_attempts = max(1, fetch_attempts or settings.research_fetch_attempts)
        self.backoff = backoff if backoff is not None else settings.research_fetch_backoff
        self.object_prefix = (
            object_prefix if object_prefix is not None else settings.research_object_prefix
        )
        self.last_answer: ResearchAnswer | None = None

    # ── Accessors ─────────────────────────────────────────────────────────

    @property
    def pending_objects(self) -> int:
        """Number of registered names not yet torn down."""
        return len(self.registry)

    def call_log(self) -> list[CallLogEntry]:
        """Newest-first snapshot of every remote call made so far."""
        return self.audit_log.entries()

    def next_object_name(self) -> str:
        return f"{self.object_prefix}{_name_stamps.next()}"

    # ── Research ──────────────────────────────────────────────────────────

    async def research(self, question: str) -> ResearchAnswer:
        """Submit ``question``, wait, fetch, and return the answer.

        Raises:
            ValidationError: question is blank.
            TransportError:  submit or fetch failed at the network level.
            RemoteRejected:  submit or fetch returned a non-success status.
        """
        question = (question or "").strip()
        if not question:
            raise ValidationError()

        self.last_answer = None
        request = ResearchRequest.for_question(self.next_object_name(), question)
        # Registered before the submit so a failed submit still gets cleaned up
        self.registry.register(request.object_name)
        log = logger.bind(object_name=request.object_name)

        await self.store.submit(request.object_name, request.goal)
        log.info("research_submitted", question=question[:100])

        raw = await self._await_result(request.object_name)
        text = extract_text(raw.body)
        if text is None:
            log.info("research_no_results", status=raw.status_code)

        answer = ResearchAnswer(
            object_name=request.object_name,
            question=question,
            text=text or NO_RESULTS_TEXT,
            raw=raw.body,
        )
        self.last_answer = answer
        log.info("research_complete", words=len(answer.text.split()))
        return answer

    async def _await_result(self, object_name: str) -> RawResponse:
        delay = self.settle_delay
        attempt = 1
        while True:
            await asyncio.sleep(delay)
            raw = await self.store.fetch(object_name)
            if extract_text(raw.body) is not None or attempt >= self.fetch_attempts:
                return raw
            logger.debug(
                "research_result_pending",
                object_name=object_name,
                attempt=attempt,
                next_delay=delay * self.backoff,
            )
            delay *= self.backoff
            attempt += 1

    # ── Teardown ──────────────────────────────────────────────────────────

    async def delete_all(self) -> list[DeleteOutcome]:
        """Delete every registered object, then drop those names and the last answer."""
        names = self.registry.names()
        outcomes: list[DeleteOutcome] = []

        for name in names:
            try:
                raw = await self.store.delete(name)
            except QuickResearchError as exc:
                logger.warning("object_delete_failed", object_name=name, error=str(exc))
                outcomes.append(DeleteOutcome(object_name=name, success=False, error=str(exc)))
                continue

            if raw.ok:
                outcomes.append(
                    DeleteOutcome(object_name=name, success=True, status_code=raw.status_code)
                )
            else:
                error = raw.json_dict.get("message") or f"HTTP {raw.status_code}"
                outcomes.append(
                    DeleteOutcome(
                        object_name=name,
                        success=False,
                        status_code=raw.status_code,
                        error=str(error),
                    )
                )

        self.registry.discard(names)
        self.last_answer = None

        if names:
            failed = sum(1 for o in outcomes if not o.success)
            logger.info("objects_deleted", total=len(names), failed=failed)
        return outcomes

    async def close(self) -> None:
        """Close the underlying store client."""
        await self.store.close()
