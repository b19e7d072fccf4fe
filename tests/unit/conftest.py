"""Unit-test conftest — MockObjectStore, HTTP fakes, and shared fixtures.

All fixtures here are available to every test under tests/unit/ without import.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from quickresearch.errors import RemoteRejected, TransportError
from quickresearch.models.audit import CallAuditLog
from quickresearch.models.schemas import RawResponse
from quickresearch.research.coordinator import ResearchCoordinator
from quickresearch.tools.object_store import ObjectStoreClient


# ─────────────────────────────────────────────────────────────────────────────
# MockObjectStore — drop-in replacement for ObjectStoreClient
# ─────────────────────────────────────────────────────────────────────────────

class MockObjectStore:
    """Configurable fake ObjectStoreClient for coordinator tests.

    Records one audit entry per call, like the real client.

    Args:
        fetch_bodies:   Bodies returned by successive fetches (last one repeats).
        submit_raises:  If set, submit records the call then raises this.
        fetch_raises:   If set, fetch records the call then raises this.
        delete_raises:  Map of object name → exception raised by delete.
        delete_status:  Map of object name → HTTP status returned by delete.
        fetch_delay:    Seconds to sleep inside fetch.
    """

    def __init__(
        self,
        *,
        fetch_bodies: list[Any] | None = None,
        submit_raises: Exception | None = None,
        fetch_raises: Exception | None = None,
        delete_raises: dict[str, Exception] | None = None,
        delete_status: dict[str, int] | None = None,
        fetch_delay: float = 0.0,
    ) -> None:
        self.audit_log = CallAuditLog()
        self.fetch_bodies = fetch_bodies or [{"text_value": "mock answer"}]
        self.submit_raises = submit_raises
        self.fetch_raises = fetch_raises
        self.delete_raises = delete_raises or {}
        self.delete_status = delete_status or {}
        self.fetch_delay = fetch_delay
        # Call records for assertion
        self.submitted: list[tuple[str, str]] = []
        self.fetched: list[str] = []
        self.deleted: list[str] = []
        self.closed = False

    async def submit(self, object_name: str, goal: str) -> RawResponse:
        self.submitted.append((object_name, goal))
        body = {"created_object_name": object_name, "goal": goal}
        if self.submit_raises:
            self.audit_log.record("POST", "/api_tools/rapid_research", body, {"error": str(self.submit_raises)})
            raise self.submit_raises
        self.audit_log.record("POST", "/api_tools/rapid_research", body, {"status": "queued"})
        return RawResponse(method="POST", url="/api_tools/rapid_research", status_code=200, body={"status": "queued"})

    async def fetch(self, object_name: str) -> RawResponse:
        self.fetched.append(object_name)
        path = f"/api_tools/return_data/{object_name}"
        if self.fetch_delay > 0:
            await asyncio.sleep(self.fetch_delay)
        if self.fetch_raises:
            self.audit_log.record("GET", path, None, {"error": str(self.fetch_raises)})
            raise self.fetch_raises
        index = min(len(self.fetched), len(self.fetch_bodies)) - 1
        body = self.fetch_bodies[index]
        self.audit_log.record("GET", path, None, body)
        return RawResponse(method="GET", url=path, status_code=200, body=body)

    async def delete(self, object_name: str) -> RawResponse:
        self.deleted.append(object_name)
        path = f"/api_tools/objects/{object_name}"
        if object_name in self.delete_raises:
            exc = self.delete_raises[object_name]
            self.audit_log.record("DELETE", path, None, {"error": str(exc)})
            raise exc
        status = self.delete_status.get(object_name, 200)
        body = {"deleted": True} if status < 300 else {"message": "not found"}
        self.audit_log.record("DELETE", path, None, body)
        return RawResponse(method="DELETE", url=path, status_code=status, body=body)

    async def close(self) -> None:
        self.closed = True


# ─────────────────────────────────────────────────────────────────────────────
# HTTP helpers
# ─────────────────────────────────────────────────────────────────────────────

class RecordingTransport(httpx.MockTransport):
    """httpx.MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_handler)


def make_store(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> ObjectStoreClient:
    """ObjectStoreClient wired to a RecordingTransport."""
    kwargs.setdefault("base_url", "https://research.test")
    kwargs.setdefault("api_token", "test-token")
    kwargs.setdefault("app_id", "test-app")
    return ObjectStoreClient(transport=RecordingTransport(handler), **kwargs)


def make_coordinator(store, **kwargs) -> ResearchCoordinator:
    kwargs.setdefault("settle_delay", 0.0)
    kwargs.setdefault("fetch_attempts", 1)
    return ResearchCoordinator(store=store, **kwargs)


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def mock_store():
    """A MockObjectStore with instant, successful responses."""
    return MockObjectStore()


@pytest.fixture
def coordinator(mock_store):
    """A ResearchCoordinator over mock_store with no settle delay."""
    return make_coordinator(mock_store)


@pytest.fixture
def rejected_submit_store():
    """A MockObjectStore whose submit is rejected with HTTP 500."""
    return MockObjectStore(
        submit_raises=RemoteRejected(
            "quota exceeded",
            operation="submit",
            status_code=500,
            body={"message": "quota exceeded"},
        )
    )


@pytest.fixture
def offline_store():
    """A MockObjectStore whose submit fails at the network level."""
    return MockObjectStore(submit_raises=TransportError("connection refused", operation="submit"))


@pytest.fixture
def store_factory():
    """Build an ObjectStoreClient around an httpx request handler."""
    return make_store


@pytest.fixture
def coordinator_factory():
    """Build a zero-delay ResearchCoordinator around any store."""
    return make_coordinator


@pytest.fixture
def mock_store_factory():
    """The MockObjectStore class, for tests that need custom behaviour."""
    return MockObjectStore
