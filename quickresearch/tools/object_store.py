"""Async client for the remote research object store.

Route map:
    Submit:  POST   /api_tools/rapid_research          {created_object_name, goal}
    Fetch:   GET    /api_tools/return_data/{name}
    Delete:  DELETE /api_tools/objects/{name}

Every request carries the Bearer token and the X-Generated-App-ID header.
Every call, including failed ones, is written to the CallAuditLog before the
result is returned or the error raised.

Used ONLY by the ResearchCoordinator.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from quickresearch.config import settings
from quickresearch.errors import RemoteRejected, TransportError
from quickresearch.models.audit import CallAuditLog
from quickresearch.models.schemas import RawResponse

logger = structlog.get_logger().bind(component="object_store")

SUBMIT_PATH = "/api_tools/rapid_research"
FETCH_PATH = "/api_tools/return_data/{name}"
DELETE_PATH = "/api_tools/objects/{name}"

_GENERIC_REJECTION = "Unknown error"


def _path_segment(object_name: str) -> str:
    return quote(object_name, safe="")


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _rejection_message(body: Any) -> str:
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return _GENERIC_REJECTION


class ObjectStoreClient:
    """Async client for the research service's object API.

    Single httpx client, single base URL, auth headers on every request.

    Args:
        base_url:  Service root (defaults to settings).
        api_token: Bearer token (defaults to settings).
        app_id:    X-Generated-App-ID value (defaults to settings).
        timeout:   Per-request timeout in seconds.
        audit_log: Where calls are recorded; a private log is created if None.
        transport: Optional httpx transport (inject ``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_token: str | None = None,
        app_id: str | None = None,
        timeout: float | None = None,
        audit_log: CallAuditLog | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.research_api_url).rstrip("/")
        self.api_token = api_token if api_token is not None else settings.research_api_token
        self.app_id = app_id if app_id is not None else settings.research_app_id
        self.timeout = timeout if timeout is not None else settings.research_timeout_seconds
        self.audit_log = audit_log if audit_log is not None else CallAuditLog()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        if not self.api_token:
            logger.warning("object_store_token_missing", base_url=self.base_url)

    def _auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "X-Generated-App-ID": self.app_id,
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._auth_headers(),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ObjectStoreClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ── Transport ─────────────────────────────────────────────────────────

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> RawResponse:
        """Issue one request and record it. Raises TransportError on network failure."""
        client = await self._get_client()
        try:
            if payload is None:
                response = await client.request(method, path)
            else:
                # json= sets Content-Type: application/json
                response = await client.request(method, path, json=payload)
        except httpx.HTTPError as e:
            self.audit_log.record(method, path, payload, {"error": str(e)})
            logger.error("object_store_transport_failed", operation=operation, path=path, error=str(e))
            raise TransportError(str(e) or type(e).__name__, operation=operation) from e

        body = _decode_body(response)
        self.audit_log.record(method, path, payload, body)
        logger.debug(
            "object_store_call",
            operation=operation,
            method=method,
            path=path,
            status=response.status_code,
        )
        return RawResponse(method=method, url=path, status_code=response.status_code, body=body)

    def _raise_for_rejection(self, operation: str, raw: RawResponse) -> None:
        if raw.ok:
            return
        message = _rejection_message(raw.body)
        logger.warning(
            "object_store_rejected",
            operation=operation,
            path=raw.url,
            status=raw.status_code,
            message=message,
        )
        raise RemoteRejected(
            message,
            operation=operation,
            status_code=raw.status_code,
            body=raw.body,
        )

    # ── Object operations ─────────────────────────────────────────────────

    async def submit(self, object_name: str, goal: str) -> RawResponse:
        """Create the remote object and queue the research goal against it."""
        payload = {"created_object_name": object_name, "goal": goal}
        raw = await self._send("submit", "POST", SUBMIT_PATH, payload)
        self._raise_for_rejection("submit", raw)
        logger.info("object_submitted", object_name=object_name)
        return raw

    async def fetch(self, object_name: str) -> RawResponse:
        """Return the object's current value.

        A still-pending object comes back as a success without ``text_value``;
        interpreting that is up to the caller.
        """
        raw = await self._send("fetch", "GET", FETCH_PATH.format(name=_path_segment(object_name)))
        self._raise_for_rejection("fetch", raw)
        return raw

    async def delete(self, object_name: str) -> RawResponse:
        """Best-effort delete. Non-2xx responses are logged, never raised."""
        raw = await self._send("delete", "DELETE", DELETE_PATH.format(name=_path_segment(object_name)))
        if raw.ok:
            logger.info("object_deleted", object_name=object_name)
        else:
            logger.warning(
                "object_delete_rejected",
                object_name=object_name,
                status=raw.status_code,
                message=_rejection_message(raw.body),
            )
        return raw
