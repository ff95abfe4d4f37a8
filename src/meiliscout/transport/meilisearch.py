"""MeiliSearch transport — REST client for index and document operations.

Communicates with MeiliSearch via its `REST API`_ using ``httpx``.

.. _REST API: https://www.meilisearch.com/docs/reference/api/overview

Usage::

    async with MeiliSearchClient("http://localhost:7700", api_key="masterKey") as client:
        task = await client.index("posts").add_documents([{"id": 1, "title": "Hi"}], "id")
        await client.wait_for_task(task.task_uid)
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import httpx

from meiliscout.exceptions import ApiError, ConnectionError, TaskTimeoutError
from meiliscout.transport.base import HealthStatus, IndexHandle, SearchTransport, TaskInfo

if TYPE_CHECKING:
    from meiliscout.config.settings import MeiliSearchSettings

logger = logging.getLogger(__name__)


class MeiliSearchIndex(IndexHandle):
    """Handle on one MeiliSearch index. Created by ``MeiliSearchClient.index()``."""

    def __init__(self, client: MeiliSearchClient, uid: str) -> None:
        self._client = client
        self._uid = uid

    @property
    def uid(self) -> str:
        return self._uid

    async def add_documents(self, documents: list[dict[str, Any]], primary_key: str | None = None) -> TaskInfo:
        params = {"primaryKey": primary_key} if primary_key else None
        data = await self._client._request(
            "POST",
            f"/indexes/{self._uid}/documents",
            json=documents,
            params=params,
        )
        return TaskInfo.model_validate(data)

    async def delete_documents(self, ids: list[Any]) -> TaskInfo:
        data = await self._client._request("POST", f"/indexes/{self._uid}/documents/delete-batch", json=ids)
        return TaskInfo.model_validate(data)

    async def delete_all_documents(self) -> TaskInfo:
        data = await self._client._request("DELETE", f"/indexes/{self._uid}/documents")
        return TaskInfo.model_validate(data)

    async def raw_search(self, query: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {"q": query, **(params or {})}
        return await self._client._request("POST", f"/indexes/{self._uid}/search", json=payload)

    def __repr__(self) -> str:
        return f"MeiliSearchIndex(uid={self._uid!r})"


class MeiliSearchClient(SearchTransport):
    """Async MeiliSearch client.

    Non-2xx responses raise ``ApiError`` carrying the MeiliSearch error
    code; network failures raise ``ConnectionError``. Nothing is retried.

    Args:
        base_url: MeiliSearch instance URL, e.g. ``"http://localhost:7700"``.
        api_key: Master key or API key for authentication.
        timeout: HTTP request timeout in seconds.
        task_timeout: Default timeout for ``wait_for_task``.
        task_interval: Default polling interval for ``wait_for_task``.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:7700",
        api_key: str | None = None,
        timeout: float = 30.0,
        task_timeout: float = 5.0,
        task_interval: float = 0.05,
        **httpx_kwargs: Any,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._task_timeout = task_timeout
        self._task_interval = task_interval
        self._httpx_kwargs = httpx_kwargs
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: MeiliSearchSettings) -> MeiliSearchClient:
        return cls(
            base_url=settings.host,
            api_key=settings.api_key,
            timeout=settings.timeout,
            task_timeout=settings.task_timeout,
            task_interval=settings.task_interval,
        )

    async def initialize(self) -> None:
        """Create an ``httpx.AsyncClient`` and verify connection to MeiliSearch."""
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            headers=headers,
            **self._httpx_kwargs,
        )

        try:
            resp = await self._client.get("/health")
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            await self.shutdown()
            raise ConnectionError(f"Failed to connect to MeiliSearch: {e}") from e

        if data.get("status") != "available":
            await self.shutdown()
            raise ConnectionError(f"MeiliSearch not available: {data}")
        logger.info("Connected to MeiliSearch at %s", self._base_url)

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> MeiliSearchClient:
        await self.initialize()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.shutdown()

    # ── Indexes ──────────────────────────────────────────────────────────

    def index(self, name: str) -> MeiliSearchIndex:
        return MeiliSearchIndex(self, name)

    async def create_index(self, name: str, options: dict[str, Any] | None = None) -> TaskInfo:
        data = await self._request("POST", "/indexes", json={"uid": name, **(options or {})})
        logger.info("Enqueued creation of index %s", name)
        return TaskInfo.model_validate(data)

    async def delete_index(self, name: str) -> TaskInfo:
        data = await self._request("DELETE", f"/indexes/{name}")
        logger.info("Enqueued deletion of index %s", name)
        return TaskInfo.model_validate(data)

    # ── Tasks ────────────────────────────────────────────────────────────

    async def get_task(self, task_uid: int) -> TaskInfo:
        data = await self._request("GET", f"/tasks/{task_uid}")
        # GET /tasks/{uid} names the identifier "uid", write endpoints "taskUid"
        data.setdefault("taskUid", data.get("uid", task_uid))
        return TaskInfo.model_validate(data)

    async def wait_for_task(
        self,
        task_uid: int,
        timeout: float | None = None,
        interval: float | None = None,
    ) -> TaskInfo:
        """Poll a task until it leaves the queue.

        Raises:
            TaskTimeoutError: If the task is still pending after ``timeout`` seconds.
        """
        timeout = self._task_timeout if timeout is None else timeout
        interval = self._task_interval if interval is None else interval
        deadline = time.monotonic() + timeout

        while True:
            task = await self.get_task(task_uid)
            if task.finished:
                if task.status == "failed":
                    logger.warning("MeiliSearch task %s failed: %s", task_uid, task.error)
                return task
            if time.monotonic() >= deadline:
                raise TaskTimeoutError(f"Task {task_uid} still {task.status} after {timeout}s")
            await asyncio.sleep(interval)

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> HealthStatus:
        """Check MeiliSearch health."""
        if not self._client:
            return HealthStatus(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            resp = await self._client.get("/health")
            latency_ms = int((time.monotonic() - start) * 1000)

            if resp.status_code == 200:
                status = resp.json().get("status", "unknown")
                return HealthStatus(
                    status="healthy" if status == "available" else "degraded",
                    latency_ms=latency_ms,
                    last_check=datetime.now(UTC).isoformat(),
                    message=f"status: {status}",
                )
            return HealthStatus(
                status="degraded",
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"MeiliSearch returned HTTP {resp.status_code}",
            )
        except httpx.HTTPError as e:
            return HealthStatus(status="unhealthy", message=str(e))

    # ── Helpers ──────────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        if not self._client:
            raise ConnectionError("MeiliSearch client not initialized.")

        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            raise ConnectionError(f"MeiliSearch request {method} {path} failed: {e}") from e

        if resp.status_code >= 400:
            try:
                payload = resp.json()
            except ValueError:
                payload = None
            raise ApiError.from_payload(resp.status_code, payload)

        if resp.status_code == 204 or not resp.content:
            return {}
        return resp.json()
