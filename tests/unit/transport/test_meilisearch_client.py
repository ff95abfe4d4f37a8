"""Tests for the MeiliSearch REST transport."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from meiliscout.config.settings import MeiliSearchSettings
from meiliscout.exceptions import ApiError, ConnectionError, TaskTimeoutError
from meiliscout.transport.base import SearchResult
from meiliscout.transport.meilisearch import MeiliSearchClient, MeiliSearchIndex

# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def client() -> MeiliSearchClient:
    return MeiliSearchClient(base_url="http://localhost:7700/", api_key="test-key", task_interval=0)


@pytest.fixture
def mock_http(client: MeiliSearchClient) -> AsyncMock:
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    client._client = mock_client
    return mock_client


def _task(uid: int = 1, index: str = "posts", kind: str = "documentAdditionOrUpdate") -> dict[str, Any]:
    return {"taskUid": uid, "indexUid": index, "status": "enqueued", "type": kind}


# ── Properties ───────────────────────────────────────────────────────────────


class TestClientProperties:
    def test_base_url_stripped(self, client: MeiliSearchClient) -> None:
        assert client._base_url == "http://localhost:7700"

    def test_from_settings(self) -> None:
        c = MeiliSearchClient.from_settings(MeiliSearchSettings(host="http://meili:7700/", api_key="k", timeout=5))
        assert c._base_url == "http://meili:7700"
        assert c._api_key == "k"
        assert c._timeout == 5

    def test_index_handle(self, client: MeiliSearchClient) -> None:
        index = client.index("posts")
        assert isinstance(index, MeiliSearchIndex)
        assert index.uid == "posts"


# ── Lifecycle ────────────────────────────────────────────────────────────────


class TestInitialize:
    async def test_initialize_checks_health(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"status": "available"})

        c = MeiliSearchClient(api_key="secret", transport=httpx.MockTransport(handler))
        async with c:
            assert c._client is not None
        assert c._client is None
        assert seen[0].url.path == "/health"
        assert seen[0].headers["Authorization"] == "Bearer secret"

    async def test_initialize_unavailable(self) -> None:
        c = MeiliSearchClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"status": "starting"}))
        )
        with pytest.raises(ConnectionError, match="not available"):
            await c.initialize()
        assert c._client is None

    async def test_initialize_http_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        c = MeiliSearchClient(transport=httpx.MockTransport(handler))
        with pytest.raises(ConnectionError, match="Failed to connect"):
            await c.initialize()

    async def test_not_initialized_raises(self, client: MeiliSearchClient) -> None:
        with pytest.raises(ConnectionError, match="not initialized"):
            await client.index("posts").raw_search("q")


# ── Documents ────────────────────────────────────────────────────────────────


class TestDocuments:
    async def test_add_documents(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.request.return_value = httpx.Response(202, json=_task(7))

        task = await client.index("posts").add_documents([{"id": 1, "title": "a"}], "id")

        assert task.task_uid == 7
        assert task.index_uid == "posts"
        mock_http.request.assert_awaited_once_with(
            "POST",
            "/indexes/posts/documents",
            json=[{"id": 1, "title": "a"}],
            params={"primaryKey": "id"},
        )

    async def test_delete_documents(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.request.return_value = httpx.Response(202, json=_task(8, kind="documentDeletion"))

        task = await client.index("posts").delete_documents([3, 1])

        assert task.type == "documentDeletion"
        mock_http.request.assert_awaited_once_with("POST", "/indexes/posts/documents/delete-batch", json=[3, 1])

    async def test_delete_all_documents(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.request.return_value = httpx.Response(202, json=_task(9))
        await client.index("posts").delete_all_documents()
        mock_http.request.assert_awaited_once_with("DELETE", "/indexes/posts/documents")


# ── Search ───────────────────────────────────────────────────────────────────


class TestSearch:
    async def test_raw_search(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        body = {"hits": [{"id": 1}], "estimatedTotalHits": 1, "processingTimeMs": 2, "query": "solar"}
        mock_http.request.return_value = httpx.Response(200, json=body)

        result = await client.index("posts").raw_search("solar", {"limit": 5, "filter": "lang=1"})

        assert result == body
        mock_http.request.assert_awaited_once_with(
            "POST",
            "/indexes/posts/search",
            json={"q": "solar", "limit": 5, "filter": "lang=1"},
        )

    async def test_structured_search(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        body = {"hits": [{"id": 1}, {"id": 2}], "estimatedTotalHits": 2, "processingTimeMs": 3, "query": "q"}
        mock_http.request.return_value = httpx.Response(200, json=body)

        result = await client.index("posts").search("q")

        assert isinstance(result, SearchResult)
        assert result.total_hits == 2
        assert result.processing_time_ms == 3
        assert result.raw["nbHits"] == 2
        assert result.raw["estimatedTotalHits"] == 2

    async def test_api_error(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.request.return_value = httpx.Response(
            400,
            json={
                "message": "Attribute `rank` is not sortable.",
                "code": "invalid_search_sort",
                "type": "invalid_request",
                "link": "https://docs.meilisearch.com/errors#invalid_search_sort",
            },
        )

        with pytest.raises(ApiError, match="not sortable") as excinfo:
            await client.index("posts").raw_search("q", {"sort": ["rank:desc"]})

        assert excinfo.value.status_code == 400
        assert excinfo.value.code == "invalid_search_sort"

    async def test_api_error_without_body(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.request.return_value = httpx.Response(502, text="Bad Gateway")
        with pytest.raises(ApiError, match="HTTP 502"):
            await client.index("posts").raw_search("q")

    async def test_network_error(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.request.side_effect = httpx.ConnectError("refused")
        with pytest.raises(ConnectionError, match="refused"):
            await client.index("posts").raw_search("q")


# ── Indexes and tasks ────────────────────────────────────────────────────────


class TestIndexes:
    async def test_create_index(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.request.return_value = httpx.Response(202, json=_task(1, kind="indexCreation"))

        task = await client.create_index("posts", {"primaryKey": "id"})

        assert task.type == "indexCreation"
        mock_http.request.assert_awaited_once_with("POST", "/indexes", json={"uid": "posts", "primaryKey": "id"})

    async def test_delete_index(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.request.return_value = httpx.Response(202, json=_task(2, kind="indexDeletion"))
        await client.delete_index("posts")
        mock_http.request.assert_awaited_once_with("DELETE", "/indexes/posts")


class TestTasks:
    async def test_wait_for_task(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.request.side_effect = [
            httpx.Response(200, json={"uid": 4, "status": "processing"}),
            httpx.Response(200, json={"uid": 4, "status": "succeeded", "indexUid": "posts"}),
        ]

        task = await client.wait_for_task(4)

        assert task.task_uid == 4
        assert task.status == "succeeded"
        assert mock_http.request.await_count == 2

    async def test_wait_for_failed_task_returns(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.request.return_value = httpx.Response(
            200, json={"uid": 5, "status": "failed", "error": {"code": "index_not_found"}}
        )
        task = await client.wait_for_task(5)
        assert task.error == {"code": "index_not_found"}

    async def test_wait_for_task_timeout(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.request.return_value = httpx.Response(200, json={"uid": 6, "status": "enqueued"})
        with pytest.raises(TaskTimeoutError, match="Task 6"):
            await client.wait_for_task(6, timeout=0)


# ── Health ───────────────────────────────────────────────────────────────────


class TestHealth:
    async def test_health_not_initialized(self, client: MeiliSearchClient) -> None:
        health = await client.health_check()
        assert health.status == "unhealthy"

    async def test_health_available(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.get.return_value = httpx.Response(200, json={"status": "available"})
        health = await client.health_check()
        assert health.status == "healthy"

    async def test_health_degraded(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.get.return_value = httpx.Response(503, json={})
        health = await client.health_check()
        assert health.status == "degraded"
        assert "503" in (health.message or "")

    async def test_health_exception(self, client: MeiliSearchClient, mock_http: AsyncMock) -> None:
        mock_http.get.side_effect = httpx.ConnectError("Connection refused")
        health = await client.health_check()
        assert health.status == "unhealthy"
