"""Base transport interface — the operations the driver needs from a search engine.

Only these operations are reachable through the driver; there is no
dynamic forwarding to the underlying client.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TaskInfo(BaseModel):
    """Summary of an asynchronous MeiliSearch task, as returned by write operations."""

    model_config = ConfigDict(populate_by_name=True)

    task_uid: int = Field(alias="taskUid", description="Task identifier")
    index_uid: str | None = Field(default=None, alias="indexUid", description="Target index")
    status: str = Field(default="enqueued", description="enqueued, processing, succeeded, failed, canceled")
    type: str = Field(default="", description="Task type, e.g. documentAdditionOrUpdate")
    error: dict[str, Any] | None = Field(default=None, description="Error object for failed tasks")

    @property
    def finished(self) -> bool:
        return self.status in ("succeeded", "failed", "canceled")


class SearchResult(BaseModel):
    """Structured search response.

    ``raw`` gives back the wire payload, normalized so that ``nbHits`` is
    always present.
    """

    hits: list[dict[str, Any]] = Field(default_factory=list, description="Ranked hit documents")
    query: str = Field(default="", description="Query string echoed by the engine")
    total_hits: int = Field(default=0, description="Total (or estimated) number of matches")
    processing_time_ms: int = Field(default=0, description="Engine-side processing time")
    payload: dict[str, Any] = Field(default_factory=dict, description="Unmodified response body")

    @classmethod
    def from_raw(cls, payload: dict[str, Any]) -> SearchResult:
        hits = payload.get("hits", [])
        total = payload.get("nbHits", payload.get("totalHits", payload.get("estimatedTotalHits", len(hits))))
        return cls(
            hits=hits,
            query=payload.get("query", ""),
            total_hits=total,
            processing_time_ms=payload.get("processingTimeMs", 0),
            payload=payload,
        )

    @property
    def raw(self) -> dict[str, Any]:
        raw = dict(self.payload)
        raw.setdefault("hits", self.hits)
        raw.setdefault("nbHits", self.total_hits)
        return raw


class IndexHandle(ABC):
    """Operations scoped to one named index."""

    @property
    @abstractmethod
    def uid(self) -> str:
        """Index name."""

    @abstractmethod
    async def add_documents(self, documents: list[dict[str, Any]], primary_key: str | None = None) -> TaskInfo:
        """Upsert documents, identified by ``primary_key``."""

    @abstractmethod
    async def delete_documents(self, ids: list[Any]) -> TaskInfo:
        """Delete documents by primary-key value."""

    @abstractmethod
    async def delete_all_documents(self) -> TaskInfo:
        """Delete every document in the index."""

    @abstractmethod
    async def raw_search(self, query: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a search and return the response body unmodified."""

    async def search(self, query: str, params: dict[str, Any] | None = None) -> SearchResult:
        """Run a search and return a structured ``SearchResult``."""
        return SearchResult.from_raw(await self.raw_search(query, params))


class SearchTransport(ABC):
    """Index factory and index-lifecycle operations."""

    @abstractmethod
    def index(self, name: str) -> IndexHandle:
        """Return a handle for ``name``. Does not contact the engine."""

    @abstractmethod
    async def create_index(self, name: str, options: dict[str, Any] | None = None) -> TaskInfo:
        """Create an index. ``options`` is passed through to the engine."""

    @abstractmethod
    async def delete_index(self, name: str) -> TaskInfo:
        """Delete an index and all of its documents."""


class HealthStatus(BaseModel):
    """Health status of the search engine."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of the health request in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of the check")
    message: str | None = Field(default=None, description="Additional health message")
