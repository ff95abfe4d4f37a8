"""MeiliSearch engine — the driver entry point used by search query builders.

The engine wires together the pieces of the driver:

  Entities → [IndexSynchronizer] → add / delete documents per index
  SearchQuery → [QueryExecutor] → raw result
  raw result → [ResultMapper] → keys / ordered entities / total count

Every operation is a single awaited exchange with MeiliSearch. Only the
operations declared here are exposed; anything else must go through the
transport directly.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from meiliscout.core.executor import QueryExecutor
from meiliscout.core.mapper import LazyResults, ResultMapper
from meiliscout.core.sync import IndexSynchronizer
from meiliscout.models.entity import Searchable
from meiliscout.models.query import SearchQuery
from meiliscout.sources.base import EntitySource
from meiliscout.transport.base import SearchTransport, TaskInfo

if TYPE_CHECKING:
    from meiliscout.config.settings import Settings


class MeiliSearchEngine:
    """Search engine driver backed by MeiliSearch.

    Args:
        transport: The search engine transport, usually a ``MeiliSearchClient``.
        soft_delete: Push soft-delete metadata for entity types that declare it.
        chunk_size: Entities per push in ``import_all``.

    Example:
        >>> engine = MeiliSearchEngine(client, soft_delete=True)
        >>> await engine.push([post_1, post_2])
        >>> posts = await engine.get(SearchQuery.for_model(Post, "solar"), source)
    """

    def __init__(self, transport: SearchTransport, soft_delete: bool = False, chunk_size: int = 500) -> None:
        self.transport = transport
        self.soft_delete = soft_delete
        self.chunk_size = chunk_size
        self.synchronizer = IndexSynchronizer(transport, soft_delete=soft_delete)
        self.executor = QueryExecutor(transport)
        self.mapper = ResultMapper()

    @classmethod
    def from_settings(cls, settings: Settings) -> MeiliSearchEngine:
        """Build an engine and its (uninitialized) ``MeiliSearchClient`` from settings."""
        from meiliscout.transport.meilisearch import MeiliSearchClient

        return cls(
            MeiliSearchClient.from_settings(settings.meilisearch),
            soft_delete=settings.sync.soft_delete,
            chunk_size=settings.sync.chunk_size,
        )

    # ── Synchronization ─────────────────────────────────────────────────

    async def push(self, entities: Iterable[Searchable]) -> list[TaskInfo]:
        """Upsert entities into their indexes (one call per index)."""
        return await self.synchronizer.push(entities)

    async def delete(self, entities: Iterable[Searchable]) -> TaskInfo | None:
        """Remove entities, all from the same index, in one call."""
        return await self.synchronizer.delete(entities)

    async def flush(self, model: type[Searchable]) -> TaskInfo:
        return await self.synchronizer.flush(model)

    async def create_index(self, name: str, options: dict[str, Any] | None = None) -> TaskInfo:
        return await self.synchronizer.create_index(name, options)

    async def delete_index(self, name: str) -> TaskInfo:
        return await self.synchronizer.delete_index(name)

    async def import_all(self, model: type[Searchable], source: EntitySource) -> int:
        return await self.synchronizer.import_all(model, source, chunk_size=self.chunk_size)

    # ── Searching ───────────────────────────────────────────────────────

    async def search(self, query: SearchQuery) -> Any:
        return await self.executor.search(query)

    async def paginate(self, query: SearchQuery, per_page: int, page: int) -> Any:
        return await self.executor.paginate(query, per_page, page)

    # ── Result mapping ──────────────────────────────────────────────────

    def map_ids(self, results: dict[str, Any]) -> list[Any]:
        return self.mapper.map_ids(results)

    def map_ids_from(self, results: dict[str, Any], key: str) -> list[Any]:
        return self.mapper.map_ids_from(results, key)

    async def map(self, query: SearchQuery, results: dict[str, Any] | None, source: EntitySource) -> list[Searchable]:
        return await self.mapper.map(query, results, source)

    def lazy_map(self, query: SearchQuery, results: dict[str, Any] | None, source: EntitySource) -> LazyResults:
        return self.mapper.lazy_map(query, results, source)

    def get_total_count(self, results: dict[str, Any]) -> int:
        return self.mapper.get_total_count(results)

    # ── Shortcuts ───────────────────────────────────────────────────────

    async def keys(self, query: SearchQuery) -> list[Any]:
        """Primary keys of the hits for ``query``."""
        return self.map_ids_from(await self.search(query), query.model.primary_key_name())

    async def get(self, query: SearchQuery, source: EntitySource) -> list[Searchable]:
        """Search and map the hits to entities."""
        return await self.map(query, await self.search(query), source)

    async def cursor(self, query: SearchQuery, source: EntitySource) -> LazyResults:
        """Search and lazily map the hits to entities."""
        return self.lazy_map(query, await self.search(query), source)
