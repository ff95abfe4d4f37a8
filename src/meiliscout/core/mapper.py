"""Result mapping — ranked hit lists back to ordered entities.

Hits carry only primary keys worth trusting; the entities themselves are
reloaded from the application's ``EntitySource``. Entities the source no
longer has (deleted between index write and read-back) are dropped
silently, and the survivors are put back in relevance order.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any

from meiliscout.exceptions import InvalidResultError
from meiliscout.models.entity import Searchable
from meiliscout.models.query import SearchQuery
from meiliscout.sources.base import EntitySource

logger = logging.getLogger(__name__)

TOTAL_COUNT_FIELDS = ("nbHits", "totalHits", "estimatedTotalHits")


def _hits(results: dict[str, Any]) -> list[dict[str, Any]]:
    hits = results.get("hits") if isinstance(results, dict) else None
    if not isinstance(hits, list):
        raise InvalidResultError("Search result has no 'hits' list")
    return hits


def _rank(entities: list[Searchable], keys: Sequence[Any]) -> list[Searchable]:
    positions: dict[Any, int] = {}
    for position, key in enumerate(keys):
        positions.setdefault(key, position)
    found = [entity for entity in entities if entity.primary_key_value() in positions]
    return sorted(found, key=lambda entity: positions[entity.primary_key_value()])


class LazyResults:
    """Restartable async iterable over mapped entities.

    Every ``async for`` re-streams the entities from the source, so the
    object can be iterated more than once.
    """

    def __init__(self, query: SearchQuery, keys: list[Any], source: EntitySource | None) -> None:
        self._query = query
        self._keys = keys
        self._source = source

    async def _iterate(self) -> AsyncIterator[Searchable]:
        if not self._keys or self._source is None:
            return
        # Ranking needs every candidate; only the source read is lazy
        entities = [entity async for entity in self._source.stream_by_keys(self._query, self._keys)]
        for entity in _rank(entities, self._keys):
            yield entity

    def __aiter__(self) -> AsyncIterator[Searchable]:
        return self._iterate()

    async def collect(self) -> list[Searchable]:
        return [entity async for entity in self]


class ResultMapper:
    """Turns raw search results into primary keys, entities and counts."""

    @staticmethod
    def map_ids(results: dict[str, Any]) -> list[Any]:
        """Primary keys of the hits, in rank order.

        The key field is taken to be the first field of the first hit,
        which depends on the engine's field ordering. Prefer
        ``map_ids_from`` when the key name is known.
        """
        hits = _hits(results)
        if not hits:
            return []
        key = next(iter(hits[0]), None)
        return [hit.get(key) for hit in hits]

    @staticmethod
    def map_ids_from(results: dict[str, Any], key: str) -> list[Any]:
        return [hit.get(key) for hit in _hits(results)]

    async def map(
        self,
        query: SearchQuery,
        results: dict[str, Any] | None,
        source: EntitySource,
    ) -> list[Searchable]:
        """Load the entities behind the hits, in rank order.

        Args:
            query: The query that produced ``results``; its model names the key field.
            results: Raw search result.
            source: Where entities are loaded from.

        Returns:
            Entities ordered like the hits, without the ones the source
            could not return.
        """
        if results is None:
            return []
        keys = self.map_ids_from(results, query.model.primary_key_name())
        if not keys:
            return []

        entities = await source.get_by_keys(query, keys)
        ranked = _rank(list(entities), keys)
        if len(ranked) < len(keys):
            logger.debug(
                "Dropped %d hit(s) from %s with no backing entity",
                len(keys) - len(ranked),
                query.index_name,
            )
        return ranked

    def lazy_map(
        self,
        query: SearchQuery,
        results: dict[str, Any] | None,
        source: EntitySource,
    ) -> LazyResults:
        """Like ``map`` but reads entities through ``source.stream_by_keys``."""
        if results is None:
            return LazyResults(query, [], None)
        keys = self.map_ids_from(results, query.model.primary_key_name())
        return LazyResults(query, keys, source)

    @staticmethod
    def get_total_count(results: dict[str, Any]) -> int:
        """Total number of matches reported by the engine."""
        for field in TOTAL_COUNT_FIELDS:
            if isinstance(results, dict) and field in results:
                return int(results[field])
        raise InvalidResultError("Search result has no total hit count")
