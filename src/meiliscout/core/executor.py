"""Query execution — build search parameters and dispatch them to an index."""

from __future__ import annotations

import inspect
import logging
from typing import Any

from meiliscout.core.filters import build_filter
from meiliscout.core.sorting import build_sort
from meiliscout.models.query import SearchQuery
from meiliscout.transport.base import SearchResult, SearchTransport

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Runs ``SearchQuery`` objects against the transport.

    Errors from the transport are not caught and nothing is retried.
    """

    def __init__(self, transport: SearchTransport) -> None:
        self._transport = transport

    @staticmethod
    def build_params(query: SearchQuery) -> dict[str, Any]:
        """Search parameters for ``query``; empty filter, sort and unset limit are left out."""
        params: dict[str, Any] = {}
        filter_expression = build_filter(query.predicates)
        if filter_expression:
            params["filter"] = filter_expression
        if query.limit is not None:
            params["limit"] = query.limit
        sort = build_sort(query.orders)
        if sort:
            params["sort"] = sort
        return params

    async def search(self, query: SearchQuery) -> Any:
        return await self._perform_search(query, self.build_params(query))

    async def paginate(self, query: SearchQuery, per_page: int, page: int) -> Any:
        """Search one page of results. ``page`` is 1-based."""
        params = self.build_params(query)
        params["limit"] = int(per_page)
        params["offset"] = (page - 1) * per_page
        return await self._perform_search(query, params)

    async def _perform_search(self, query: SearchQuery, params: dict[str, Any]) -> Any:
        index = self._transport.index(query.index_name)
        logger.debug("Searching %s for %r with %s", query.index_name, query.query, params)

        if query.callback is not None:
            result = query.callback(index, query.query, params)
            if inspect.isawaitable(result):
                result = await result
            return result.raw if isinstance(result, SearchResult) else result

        return await index.raw_search(query.query, params)
