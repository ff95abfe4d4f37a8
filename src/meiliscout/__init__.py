"""meiliscout — Keep application records in sync with MeiliSearch indexes.

Quick start::

    from meiliscout import MeiliSearchClient, MeiliSearchEngine, SearchQuery

    async with MeiliSearchClient("http://localhost:7700", api_key="key") as client:
        engine = MeiliSearchEngine(client, soft_delete=True)
        await engine.push(posts)
        posts = await engine.get(SearchQuery.for_model(Post, "solar").where("published", True), source)
"""

from meiliscout.core.engine import MeiliSearchEngine
from meiliscout.models.entity import Searchable
from meiliscout.models.query import OrderClause, PredicateSet, SearchQuery, SortDirection
from meiliscout.sources.base import EntitySource
from meiliscout.transport.meilisearch import MeiliSearchClient

__version__ = "0.1.0"

__all__ = [
    "EntitySource",
    "MeiliSearchClient",
    "MeiliSearchEngine",
    "OrderClause",
    "PredicateSet",
    "SearchQuery",
    "Searchable",
    "SortDirection",
    "__version__",
]
