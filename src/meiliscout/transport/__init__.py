"""Search engine transport — typed access to a MeiliSearch instance.

The driver core depends only on the abstract ``SearchTransport`` and
``IndexHandle`` interfaces; ``MeiliSearchClient`` implements them over
the MeiliSearch REST API using ``httpx``.
"""

from meiliscout.transport.base import IndexHandle, SearchResult, SearchTransport, TaskInfo
from meiliscout.transport.meilisearch import MeiliSearchClient, MeiliSearchIndex

__all__ = [
    "IndexHandle",
    "MeiliSearchClient",
    "MeiliSearchIndex",
    "SearchResult",
    "SearchTransport",
    "TaskInfo",
]
