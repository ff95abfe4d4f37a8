"""Base entity source — how the driver reads records back from the application.

The persistence layer is opaque to the driver. Implement ``EntitySource``
on top of your ORM or repository to let search hits be turned back into
entities.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from meiliscout.models.entity import Searchable
    from meiliscout.models.query import SearchQuery


class EntitySource(ABC):
    """Loads entities by primary key.

    Implementations may return entities in any order and may omit keys
    they cannot find (e.g. a record deleted after it was indexed, or
    replication lag between the write and read paths). The driver
    filters and re-orders what comes back.
    """

    @abstractmethod
    async def get_by_keys(self, query: SearchQuery, keys: Sequence[Any]) -> list[Searchable]:
        """Load the entities of ``query.model`` whose primary keys are in ``keys``."""

    @abstractmethod
    def stream_by_keys(self, query: SearchQuery, keys: Sequence[Any]) -> AsyncIterator[Searchable]:
        """Lazily yield the entities of ``query.model`` whose primary keys are in ``keys``."""

    def iter_all(self, model: type[Searchable]) -> AsyncIterator[Searchable]:
        """Lazily yield every entity of ``model``.

        Needed for full imports only. The default raises
        ``NotImplementedError``, which ``IndexSynchronizer.import_all``
        lets through to its caller.
        """
        raise NotImplementedError(f"{type(self).__name__} does not support full imports")
