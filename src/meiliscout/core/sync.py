"""Index synchronization — push and delete entities across destination indexes.

One remote call is made per destination index. Calls are issued one
after another with no atomicity across indexes: if the call for the
k-th index fails, the earlier indexes stay updated and the error
reaches the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from meiliscout.models.entity import Searchable
from meiliscout.sources.base import EntitySource
from meiliscout.transport.base import SearchTransport, TaskInfo

logger = logging.getLogger(__name__)


def to_document(entity: Searchable) -> dict[str, Any] | None:
    """Flatten an entity into the document pushed to its index.

    Returns ``None`` when the entity has no searchable fields.

    Raises:
        ValueError: If the entity has no primary-key value.
    """
    fields = entity.searchable_fields()
    if not fields:
        return None
    key = entity.primary_key_value()
    if key is None:
        raise ValueError(f"{type(entity).__name__} has no value for primary key {entity.primary_key_name()!r}")
    return {
        entity.primary_key_name(): key,
        **fields,
        **entity.metadata(),
    }


def group_by_index(entities: Iterable[Searchable]) -> dict[str, list[Searchable]]:
    """Partition entities by destination index, keeping their relative order."""
    groups: dict[str, list[Searchable]] = {}
    for entity in entities:
        groups.setdefault(entity.destination_index(), []).append(entity)
    return groups


class IndexSynchronizer:
    """Keeps MeiliSearch indexes in step with application entities.

    Args:
        transport: Search engine transport.
        soft_delete: Push soft-delete metadata for entity types that
            declare ``soft_deletes = True``.
    """

    def __init__(self, transport: SearchTransport, soft_delete: bool = False) -> None:
        self._transport = transport
        self._soft_delete = soft_delete

    async def push(self, entities: Iterable[Searchable]) -> list[TaskInfo]:
        """Upsert entities into their destination indexes.

        Returns:
            One task per index that received documents.
        """
        entities = list(entities)
        if not entities:
            return []

        if self._soft_delete:
            for entity in entities:
                if entity.soft_deletes:
                    entity.push_soft_delete_metadata()

        tasks: list[TaskInfo] = []
        for index_name, items in group_by_index(entities).items():
            documents = [doc for doc in (to_document(entity) for entity in items) if doc is not None]
            if not documents:
                logger.debug("Nothing searchable to push to %s", index_name)
                continue

            task = await self._transport.index(index_name).add_documents(documents, items[0].primary_key_name())
            logger.info(
                "Pushed %d document(s) to %s (task %s)",
                len(documents),
                index_name,
                task.task_uid,
            )
            tasks.append(task)
        return tasks

    async def delete(self, entities: Iterable[Searchable]) -> TaskInfo | None:
        """Remove entities from their index.

        All entities must share a single destination index. Empty input
        is a no-op.

        Raises:
            ValueError: If the entities span more than one index.
        """
        entities = list(entities)
        if not entities:
            return None

        index_names = {entity.destination_index() for entity in entities}
        if len(index_names) > 1:
            raise ValueError(f"Cannot delete across several indexes at once: {sorted(index_names)}")

        index_name = index_names.pop()
        keys = [entity.primary_key_value() for entity in entities]
        task = await self._transport.index(index_name).delete_documents(keys)
        logger.info("Deleted %d document(s) from %s (task %s)", len(keys), index_name, task.task_uid)
        return task

    async def flush(self, model: type[Searchable]) -> TaskInfo:
        """Delete every document from the index of ``model``."""
        index_name = model.destination_index()
        task = await self._transport.index(index_name).delete_all_documents()
        logger.info("Flushed %s (task %s)", index_name, task.task_uid)
        return task

    async def create_index(self, name: str, options: dict[str, Any] | None = None) -> TaskInfo:
        return await self._transport.create_index(name, options or {})

    async def delete_index(self, name: str) -> TaskInfo:
        return await self._transport.delete_index(name)

    async def import_all(self, model: type[Searchable], source: EntitySource, chunk_size: int = 500) -> int:
        """Push every entity of ``model`` that ``source`` knows about, in chunks.

        Returns:
            Number of entities handed to ``push``.

        Raises:
            NotImplementedError: If ``source`` does not implement ``iter_all``.
        """
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")

        total = 0
        chunk: list[Searchable] = []
        async for entity in source.iter_all(model):
            chunk.append(entity)
            if len(chunk) >= chunk_size:
                await self.push(chunk)
                total += len(chunk)
                chunk = []
        if chunk:
            await self.push(chunk)
            total += len(chunk)

        logger.info("Imported %d %s record(s) into %s", total, model.__name__, model.destination_index())
        return total
