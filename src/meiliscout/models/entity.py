"""Searchable entity contract.

Application records that should live in a MeiliSearch index subclass
``Searchable``.  The driver only ever talks to entities through the methods
declared here, so any persistence layer can plug in.

Example::

    class Post(Searchable):
        search_index = "posts"
        soft_deletes = True

        def __init__(self, id: int, title: str, deleted_at: datetime | None = None) -> None:
            self.id = id
            self.title = title
            self.deleted_at = deleted_at

        def searchable_fields(self) -> dict[str, Any]:
            return {"title": self.title}

        def trashed(self) -> bool:
            return self.deleted_at is not None
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

SOFT_DELETE_FIELD = "__soft_deleted"


class Searchable(ABC):
    """Base class for records synchronized into a search index.

    Class attributes:
        search_index: Destination index name. Defaults to the lower-cased
            class name with an ``s`` suffix (``Post`` -> ``posts``). No
            other pluralisation is attempted, so types with irregular
            plurals (``Category``) should set it explicitly.
        key_name: Name of the primary-key attribute, also used as the
            document primary key in the index.
        soft_deletes: Whether this type carries a soft-delete state that
            should be pushed to the index as metadata.
    """

    search_index: ClassVar[str | None] = None
    key_name: ClassVar[str] = "id"
    soft_deletes: ClassVar[bool] = False

    @classmethod
    def destination_index(cls) -> str:
        """Name of the index this entity type is pushed to."""
        return cls.search_index or f"{cls.__name__.lower()}s"

    @classmethod
    def primary_key_name(cls) -> str:
        return cls.key_name

    def primary_key_value(self) -> Any:
        return getattr(self, self.primary_key_name())

    @abstractmethod
    def searchable_fields(self) -> dict[str, Any]:
        """Flat map of fields to index. An empty map keeps the entity out of the index."""

    def metadata(self) -> dict[str, Any]:
        """Metadata fields injected by the sync layer."""
        return dict(self._metadata_store())

    def with_metadata(self, key: str, value: Any) -> Searchable:
        """Attach a metadata field that is merged into the pushed document."""
        self._metadata_store()[key] = value
        return self

    def trashed(self) -> bool:
        """Whether the record is soft-deleted. Override on soft-deleting types."""
        return False

    def push_soft_delete_metadata(self) -> Searchable:
        return self.with_metadata(SOFT_DELETE_FIELD, 1 if self.trashed() else 0)

    def _metadata_store(self) -> dict[str, Any]:
        store = self.__dict__.get("_search_metadata")
        if store is None:
            store = {}
            self.__dict__["_search_metadata"] = store
        return store
