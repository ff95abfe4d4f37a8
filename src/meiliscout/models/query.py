"""Search query models — predicates, ordering and the query builder."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from meiliscout.models.entity import Searchable

RawSearchCallback = Callable[[Any, str, dict[str, Any]], Any]
"""Raw-search override: ``(index_handle, query, params) -> result``.

May be a plain function or a coroutine function.
"""


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class OrderClause(BaseModel):
    """A single ``column:direction`` ordering."""

    column: str = Field(description="Sortable attribute name")
    direction: SortDirection = Field(default=SortDirection.ASC, description="Sort direction")


class PredicateSet(BaseModel):
    """Equality and inclusion filter criteria.

    All entries are combined with AND; values inside one inclusion entry
    are combined with OR.
    """

    equals: dict[str, Any] = Field(default_factory=dict, description="field -> required value")
    includes: dict[str, list[Any]] = Field(default_factory=dict, description="field -> allowed values")

    def is_empty(self) -> bool:
        return not self.equals and not self.includes


class SearchQuery(BaseModel):
    """A search against the index of one entity type.

    Built fluently::

        query = (
            SearchQuery.for_model(Post, "solar")
            .where("published", True)
            .where_in("category_id", [1, 2])
            .order_by("rank", "desc")
            .take(20)
        )
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    model: type[Searchable] = Field(description="Entity type being searched")
    query: str = Field(default="", description="Full-text query string")
    index: str | None = Field(default=None, description="Explicit index override")
    predicates: PredicateSet = Field(default_factory=PredicateSet)
    orders: list[OrderClause] = Field(default_factory=list)
    limit: int | None = Field(default=None, description="Maximum number of hits")
    callback: RawSearchCallback | None = Field(default=None, description="Raw-search override")

    @classmethod
    def for_model(cls, model: type[Searchable], query: str = "") -> SearchQuery:
        return cls(model=model, query=query)

    def where(self, field: str, value: Any) -> SearchQuery:
        self.predicates.equals[field] = value
        return self

    def where_in(self, field: str, values: Iterable[Any]) -> SearchQuery:
        self.predicates.includes[field] = list(values)
        return self

    def order_by(self, column: str, direction: SortDirection | str = SortDirection.ASC) -> SearchQuery:
        if not isinstance(direction, SortDirection):
            direction = SortDirection(direction.lower())
        self.orders.append(OrderClause(column=column, direction=direction))
        return self

    def take(self, limit: int) -> SearchQuery:
        self.limit = limit
        return self

    def within(self, index: str) -> SearchQuery:
        self.index = index
        return self

    def using(self, callback: RawSearchCallback) -> SearchQuery:
        self.callback = callback
        return self

    @property
    def index_name(self) -> str:
        """The explicit index override, or the entity type's index."""
        return self.index or self.model.destination_index()
