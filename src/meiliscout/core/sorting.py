"""Sort translation — order clauses to MeiliSearch sort directives."""

from __future__ import annotations

from collections.abc import Iterable

from meiliscout.models.query import OrderClause


def build_sort(orders: Iterable[OrderClause]) -> list[str]:
    return [f"{order.column}:{order.direction.value}" for order in orders]
