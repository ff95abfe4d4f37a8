"""Tests for order-clause to sort-directive translation."""

from __future__ import annotations

from meiliscout.core.sorting import build_sort
from meiliscout.models.query import OrderClause, SortDirection


def test_single_descending() -> None:
    assert build_sort([OrderClause(column="rank", direction=SortDirection.DESC)]) == ["rank:desc"]


def test_order_preserved() -> None:
    orders = [
        OrderClause(column="rank", direction=SortDirection.DESC),
        OrderClause(column="name"),
        OrderClause(column="created_at", direction="desc"),
    ]
    assert build_sort(orders) == ["rank:desc", "name:asc", "created_at:desc"]


def test_empty() -> None:
    assert build_sort([]) == []
