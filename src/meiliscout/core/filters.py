"""Filter translation — predicate sets to MeiliSearch filter expressions.

    {"status": "active", "price": 9.99} + {"category": [1, 2]}
    -> 'status="active" AND price=9.99 AND (category=1 OR category=2)'
"""

from __future__ import annotations

import numbers
import re
from typing import Any

from meiliscout.models.query import PredicateSet

# Numeric strings: integers, decimals and exponents with optional surrounding whitespace
_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
# Integer strings: optional sign, no leading zeros
_INTEGER_RE = re.compile(r"^\s*[+-]?(0|[1-9]\d*)\s*$")


def is_numeric(value: Any) -> bool:
    """Numeric check used for equality predicates (integers and decimals)."""
    if isinstance(value, bool):
        return False
    # Decimal registers as a Number only, not as Real
    if isinstance(value, numbers.Number) and not isinstance(value, complex):
        return True
    return isinstance(value, str) and bool(_NUMERIC_RE.match(value))


def is_integer(value: Any) -> bool:
    """Integer-only check used for inclusion predicates."""
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Integral):
        return True
    if isinstance(value, numbers.Number) and not isinstance(value, complex):
        try:
            return value == int(value)
        except (ValueError, OverflowError):
            # NaN and infinities
            return False
    return isinstance(value, str) and bool(_INTEGER_RE.match(value))


def _render(field: str, value: Any, *, integer_only: bool) -> str:
    if isinstance(value, bool):
        return f"{field}={'true' if value else 'false'}"
    unquoted = is_integer(value) if integer_only else is_numeric(value)
    if unquoted:
        if integer_only and isinstance(value, numbers.Number):
            value = int(value)
        return f"{field}={value}"
    if value is None:
        value = ""
    # Embedded double quotes are not escaped
    return f'{field}="{value}"'


def build_filter(predicates: PredicateSet) -> str:
    """Translate a predicate set into a single filter expression.

    Equality entries come first, then one parenthesized OR group per
    inclusion entry; everything is joined with ``AND``. An empty set
    yields an empty string.
    """
    expressions = [_render(field, value, integer_only=False) for field, value in predicates.equals.items()]

    for field, values in predicates.includes.items():
        group = " OR ".join(_render(field, value, integer_only=True) for value in values)
        expressions.append(f"({group})")

    return " AND ".join(expressions)
