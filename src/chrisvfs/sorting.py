"""Field driven sorting for listing results."""

from __future__ import annotations

import locale
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from functools import cmp_to_key
from typing import Any, TypeVar

T = TypeVar("T")


def _field_value(item: Any, field: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(field)
    return getattr(item, field, None)


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _timestamp(value: date) -> float:
    if isinstance(value, datetime):
        return value.timestamp()
    return datetime(value.year, value.month, value.day).timestamp()


def compare_strings(a: str, b: str) -> int:
    """Case-insensitive collation; case only breaks ties.

    Gives ``alpha`` < ``Beta`` < ``Zeta`` in every locale, the C locale included.
    """
    result = _sign(locale.strcoll(a.casefold(), b.casefold()))
    if result:
        return result
    return _sign(locale.strcoll(a, b))


def compare_values(a: Any, b: Any) -> int:
    """Compare two defined values by their runtime kind.

    Numbers compare numerically, strings with ``compare_strings``, dates by
    timestamp. Anything else, including mixed kinds, is compared as strings.
    """
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return _sign(a - b)
    if isinstance(a, str) and isinstance(b, str):
        return compare_strings(a, b)
    if isinstance(a, date) and isinstance(b, date):
        return _sign(_timestamp(a) - _timestamp(b))
    return compare_strings(str(a), str(b))


def sort_items(items: Iterable[T], field: str | None = None, reverse: bool = False) -> list[T]:
    """Sort items by one field and return a new list.

    Items may be mappings, dataclasses or any object with attributes. With no
    ``field`` the original order is kept. ``None`` and missing values always
    go last; ``reverse`` only flips comparisons between defined values.
    """
    ordered = list(items)
    if not field or not ordered:
        return ordered

    def compare(a: T, b: T) -> int:
        a_val = _field_value(a, field)
        b_val = _field_value(b, field)
        if a_val is None and b_val is None:
            return 0
        if a_val is None:
            return 1
        if b_val is None:
            return -1
        result = compare_values(a_val, b_val)
        return -result if reverse else result

    return sorted(ordered, key=cmp_to_key(compare))


def apply_sort(
    items: Iterable[T], sort_field: str | None = None, reverse: bool = False
) -> list[T]:
    """Command level helper: sort only when a field was requested."""
    if not sort_field:
        return list(items)
    return sort_items(items, sort_field, reverse)
