"""Comparator helpers and the tagged lookup result shared by the indexes."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, NamedTuple, Optional

Comparator = Callable[[Any, Any], int]


class Found(NamedTuple):
    """A present mapping. Lookups return ``None`` when the key is absent.

    Wrapping the value keeps "absent" apart from "mapped to None", which a
    comparator may legitimately order.
    """

    value: Any


def natural_order(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def reverse_order(comparator: Optional[Comparator] = None) -> Comparator:
    """Comparator that orders opposite to ``comparator`` (natural order by default)."""
    base = comparator or natural_order

    def compare(a: Any, b: Any) -> int:
        return base(b, a)

    return compare


def sort_key(comparator: Comparator):
    """Adapt a comparator into a ``key=`` callable for bisect and sorted."""
    return cmp_to_key(comparator)


def equivalent(comparator: Comparator, a: Any, b: Any) -> bool:
    return comparator(a, b) == 0
