"""Immutable interval over a comparator-ordered domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from bidimap.errors import RangeViolation
from bidimap.ordering import Comparator, natural_order


@dataclass(frozen=True)
class Range:
    """Interval ``low .. high`` where either bound may be missing.

    Bounds are always expressed in ascending comparator order, whatever the
    iteration direction of the view holding the range. Presence is tracked
    with ``has_low``/``has_high`` so that ``None`` can itself be a bound when
    the comparator orders it.
    """

    comparator: Comparator = field(default=natural_order, compare=False, repr=False)
    low: Any = None
    low_inclusive: bool = True
    has_low: bool = False
    high: Any = None
    high_inclusive: bool = False
    has_high: bool = False

    def __post_init__(self) -> None:
        # (x, x) and [x, x) are accepted and simply contain nothing
        if self.has_low and self.has_high and self.comparator(self.low, self.high) > 0:
            raise ValueError(f"range low bound {self.low!r} is above high bound {self.high!r}")

    @classmethod
    def full(cls, comparator: Optional[Comparator] = None) -> "Range":
        return cls(comparator or natural_order)

    @classmethod
    def between(
        cls,
        low: Any,
        high: Any,
        comparator: Optional[Comparator] = None,
        low_inclusive: bool = True,
        high_inclusive: bool = False,
    ) -> "Range":
        return cls(comparator or natural_order, low, low_inclusive, True, high, high_inclusive, True)

    @classmethod
    def at_least(cls, low: Any, comparator: Optional[Comparator] = None, inclusive: bool = True) -> "Range":
        return cls(comparator or natural_order, low, inclusive, True)

    @classmethod
    def below(cls, high: Any, comparator: Optional[Comparator] = None, inclusive: bool = False) -> "Range":
        return cls(comparator or natural_order, high=high, high_inclusive=inclusive, has_high=True)

    @property
    def is_full(self) -> bool:
        return not self.has_low and not self.has_high

    def too_low(self, item: Any) -> bool:
        if not self.has_low:
            return False
        order = self.comparator(item, self.low)
        return order < 0 or (order == 0 and not self.low_inclusive)

    def too_high(self, item: Any) -> bool:
        if not self.has_high:
            return False
        order = self.comparator(item, self.high)
        return order > 0 or (order == 0 and not self.high_inclusive)

    def contains(self, item: Any) -> bool:
        if self.is_full:
            return True
        return not self.too_low(item) and not self.too_high(item)

    __contains__ = contains

    def encloses(self, other: "Range") -> bool:
        """True when every element of ``other`` is also an element of this range."""
        if self.has_low:
            if not other.has_low:
                return False
            order = self.comparator(other.low, self.low)
            if order < 0 or (order == 0 and other.low_inclusive and not self.low_inclusive):
                return False
        if self.has_high:
            if not other.has_high:
                return False
            order = self.comparator(other.high, self.high)
            if order > 0 or (order == 0 and other.high_inclusive and not self.high_inclusive):
                return False
        return True

    def narrow(self, other: "Range") -> "Range":
        """Combine a requested sub-range with this one.

        Missing bounds of ``other`` are inherited from this range. The result
        must lie inside this range, otherwise ``RangeViolation`` is raised.
        """
        try:
            combined = Range(
                self.comparator,
                other.low if other.has_low else self.low,
                other.low_inclusive if other.has_low else self.low_inclusive,
                other.has_low or self.has_low,
                other.high if other.has_high else self.high,
                other.high_inclusive if other.has_high else self.high_inclusive,
                other.has_high or self.has_high,
            )
        except ValueError:
            raise RangeViolation(f"{other!r} reaches outside {self!r}") from None
        if not self.encloses(combined):
            raise RangeViolation(f"{other!r} reaches outside {self!r}")
        return combined

    def __repr__(self) -> str:
        if self.is_full:
            return "Range(full)"
        low = (("[" if self.low_inclusive else "(") + repr(self.low)) if self.has_low else "(-inf"
        high = (repr(self.high) + ("]" if self.high_inclusive else ")")) if self.has_high else "+inf)"
        return f"Range({low}, {high})"
