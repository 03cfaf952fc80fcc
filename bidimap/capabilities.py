"""Capability interfaces implemented by ``BidiSortedMap`` and its views."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple


class OrderedContainer(ABC):
    """Entries kept in comparator order, navigable from either end."""

    @abstractmethod
    def first_entry(self) -> Optional[Tuple[Any, Any]]:
        raise NotImplementedError()

    @abstractmethod
    def last_entry(self) -> Optional[Tuple[Any, Any]]:
        raise NotImplementedError()

    @abstractmethod
    def lower_entry(self, key: Any) -> Optional[Tuple[Any, Any]]:
        raise NotImplementedError()

    @abstractmethod
    def floor_entry(self, key: Any) -> Optional[Tuple[Any, Any]]:
        raise NotImplementedError()

    @abstractmethod
    def ceiling_entry(self, key: Any) -> Optional[Tuple[Any, Any]]:
        raise NotImplementedError()

    @abstractmethod
    def higher_entry(self, key: Any) -> Optional[Tuple[Any, Any]]:
        raise NotImplementedError()

    @abstractmethod
    def descending(self) -> "OrderedContainer":
        raise NotImplementedError()

    @abstractmethod
    def map_cursor(self):
        raise NotImplementedError()


class RangeRestrictable(ABC):
    """Can hand out zero-copy windows over a key range, a value range or both."""

    @abstractmethod
    def restrict(self, key_range=None, value_range=None) -> "RangeRestrictable":
        raise NotImplementedError()

    @abstractmethod
    def sub_map(self, from_key: Any, to_key: Any, from_inclusive: bool = True, to_inclusive: bool = False):
        raise NotImplementedError()

    @abstractmethod
    def head_map(self, to_key: Any, inclusive: bool = False):
        raise NotImplementedError()

    @abstractmethod
    def tail_map(self, from_key: Any, inclusive: bool = True):
        raise NotImplementedError()


class Invertible(ABC):
    """Answers value-to-key queries and exposes the role-swapped view."""

    @abstractmethod
    def inverse(self) -> "Invertible":
        raise NotImplementedError()

    @abstractmethod
    def get_key(self, value: Any, default: Any = None) -> Any:
        raise NotImplementedError()

    @abstractmethod
    def remove_value(self, value: Any, default: Any = None) -> Any:
        raise NotImplementedError()
