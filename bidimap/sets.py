"""Set views over a ``BidiSortedMap``: keys, entries and values.

None of these hold data of their own. They read through to the map they
were created from, so they follow every later change to it.
"""

from __future__ import annotations

from collections.abc import Collection, Set
from typing import TYPE_CHECKING, Any, Iterator, Optional, Tuple

from bidimap.errors import NoSuchElement
from bidimap.iterators import EntryIterator, KeyIterator, ValueIterator
from bidimap.ordering import Comparator, equivalent

if TYPE_CHECKING:
    from bidimap.sortedmap import BidiSortedMap

Entry = Tuple[Any, Any]


class _MapSet(Set):
    def __init__(self, view: "BidiSortedMap") -> None:
        self._map = view

    def __len__(self) -> int:
        return len(self._map)

    def __bool__(self) -> bool:
        return bool(self._map)

    @classmethod
    def _from_iterable(cls, it):
        return set(it)

    def _required(self, entry: Optional[Entry]) -> Entry:
        if entry is None:
            raise NoSuchElement("set is empty")
        return entry

    def _poll(self, entry: Optional[Entry]) -> Optional[Entry]:
        if entry is not None:
            self._map.remove_entry(entry[0], entry[1])
        return entry

    def clear(self) -> None:
        self._map.clear()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"


class KeySet(_MapSet):
    """Navigable set of the map's keys, ordered like the map."""

    @property
    def comparator(self) -> Comparator:
        return self._map.key_comparator

    def __contains__(self, key: Any) -> bool:
        return key in self._map

    def __iter__(self) -> Iterator[Any]:
        return KeyIterator(self._map)

    def __reversed__(self) -> Iterator[Any]:
        return KeyIterator(self._map.descending())

    def first(self) -> Any:
        return self._required(self._map._first())[0]

    def last(self) -> Any:
        return self._required(self._map._last())[0]

    def lower(self, key: Any) -> Any:
        return self._map.lower_key(key)

    def floor(self, key: Any) -> Any:
        return self._map.floor_key(key)

    def ceiling(self, key: Any) -> Any:
        return self._map.ceiling_key(key)

    def higher(self, key: Any) -> Any:
        return self._map.higher_key(key)

    def poll_first(self) -> Any:
        entry = self._poll(self._map._first())
        return None if entry is None else entry[0]

    def poll_last(self) -> Any:
        entry = self._poll(self._map._last())
        return None if entry is None else entry[0]

    def sub_set(self, from_key: Any, to_key: Any, from_inclusive: bool = True, to_inclusive: bool = False) -> "KeySet":
        return self._map.sub_map(from_key, to_key, from_inclusive, to_inclusive).keys()

    def head_set(self, to_key: Any, inclusive: bool = False) -> "KeySet":
        return self._map.head_map(to_key, inclusive).keys()

    def tail_set(self, from_key: Any, inclusive: bool = True) -> "KeySet":
        return self._map.tail_map(from_key, inclusive).keys()

    def descending_set(self) -> "KeySet":
        return self._map.descending().keys()

    def discard(self, key: Any) -> None:
        self._map.pop(key, None)

    def remove(self, key: Any) -> None:
        del self._map[key]


class EntrySet(_MapSet):
    """Navigable set of ``(key, value)`` tuples, ordered by key."""

    def __contains__(self, entry: Any) -> bool:
        try:
            key, value = entry
        except (TypeError, ValueError):
            return False
        found = self._map._visible_key(key)
        return found is not None and equivalent(self._map.value_comparator, found.value, value)

    def __iter__(self) -> Iterator[Entry]:
        return EntryIterator(self._map)

    def __reversed__(self) -> Iterator[Entry]:
        return EntryIterator(self._map.descending())

    def first(self) -> Entry:
        return self._required(self._map._first())

    def last(self) -> Entry:
        return self._required(self._map._last())

    def lower(self, entry: Entry) -> Optional[Entry]:
        return self._map.lower_entry(entry[0])

    def floor(self, entry: Entry) -> Optional[Entry]:
        return self._map.floor_entry(entry[0])

    def ceiling(self, entry: Entry) -> Optional[Entry]:
        return self._map.ceiling_entry(entry[0])

    def higher(self, entry: Entry) -> Optional[Entry]:
        return self._map.higher_entry(entry[0])

    def poll_first(self) -> Optional[Entry]:
        return self._poll(self._map._first())

    def poll_last(self) -> Optional[Entry]:
        return self._poll(self._map._last())

    def descending_set(self) -> "EntrySet":
        return self._map.descending().items()

    def discard(self, entry: Entry) -> None:
        self._map.remove_entry(entry[0], entry[1])

    def remove(self, entry: Entry) -> None:
        if not self._map.remove_entry(entry[0], entry[1]):
            raise KeyError(entry)


class ValuesView(Collection):
    """The map's values in key order, with membership answered by the value index."""

    def __init__(self, view: "BidiSortedMap") -> None:
        self._map = view

    def __len__(self) -> int:
        return len(self._map)

    def __contains__(self, value: Any) -> bool:
        return self._map.contains_value(value)

    def __iter__(self) -> Iterator[Any]:
        return ValueIterator(self._map)

    def __reversed__(self) -> Iterator[Any]:
        return ValueIterator(self._map.descending())

    def discard(self, value: Any) -> None:
        self._map.remove_value(value)

    def remove(self, value: Any) -> None:
        if not self._map.contains_value(value):
            raise KeyError(value)
        self._map.remove_value(value)

    def clear(self) -> None:
        self._map.clear()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"
