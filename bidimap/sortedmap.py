"""Bidirectional sorted map and its zero-copy views.

A ``BidiSortedMap`` is a thin handle over a shared ``DualIndexEngine``:

* ``forward``/``backward`` - which engine tree maps this handle's keys to its
  values. An inverse view simply swaps them.
* ``key_range``/``value_range`` - restrictions, each possibly full.
* ``descending`` - whether iteration walks the key tree backwards.

The map returned by the constructor is the root (both ranges full, forward
being the engine's key index). ``sub_map``, ``restrict``, ``inverse`` and
``descending`` return further handles on the same engine; nothing is copied
and every handle sees mutations made through any other immediately.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple, Union

from bidimap.bplus import BPlusTree
from bidimap.capabilities import Invertible, OrderedContainer, RangeRestrictable
from bidimap.engine import DualIndexEngine
from bidimap.errors import ConcurrentStructuralChange, NoSuchElement, RangeViolation
from bidimap.iterators import KeyIterator, MapCursor
from bidimap.ordering import Comparator, Found, equivalent
from bidimap.ranges import Range
from bidimap.scan import count_matches, scan_first_match, walk_range
from bidimap.sets import EntrySet, KeySet, ValuesView

Entry = Tuple[Any, Any]

_marker = object()


class BidiSortedMap(MutableMapping, OrderedContainer, RangeRestrictable, Invertible):
    """Sorted mapping that is injective in both directions.

    Keys are ordered by ``key_comparator`` and values by ``value_comparator``
    (both ``cmp(a, b) -> int``, natural ordering when omitted). Assigning a
    value that already belongs to another key moves it: the other key is
    dropped from the map.
    """

    def __init__(
        self,
        initial: Union[Mapping, Iterable[Entry], None] = None,
        key_comparator: Optional[Comparator] = None,
        value_comparator: Optional[Comparator] = None,
        order: Optional[int] = None,
    ) -> None:
        engine = DualIndexEngine(key_comparator, value_comparator, order)
        self._bind(
            engine,
            engine.key_index,
            engine.value_index,
            Range.full(engine.key_index.comparator),
            Range.full(engine.value_index.comparator),
            False,
        )
        if initial is not None:
            engine.load(initial.items() if isinstance(initial, Mapping) else initial)

    @classmethod
    def from_items(
        cls,
        pairs: Iterable[Entry],
        key_comparator: Optional[Comparator] = None,
        value_comparator: Optional[Comparator] = None,
        order: Optional[int] = None,
    ) -> "BidiSortedMap":
        """Rebuild a map from ``(key, value)`` pairs, e.g. a saved ``items()`` listing."""
        return cls(pairs, key_comparator, value_comparator, order)

    def _bind(
        self,
        engine: DualIndexEngine,
        forward: BPlusTree,
        backward: BPlusTree,
        key_range: Range,
        value_range: Range,
        descending: bool,
    ) -> None:
        self._engine = engine
        self._forward = forward
        self._backward = backward
        self._key_range = key_range
        self._value_range = value_range
        self._descending = descending
        self._inverse: Optional[BidiSortedMap] = None
        self._reversed: Optional[BidiSortedMap] = None

    def _derive(
        self,
        forward: BPlusTree,
        backward: BPlusTree,
        key_range: Range,
        value_range: Range,
        descending: bool,
    ) -> "BidiSortedMap":
        view = BidiSortedMap.__new__(BidiSortedMap)
        view._bind(self._engine, forward, backward, key_range, value_range, descending)
        return view

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def key_comparator(self) -> Comparator:
        return self._forward.comparator

    @property
    def value_comparator(self) -> Comparator:
        return self._backward.comparator

    @property
    def key_range(self) -> Range:
        return self._key_range

    @property
    def value_range(self) -> Range:
        return self._value_range

    @property
    def is_descending(self) -> bool:
        return self._descending

    @property
    def is_restricted(self) -> bool:
        return not (self._key_range.is_full and self._value_range.is_full)

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------
    def _visible_key(self, key: Any) -> Optional[Found]:
        """Value of ``key`` if the entry is visible through this view."""
        if not self._key_range.contains(key):
            return None
        found = self._forward.lookup(key)
        if found is None or not self._value_range.contains(found.value):
            return None
        return found

    def _visible_value(self, value: Any) -> Optional[Found]:
        """Key holding ``value`` if the entry is visible through this view."""
        if not self._value_range.contains(value):
            return None
        found = self._backward.lookup(value)
        if found is None or not self._key_range.contains(found.value):
            return None
        return found

    def __getitem__(self, key: Any) -> Any:
        found = self._visible_key(key)
        if found is None:
            raise KeyError(key)
        return found.value

    def get(self, key: Any, default: Any = None) -> Any:
        found = self._visible_key(key)
        return default if found is None else found.value

    def __contains__(self, key: Any) -> bool:
        return self._visible_key(key) is not None

    def get_key(self, value: Any, default: Any = None) -> Any:
        found = self._visible_value(value)
        return default if found is None else found.value

    def contains_value(self, value: Any) -> bool:
        return self._visible_value(value) is not None

    def __len__(self) -> int:
        if not self.is_restricted:
            return len(self._forward)
        if self._value_range.is_full:
            return sum(1 for _ in walk_range(self._forward, self._key_range))
        if self._key_range.is_full:
            return sum(1 for _ in walk_range(self._backward, self._value_range))
        # Restricted on both axes: linear pass over the key range.
        return count_matches(walk_range(self._forward, self._key_range), self._value_range.contains)

    def __bool__(self) -> bool:
        if self._key_range.is_full and not self._value_range.is_full:
            return next(walk_range(self._backward, self._value_range), None) is not None
        return self._tree_first() is not None

    def __iter__(self) -> Iterator[Any]:
        return KeyIterator(self)

    def __reversed__(self) -> Iterator[Any]:
        return KeyIterator(self.descending())

    def __repr__(self) -> str:
        body = ", ".join(f"{key!r}: {value!r}" for key, value in self.items())
        return f"{type(self).__name__}({{{body}}})"

    # ------------------------------------------------------------------
    # Navigation in key-tree order
    # ------------------------------------------------------------------
    def _scan_up(self, entry: Optional[Entry]) -> Optional[Entry]:
        key_range = self._key_range
        return scan_first_match(
            entry, self._forward.higher, lambda key: not key_range.too_high(key), self._value_range.contains
        )

    def _scan_down(self, entry: Optional[Entry]) -> Optional[Entry]:
        key_range = self._key_range
        return scan_first_match(
            entry, self._forward.lower, lambda key: not key_range.too_low(key), self._value_range.contains
        )

    def _tree_first(self) -> Optional[Entry]:
        return self._scan_up(next(walk_range(self._forward, self._key_range), None))

    def _tree_last(self) -> Optional[Entry]:
        return self._scan_down(next(walk_range(self._forward, self._key_range, reverse=True), None))

    def _tree_ceiling(self, key: Any) -> Optional[Entry]:
        if self._key_range.too_low(key):
            return self._tree_first()
        return self._scan_up(self._forward.ceiling(key))

    def _tree_higher(self, key: Any) -> Optional[Entry]:
        if self._key_range.too_low(key):
            return self._tree_first()
        return self._scan_up(self._forward.higher(key))

    def _tree_floor(self, key: Any) -> Optional[Entry]:
        if self._key_range.too_high(key):
            return self._tree_last()
        return self._scan_down(self._forward.floor(key))

    def _tree_lower(self, key: Any) -> Optional[Entry]:
        if self._key_range.too_high(key):
            return self._tree_last()
        return self._scan_down(self._forward.lower(key))

    # Navigation in this view's own order. Iterators and cursors build on these.
    def _first(self) -> Optional[Entry]:
        return self._tree_last() if self._descending else self._tree_first()

    def _last(self) -> Optional[Entry]:
        return self._tree_first() if self._descending else self._tree_last()

    def _next(self, key: Any) -> Optional[Entry]:
        return self._tree_lower(key) if self._descending else self._tree_higher(key)

    def _previous(self, key: Any) -> Optional[Entry]:
        return self._tree_higher(key) if self._descending else self._tree_lower(key)

    def _ceiling(self, key: Any) -> Optional[Entry]:
        return self._tree_floor(key) if self._descending else self._tree_ceiling(key)

    def _floor(self, key: Any) -> Optional[Entry]:
        return self._tree_ceiling(key) if self._descending else self._tree_floor(key)

    def first_entry(self) -> Optional[Entry]:
        return self._first()

    def last_entry(self) -> Optional[Entry]:
        return self._last()

    def lower_entry(self, key: Any) -> Optional[Entry]:
        return self._previous(key)

    def floor_entry(self, key: Any) -> Optional[Entry]:
        return self._floor(key)

    def ceiling_entry(self, key: Any) -> Optional[Entry]:
        return self._ceiling(key)

    def higher_entry(self, key: Any) -> Optional[Entry]:
        return self._next(key)

    def first_key(self) -> Any:
        entry = self._first()
        if entry is None:
            raise NoSuchElement("map is empty")
        return entry[0]

    def last_key(self) -> Any:
        entry = self._last()
        if entry is None:
            raise NoSuchElement("map is empty")
        return entry[0]

    def lower_key(self, key: Any) -> Any:
        return _key_of(self._previous(key))

    def floor_key(self, key: Any) -> Any:
        return _key_of(self._floor(key))

    def ceiling_key(self, key: Any) -> Any:
        return _key_of(self._ceiling(key))

    def higher_key(self, key: Any) -> Any:
        return _key_of(self._next(key))

    def first_value(self) -> Any:
        """Smallest visible value in this view's value order."""
        return self.inverse().first_key()

    def last_value(self) -> Any:
        return self.inverse().last_key()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def _check_key(self, key: Any) -> None:
        if not self._key_range.contains(key):
            raise RangeViolation(f"key {key!r} is outside {self._key_range!r}")

    def _check_value(self, value: Any) -> None:
        if not self._value_range.contains(value):
            raise RangeViolation(f"value {value!r} is outside {self._value_range!r}")

    def _lookup_for_update(self, key: Any) -> Optional[Found]:
        """Current mapping of an in-range key, refusing keys hidden by the value range."""
        current = self._forward.lookup(key)
        if current is not None and not self._value_range.contains(current.value):
            raise RangeViolation(f"key {key!r} is mapped to {current.value!r}, outside {self._value_range!r}")
        return current

    def _put(self, key: Any, value: Any) -> Optional[Found]:
        self._check_key(key)
        self._check_value(value)
        self._lookup_for_update(key)
        return self._engine.put(self._forward, self._backward, key, value)

    def put(self, key: Any, value: Any) -> Any:
        """Map ``key`` to ``value``; returns the previous value or None.

        Any other key that held ``value`` is removed from the map.
        """
        return _value_of(self._put(key, value))

    def __setitem__(self, key: Any, value: Any) -> None:
        self._put(key, value)

    def _remove_key(self, key: Any) -> Optional[Found]:
        if self._visible_key(key) is None:
            return None
        return self._engine.remove_key(self._forward, self._backward, key)

    def __delitem__(self, key: Any) -> None:
        if self._remove_key(key) is None:
            raise KeyError(key)

    def pop(self, key: Any, default: Any = _marker) -> Any:
        found = self._remove_key(key)
        if found is not None:
            return found.value
        if default is _marker:
            raise KeyError(key)
        return default

    def remove_value(self, value: Any, default: Any = None) -> Any:
        """Remove the entry holding ``value``; returns its key or ``default``."""
        holder = self._visible_value(value)
        if holder is None:
            return default
        self._engine.remove_entry(self._forward, self._backward, holder.value, value)
        return holder.value

    def remove_entry(self, key: Any, value: Any) -> bool:
        found = self._visible_key(key)
        if found is None or not equivalent(self.value_comparator, found.value, value):
            return False
        return self._engine.remove_entry(self._forward, self._backward, key, found.value)

    def replace(self, key: Any, value: Any) -> Any:
        """Change the value of an existing key; absent keys are left absent."""
        self._check_key(key)
        self._check_value(value)
        found = self._visible_key(key)
        if found is None:
            return None
        self._engine.put(self._forward, self._backward, key, value)
        return found.value

    def replace_if(self, key: Any, old_value: Any, new_value: Any) -> bool:
        found = self._visible_key(key)
        if found is None or not equivalent(self.value_comparator, found.value, old_value):
            return False
        self._check_value(new_value)
        self._engine.put(self._forward, self._backward, key, new_value)
        return True

    def put_if_absent(self, key: Any, value: Any) -> Any:
        self._check_key(key)
        self._check_value(value)
        current = self._lookup_for_update(key)
        if current is not None:
            return current.value
        self._engine.put(self._forward, self._backward, key, value)
        return None

    def _call_guarded(self, function: Callable, *args: Any) -> Any:
        if not callable(function):
            raise TypeError(f"expected a callable, got {function!r}")
        expected = self._engine.mod_count
        result = function(*args)
        if self._engine.mod_count != expected:
            raise ConcurrentStructuralChange("mapping function modified the map")
        return result

    def _apply(self, key: Any, current: Optional[Found], new_value: Any) -> Any:
        if new_value is None:
            if current is not None:
                self._engine.remove_entry(self._forward, self._backward, key, current.value)
            return None
        self._check_value(new_value)
        self._engine.put(self._forward, self._backward, key, new_value)
        return new_value

    def compute(self, key: Any, function: Callable[[Any, Any], Any]) -> Any:
        """Store ``function(key, current)``; ``current`` is None when absent, a None result removes."""
        self._check_key(key)
        current = self._lookup_for_update(key)
        new_value = self._call_guarded(function, key, _value_of(current))
        return self._apply(key, current, new_value)

    def compute_if_present(self, key: Any, function: Callable[[Any, Any], Any]) -> Any:
        self._check_key(key)
        current = self._visible_key(key)
        if current is None:
            return None
        new_value = self._call_guarded(function, key, current.value)
        return self._apply(key, current, new_value)

    def compute_if_absent(self, key: Any, function: Callable[[Any], Any]) -> Any:
        self._check_key(key)
        current = self._lookup_for_update(key)
        if current is not None:
            return current.value
        new_value = self._call_guarded(function, key)
        return self._apply(key, None, new_value)

    def merge(self, key: Any, value: Any, function: Callable[[Any, Any], Any]) -> Any:
        """Store ``value`` if absent, else ``function(current, value)``; a None result removes."""
        self._check_key(key)
        current = self._lookup_for_update(key)
        if current is None:
            return self._apply(key, None, value)
        new_value = self._call_guarded(function, current.value, value)
        return self._apply(key, current, new_value)

    def replace_all(self, function: Callable[[Any, Any], Any]) -> None:
        """Replace every visible value with ``function(key, value)``.

        Values are swapped in place without evicting anybody, so a new value
        that another key still holds raises ``ValueConflict``.
        The whole pass counts as one modification.
        """
        changed = False
        try:
            for key, value in list(self.items()):
                new_value = self._call_guarded(function, key, value)
                self._check_value(new_value)
                if self._engine.update_during_iteration(
                    self._forward, self._backward, key, value, new_value, bump=False
                ):
                    changed = True
        finally:
            if changed:
                self._engine.modified()

    def remove_if(self, predicate: Callable[[Any, Any], bool]) -> int:
        doomed = [(key, value) for key, value in self.items() if predicate(key, value)]
        for key, value in doomed:
            self._engine.remove_entry(self._forward, self._backward, key, value)
        return len(doomed)

    def clear(self) -> None:
        if not self.is_restricted:
            self._engine.clear()
            return
        for key, value in list(self.items()):
            self._engine.remove_entry(self._forward, self._backward, key, value)

    def _poll(self, entry: Optional[Entry]) -> Optional[Entry]:
        if entry is not None:
            self._engine.remove_entry(self._forward, self._backward, entry[0], entry[1])
        return entry

    def poll_first(self) -> Optional[Entry]:
        return self._poll(self._first())

    def poll_last(self) -> Optional[Entry]:
        return self._poll(self._last())

    def copy(self) -> "BidiSortedMap":
        """Independent root map holding the entries visible through this view."""
        return BidiSortedMap(
            list(self.items()), self.key_comparator, self.value_comparator, self._forward.order
        )

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def keys(self) -> KeySet:
        return KeySet(self)

    def items(self) -> EntrySet:
        return EntrySet(self)

    def values(self) -> ValuesView:
        return ValuesView(self)

    def value_set(self) -> KeySet:
        """Navigable set of the visible values, in value order."""
        return self.inverse().keys()

    def inverse(self) -> "BidiSortedMap":
        if self._inverse is None:
            inverse = self._derive(
                self._backward, self._forward, self._value_range, self._key_range, self._descending
            )
            inverse._inverse = self
            self._inverse = inverse
        return self._inverse

    def descending(self) -> "BidiSortedMap":
        if self._reversed is None:
            reversed_view = self._derive(
                self._forward, self._backward, self._key_range, self._value_range, not self._descending
            )
            reversed_view._reversed = self
            self._reversed = reversed_view
        return self._reversed

    def map_cursor(self) -> MapCursor:
        return MapCursor(self)

    def descending_map_cursor(self) -> MapCursor:
        return MapCursor(self.descending())

    def restrict(self, key_range: Optional[Range] = None, value_range: Optional[Range] = None) -> "BidiSortedMap":
        """Window onto the entries whose key and value fall in the given ranges.

        Each requested range must lie inside the current restriction on that
        axis, otherwise ``RangeViolation`` is raised.
        """
        new_key_range = self._key_range if key_range is None else self._key_range.narrow(key_range)
        new_value_range = self._value_range if value_range is None else self._value_range.narrow(value_range)
        return self._derive(self._forward, self._backward, new_key_range, new_value_range, self._descending)

    def _oriented(
        self,
        comparator: Comparator,
        from_bound: Any,
        from_inclusive: bool,
        has_from: bool,
        to_bound: Any,
        to_inclusive: bool,
        has_to: bool,
    ) -> Range:
        # Bounds arrive in view order; ranges are stored in ascending order.
        if self._descending:
            return Range(comparator, to_bound, to_inclusive, has_to, from_bound, from_inclusive, has_from)
        return Range(comparator, from_bound, from_inclusive, has_from, to_bound, to_inclusive, has_to)

    def sub_map(self, from_key: Any, to_key: Any, from_inclusive: bool = True, to_inclusive: bool = False) -> "BidiSortedMap":
        bounds = self._oriented(self.key_comparator, from_key, from_inclusive, True, to_key, to_inclusive, True)
        return self.restrict(key_range=bounds)

    def head_map(self, to_key: Any, inclusive: bool = False) -> "BidiSortedMap":
        bounds = self._oriented(self.key_comparator, None, True, False, to_key, inclusive, True)
        return self.restrict(key_range=bounds)

    def tail_map(self, from_key: Any, inclusive: bool = True) -> "BidiSortedMap":
        bounds = self._oriented(self.key_comparator, from_key, inclusive, True, None, False, False)
        return self.restrict(key_range=bounds)

    def value_sub_map(
        self, from_value: Any, to_value: Any, from_inclusive: bool = True, to_inclusive: bool = False
    ) -> "BidiSortedMap":
        return self.inverse().sub_map(from_value, to_value, from_inclusive, to_inclusive).inverse()

    def value_head_map(self, to_value: Any, inclusive: bool = False) -> "BidiSortedMap":
        return self.inverse().head_map(to_value, inclusive).inverse()

    def value_tail_map(self, from_value: Any, inclusive: bool = True) -> "BidiSortedMap":
        return self.inverse().tail_map(from_value, inclusive).inverse()


def _key_of(entry: Optional[Entry]) -> Any:
    return None if entry is None else entry[0]


def _value_of(found: Optional[Found]) -> Any:
    return None if found is None else found.value

