"""Fail-fast iterators and the bidirectional map cursor.

Every iterator and cursor remembers the engine's modification counter when
it is created. Any later step that finds the counter changed raises
``ConcurrentStructuralChange``, unless the change was made through the
iterator itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Tuple

from bidimap.errors import ConcurrentStructuralChange, IllegalCursorState, NoSuchElement

if TYPE_CHECKING:
    from bidimap.sortedmap import BidiSortedMap

Entry = Tuple[Any, Any]

_UNRESOLVED = object()


class _ViewIterator:
    """Walks a view in its own order, one entry at a time."""

    def __init__(self, view: "BidiSortedMap") -> None:
        self._view = view
        self._engine = view._engine
        self._expected = self._engine.mod_count
        self._started = False
        self._last: Optional[Entry] = None
        self._removable = False

    def _check(self) -> None:
        if self._engine.mod_count != self._expected:
            raise ConcurrentStructuralChange("map was modified during iteration")

    def _step(self) -> Entry:
        self._check()
        if not self._started:
            entry = self._view._first()
        elif self._last is None:
            entry = None
        else:
            entry = self._view._next(self._last[0])
        self._started = True
        if entry is None:
            self._last = None
            self._removable = False
            raise StopIteration
        self._last = entry
        self._removable = True
        return entry

    def __iter__(self):
        return self

    def __next__(self):
        return self._project(self._step())

    def _project(self, entry: Entry) -> Any:
        return entry

    def remove(self) -> None:
        """Remove the entry most recently returned by ``next()``."""
        self._check()
        if not self._removable:
            raise IllegalCursorState("remove() needs a preceding next()")
        key, value = self._last
        self._engine.remove_entry(self._view._forward, self._view._backward, key, value)
        self._expected = self._engine.mod_count
        self._removable = False


class KeyIterator(_ViewIterator):
    def _project(self, entry: Entry) -> Any:
        return entry[0]


class ValueIterator(_ViewIterator):
    def _project(self, entry: Entry) -> Any:
        return entry[1]


class EntryIterator(_ViewIterator):
    pass


class MapCursor:
    """Bidirectional cursor over a view.

    A fresh cursor sits before the first entry. ``advance`` moves onto the
    next entry in view order and ``retreat`` onto the previous one. The
    neighbours on either side are looked up lazily and remembered until the
    cursor moves, so going back and forth does not search the tree again.
    """

    def __init__(self, view: "BidiSortedMap") -> None:
        self._view = view
        self._engine = view._engine
        self.reset()

    def reset(self) -> None:
        """Move back before the first entry and accept changes made so far."""
        self._expected = self._engine.mod_count
        self._anchor: Any = _UNRESOLVED
        self._current: Optional[Entry] = None
        self._can_modify = False
        self._ahead: Any = _UNRESOLVED
        self._behind: Any = None

    def _check(self) -> None:
        if self._engine.mod_count != self._expected:
            raise ConcurrentStructuralChange("map was modified outside this cursor")

    def _resolve_ahead(self) -> Optional[Entry]:
        if self._ahead is _UNRESOLVED:
            if self._anchor is _UNRESOLVED:
                self._ahead = self._view._first()
            else:
                self._ahead = self._view._next(self._anchor)
        return self._ahead

    def _resolve_behind(self) -> Optional[Entry]:
        if self._behind is _UNRESOLVED:
            self._behind = self._view._previous(self._anchor)
        return self._behind

    def has_next(self) -> bool:
        self._check()
        return self._resolve_ahead() is not None

    def has_previous(self) -> bool:
        self._check()
        return self._anchor is not _UNRESOLVED and self._resolve_behind() is not None

    def advance(self) -> Any:
        """Step onto the next entry and return its key."""
        self._check()
        entry = self._resolve_ahead()
        if entry is None:
            raise NoSuchElement("no entry after the cursor")
        self._behind = self._current if self._current is not None else _UNRESOLVED
        self._ahead = _UNRESOLVED
        self._settle(entry)
        return entry[0]

    def retreat(self) -> Any:
        """Step onto the previous entry and return its key."""
        self._check()
        entry = None if self._anchor is _UNRESOLVED else self._resolve_behind()
        if entry is None:
            raise NoSuchElement("no entry before the cursor")
        self._ahead = self._current if self._current is not None else _UNRESOLVED
        self._behind = _UNRESOLVED
        self._settle(entry)
        return entry[0]

    def _settle(self, entry: Entry) -> None:
        self._anchor = entry[0]
        self._current = entry
        self._can_modify = True

    def _require_current(self) -> Entry:
        self._check()
        if self._current is None:
            raise IllegalCursorState("cursor is not on an entry")
        return self._current

    def current_key(self) -> Any:
        return self._require_current()[0]

    def current_value(self) -> Any:
        return self._require_current()[1]

    def set_value(self, value: Any) -> Any:
        """Replace the current entry's value; returns the previous value.

        The value may not belong to another key: unlike ``put`` the cursor
        never evicts, since that could remove an entry it has cached.
        Allowed any number of times after a move, even once ``has_next``,
        ``has_previous`` or ``current_key`` have been called.
        """
        key, old_value = self._require_current()
        if not self._can_modify:
            raise IllegalCursorState("set_value() needs a preceding advance() or retreat()")
        view = self._view
        view._check_value(value)
        self._engine.update_during_iteration(view._forward, view._backward, key, old_value, value)
        self._expected = self._engine.mod_count
        self._current = (key, value)
        return old_value

    def remove(self) -> None:
        """Remove the current entry. The cursor stays between its neighbours.

        Allowed once per move; queries made since the move do not revoke it.
        """
        self._check()
        if not self._can_modify or self._current is None:
            raise IllegalCursorState("remove() needs a preceding advance() or retreat()")
        key, value = self._current
        self._engine.remove_entry(self._view._forward, self._view._backward, key, value)
        self._expected = self._engine.mod_count
        self._current = None
        self._can_modify = False

    def __iter__(self):
        return self

    def __next__(self) -> Any:
        try:
            return self.advance()
        except NoSuchElement:
            raise StopIteration from None
