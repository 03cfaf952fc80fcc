import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bidimap import BidiSortedMap, Range
from bidimap.errors import (
    ConcurrentStructuralChange,
    IllegalCursorState,
    NoSuchElement,
    RangeViolation,
    ValueConflict,
)


def _letters() -> BidiSortedMap:
    return BidiSortedMap({key: chr(ord("a") + key) for key in range(6)}, order=3)


def test_iterator_fails_fast_on_outside_change():
    bidi = _letters()
    keys = iter(bidi)

    assert next(keys) == 0
    bidi[10] = "z"
    print("Iterator should notice the put made behind its back")
    with pytest.raises(ConcurrentStructuralChange):
        next(keys)


def test_change_through_other_view_is_detected():
    bidi = _letters()
    values = iter(bidi.values())
    next(values)

    bidi.inverse()["q"] = 99
    with pytest.raises(ConcurrentStructuralChange):
        next(values)


def test_iterator_own_remove_is_allowed():
    bidi = _letters()
    entries = iter(bidi.items())

    seen = []
    for key, value in entries:
        seen.append(key)
        if key % 2 == 0:
            entries.remove()

    assert seen == [0, 1, 2, 3, 4, 5]
    assert list(bidi) == [1, 3, 5]
    assert not bidi.contains_value("a")


def test_iterator_remove_needs_next():
    bidi = _letters()
    keys = iter(bidi)

    with pytest.raises(IllegalCursorState):
        keys.remove()
    next(keys)
    keys.remove()
    with pytest.raises(IllegalCursorState):
        keys.remove()


def test_noop_put_does_not_invalidate():
    bidi = _letters()
    keys = iter(bidi)
    next(keys)

    bidi[3] = "d"
    assert next(keys) == 1


def test_cursor_reversal():
    bidi = _letters()
    cursor = bidi.map_cursor()

    print("Advancing three times then retreating twice")
    first = cursor.advance()
    cursor.advance()
    cursor.advance()
    cursor.retreat()
    assert cursor.retreat() == first
    assert cursor.current_key() == 0
    assert cursor.current_value() == "a"


def test_cursor_ends():
    bidi = BidiSortedMap({1: "a", 2: "b"})
    cursor = bidi.map_cursor()

    assert not cursor.has_previous()
    with pytest.raises(NoSuchElement):
        cursor.retreat()
    assert cursor.has_next()
    cursor.advance()
    cursor.advance()
    assert not cursor.has_next()
    with pytest.raises(NoSuchElement):
        cursor.advance()
    assert cursor.current_key() == 2
    assert cursor.has_previous()


def test_cursor_on_empty_map():
    cursor = BidiSortedMap().map_cursor()

    assert not cursor.has_next()
    with pytest.raises(IllegalCursorState):
        cursor.current_key()
    with pytest.raises(IllegalCursorState):
        cursor.remove()
    assert list(cursor) == []


def test_cursor_set_value():
    bidi = _letters()
    cursor = bidi.map_cursor()

    with pytest.raises(IllegalCursorState):
        cursor.set_value("q")
    cursor.advance()
    assert cursor.set_value("q") == "a"
    assert cursor.set_value("r") == "q"
    assert bidi[0] == "r"
    assert bidi.get_key("r") == 0

    print("Setting a value owned by another key should conflict")
    with pytest.raises(ValueConflict):
        cursor.set_value("b")
    assert bidi[1] == "b"
    assert cursor.advance() == 1


def test_cursor_queries_keep_modify_permission():
    bidi = _letters()
    cursor = bidi.map_cursor()
    cursor.advance()

    assert cursor.has_next()
    assert not cursor.has_previous()
    assert cursor.current_key() == 0
    assert cursor.set_value("q") == "a"
    assert cursor.current_value() == "q"
    cursor.remove()
    assert 0 not in bidi
    with pytest.raises(IllegalCursorState):
        cursor.set_value("r")


def test_cursor_remove_keeps_position():
    bidi = _letters()
    cursor = bidi.map_cursor()
    cursor.advance()
    cursor.advance()

    cursor.remove()
    assert 1 not in bidi
    with pytest.raises(IllegalCursorState):
        cursor.remove()
    with pytest.raises(IllegalCursorState):
        cursor.current_key()

    assert cursor.advance() == 2
    assert cursor.retreat() == 0


def test_cursor_remove_after_retreat():
    bidi = _letters()
    cursor = bidi.map_cursor()
    for _ in range(4):
        cursor.advance()
    cursor.retreat()
    cursor.remove()

    assert list(bidi) == [0, 1, 3, 4, 5]
    assert cursor.retreat() == 1
    assert cursor.advance() == 3


def test_cursor_fails_fast_and_reset_recovers():
    bidi = _letters()
    cursor = bidi.map_cursor()
    cursor.advance()

    bidi.pop(4)
    with pytest.raises(ConcurrentStructuralChange):
        cursor.advance()

    cursor.reset()
    assert list(cursor) == [0, 1, 2, 3, 5]


def test_descending_cursor():
    bidi = _letters()
    cursor = bidi.descending_map_cursor()

    assert cursor.advance() == 5
    assert cursor.advance() == 4
    assert cursor.retreat() == 5


def test_cursor_over_dual_restricted_view():
    bidi = BidiSortedMap({1: 50, 2: 150, 3: 25, 4: 75, 5: 500})
    view = bidi.restrict(Range.between(1, 5), Range.below(100))
    cursor = view.map_cursor()

    assert list(cursor) == [1, 3, 4]
    assert cursor.retreat() == 3

    with pytest.raises(RangeViolation):
        cursor.set_value(200)
    cursor.set_value(30)
    assert bidi[3] == 30


if __name__ == "__main__":
    test_iterator_fails_fast_on_outside_change()
    test_change_through_other_view_is_detected()
    test_iterator_own_remove_is_allowed()
    test_iterator_remove_needs_next()
    test_noop_put_does_not_invalidate()
    test_cursor_reversal()
    test_cursor_ends()
    test_cursor_on_empty_map()
    test_cursor_set_value()
    test_cursor_queries_keep_modify_permission()
    test_cursor_remove_keeps_position()
    test_cursor_remove_after_retreat()
    test_cursor_fails_fast_and_reset_recovers()
    test_descending_cursor()
    test_cursor_over_dual_restricted_view()
