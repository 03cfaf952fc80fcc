import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bidimap import BidiSortedMap
from bidimap.errors import NoSuchElement


def _sample() -> BidiSortedMap:
    return BidiSortedMap({10: "j", 20: "t", 30: "d", 40: "f"})


def test_key_set_navigation():
    keys = _sample().keys()

    assert list(keys) == [10, 20, 30, 40]
    assert list(reversed(keys)) == [40, 30, 20, 10]
    assert keys.first() == 10
    assert keys.last() == 40
    assert keys.lower(20) == 10
    assert keys.floor(25) == 20
    assert keys.ceiling(25) == 30
    assert keys.higher(40) is None
    assert 30 in keys
    assert 35 not in keys
    assert keys == {10, 20, 30, 40}


def test_key_set_sub_sets():
    keys = _sample().keys()

    assert list(keys.sub_set(20, 40)) == [20, 30]
    assert list(keys.head_set(30, inclusive=True)) == [10, 20, 30]
    assert list(keys.tail_set(30)) == [30, 40]
    assert list(keys.descending_set()) == [40, 30, 20, 10]


def test_key_set_removal_writes_through():
    bidi = _sample()
    keys = bidi.keys()

    keys.discard(20)
    keys.discard(99)
    with pytest.raises(KeyError):
        keys.remove(99)
    assert keys.poll_first() == 10
    assert keys.poll_last() == 40
    assert dict(bidi) == {30: "d"}
    keys.clear()
    assert len(bidi) == 0
    assert keys.poll_first() is None
    with pytest.raises(NoSuchElement):
        keys.first()


def test_key_set_set_algebra():
    keys = _sample().keys()

    assert keys & {20, 50} == {20}
    assert keys | {50} == {10, 20, 30, 40, 50}


def test_entry_set_membership_and_navigation():
    entries = _sample().items()

    assert (20, "t") in entries
    assert (20, "x") not in entries
    assert "bogus" not in entries
    assert entries.first() == (10, "j")
    assert entries.last() == (40, "f")
    assert entries.higher((20, "t")) == (30, "d")
    assert entries.floor((25, None)) == (20, "t")
    assert list(entries.descending_set())[0] == (40, "f")


def test_entry_set_removal():
    bidi = _sample()
    entries = bidi.items()

    entries.discard((20, "wrong"))
    assert 20 in bidi
    entries.discard((20, "t"))
    assert 20 not in bidi
    with pytest.raises(KeyError):
        entries.remove((20, "t"))
    assert entries.poll_last() == (40, "f")
    assert len(entries) == 2


def test_values_view():
    bidi = _sample()
    values = bidi.values()

    assert list(values) == ["j", "t", "d", "f"]
    assert list(reversed(values)) == ["f", "d", "t", "j"]
    assert "d" in values
    assert "z" not in values
    assert len(values) == 4

    values.discard("t")
    with pytest.raises(KeyError):
        values.remove("t")
    values.remove("d")
    assert dict(bidi) == {10: "j", 40: "f"}


def test_value_set_navigation():
    bidi = _sample()
    value_set = bidi.value_set()

    assert list(value_set) == ["d", "f", "j", "t"]
    assert value_set.first() == "d"
    assert value_set.higher("f") == "j"
    assert list(value_set.head_set("j")) == ["d", "f"]

    value_set.discard("j")
    assert 10 not in bidi


def test_sets_follow_sub_view():
    bidi = _sample()
    window = bidi.sub_map(15, 35)

    assert list(window.keys()) == [20, 30]
    assert list(window.values()) == ["t", "d"]
    assert "j" not in window.values()
    assert (10, "j") not in window.items()


if __name__ == "__main__":
    test_key_set_navigation()
    test_key_set_sub_sets()
    test_key_set_removal_writes_through()
    test_key_set_set_algebra()
    test_entry_set_membership_and_navigation()
    test_entry_set_removal()
    test_values_view()
    test_value_set_navigation()
    test_sets_follow_sub_view()
