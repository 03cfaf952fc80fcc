import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bidimap.errors import RangeViolation
from bidimap.ordering import reverse_order
from bidimap.ranges import Range


def test_full_range_contains_everything():
    everything = Range.full()

    assert everything.is_full
    assert 0 in everything
    assert -10**9 in everything
    assert repr(everything) == "Range(full)"


def test_half_open_bounds():
    window = Range.between(10, 20)

    assert window.contains(10)
    assert window.contains(19)
    assert not window.contains(20)
    assert not window.contains(9)
    assert window.too_low(9)
    assert window.too_high(20)
    assert repr(window) == "Range([10, 20))"


def test_exclusive_and_inclusive_flags():
    window = Range.between(10, 20, low_inclusive=False, high_inclusive=True)

    assert not window.contains(10)
    assert window.contains(20)
    assert repr(window) == "Range((10, 20])"


def test_one_sided_ranges():
    assert Range.at_least(5).contains(10**6)
    assert not Range.at_least(5, inclusive=False).contains(5)
    assert Range.below(5).contains(-10**6)
    assert not Range.below(5).contains(5)
    assert Range.below(5, inclusive=True).contains(5)


def test_inverted_bounds_are_rejected():
    with pytest.raises(ValueError):
        Range.between(20, 10)


def test_empty_range_is_allowed():
    window = Range.between(7, 7)

    assert not window.contains(7)


def test_range_follows_comparator():
    window = Range.between(20, 10, comparator=reverse_order())

    assert window.contains(15)
    assert window.contains(20)
    assert not window.contains(10)
    assert not window.contains(25)


def test_encloses():
    outer = Range.between(10, 20)

    assert outer.encloses(Range.between(12, 18))
    assert outer.encloses(Range.between(10, 20))
    assert not outer.encloses(Range.between(10, 20, high_inclusive=True))
    assert not outer.encloses(Range.at_least(12))
    assert Range.full().encloses(outer)


def test_narrow_inherits_missing_bounds():
    outer = Range.between(10, 20)

    narrowed = outer.narrow(Range.at_least(15))
    assert narrowed == Range.between(15, 20)


def test_narrow_outside_raises_range_violation():
    outer = Range.between(10, 20)

    print("Narrowing [10, 20) to [5, 15) should fail")
    with pytest.raises(RangeViolation):
        outer.narrow(Range.between(5, 15))
    with pytest.raises(RangeViolation):
        outer.narrow(Range.at_least(30))
    with pytest.raises(RangeViolation):
        outer.narrow(Range.between(10, 20, high_inclusive=True))


if __name__ == "__main__":
    test_full_range_contains_everything()
    test_half_open_bounds()
    test_exclusive_and_inclusive_flags()
    test_one_sided_ranges()
    test_inverted_bounds_are_rejected()
    test_empty_range_is_allowed()
    test_range_follows_comparator()
    test_encloses()
    test_narrow_inherits_missing_bounds()
    test_narrow_outside_raises_range_violation()
