"""Traversal helpers for range-restricted views.

A view restricted on both keys and values cannot ask a single tree for "the
next qualifying entry": the key tree knows nothing about the value range.
``scan_first_match`` therefore walks the key tree one entry at a time and
confirms each value against the value range. That is correct but O(n) per
call in the worst case (few key-ordered entries pass the value filter); it
is the accepted cost of keeping two independent trees. When the value range
is unbounded the first candidate always matches, so the scan costs a single
tree lookup.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Optional, Tuple

from config import Config
from bidimap.bplus import BPlusTree
from bidimap.ranges import Range

logger = logging.getLogger(__name__)

Entry = Tuple[Any, Any]


def scan_first_match(
    entry: Optional[Entry],
    next_entry: Callable[[Any], Optional[Entry]],
    in_bounds: Callable[[Any], bool],
    confirm: Callable[[Any], bool],
) -> Optional[Entry]:
    """Return the first entry from ``entry`` onwards whose value passes ``confirm``.

    ``next_entry`` steps one entry along the key tree, ``in_bounds`` stops the
    scan as soon as a key leaves the key range.
    """
    steps = 0
    while entry is not None and in_bounds(entry[0]):
        if confirm(entry[1]):
            return entry
        entry = next_entry(entry[0])
        steps += 1
        if steps == Config.scan_warning_steps:
            logger.debug("guarded scan passed %d entries without a value-range match", steps)
    return None


def walk_range(tree: BPlusTree, bounds: Range, reverse: bool = False) -> Iterator[Entry]:
    """Yield the entries of ``tree`` whose keys fall inside ``bounds``."""
    if reverse:
        if not bounds.has_high:
            entry = tree.last()
        elif bounds.high_inclusive:
            entry = tree.floor(bounds.high)
        else:
            entry = tree.lower(bounds.high)
        while entry is not None and not bounds.too_low(entry[0]):
            yield entry
            entry = tree.lower(entry[0])
        return

    if not bounds.has_low:
        entry = tree.first()
    elif bounds.low_inclusive:
        entry = tree.ceiling(bounds.low)
    else:
        entry = tree.higher(bounds.low)
    while entry is not None and not bounds.too_high(entry[0]):
        yield entry
        entry = tree.higher(entry[0])


def count_matches(entries: Iterator[Entry], confirm: Callable[[Any], bool]) -> int:
    """Linear count used by ``len()`` on a view restricted on both axes."""
    return sum(1 for _, value in entries if confirm(value))
