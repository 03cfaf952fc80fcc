import logging

from config import Config
from bidimap.bplus import BPlusTree
from bidimap.capabilities import Invertible, OrderedContainer, RangeRestrictable
from bidimap.errors import (
    BidiMapError,
    ConcurrentStructuralChange,
    IllegalCursorState,
    InvariantViolation,
    NoSuchElement,
    RangeViolation,
    ValueConflict,
)
from bidimap.iterators import EntryIterator, KeyIterator, MapCursor, ValueIterator
from bidimap.ordering import Found, natural_order, reverse_order
from bidimap.ranges import Range
from bidimap.sets import EntrySet, KeySet, ValuesView
from bidimap.sortedmap import BidiSortedMap

logging.getLogger(Config.logger_name).addHandler(logging.NullHandler())

__all__ = [
    "BidiSortedMap",
    "BPlusTree",
    "Range",
    "MapCursor",
    "KeyIterator",
    "ValueIterator",
    "EntryIterator",
    "KeySet",
    "EntrySet",
    "ValuesView",
    "Found",
    "natural_order",
    "reverse_order",
    "OrderedContainer",
    "RangeRestrictable",
    "Invertible",
    "BidiMapError",
    "InvariantViolation",
    "RangeViolation",
    "ValueConflict",
    "ConcurrentStructuralChange",
    "IllegalCursorState",
    "NoSuchElement",
]
