"""Error kinds raised by the map, its views and its iterators."""


class BidiMapError(Exception):
    """Base class for every error raised by the package."""


class InvariantViolation(BidiMapError, RuntimeError):
    """The key index and the value index disagree.

    Raised by the checked primitives when an index does not hold the state
    the engine was about to rely on. This is a bug or an illegitimate
    mutation of the indexes behind the map's back; it is never retried.
    """


class RangeViolation(BidiMapError, ValueError):
    """A key or value lies outside the restriction of a sub-view."""


class ValueConflict(BidiMapError, ValueError):
    """A value-only update collided with a value owned by another key."""


class ConcurrentStructuralChange(BidiMapError, RuntimeError):
    """An iterator or cursor noticed the map changed underneath it."""


class IllegalCursorState(BidiMapError, RuntimeError):
    """``remove``/``set_value`` called without a preceding successful move."""


class NoSuchElement(BidiMapError, LookupError):
    """Navigation ran past either end, or an empty view has no first/last."""
