"""Dual index engine: one bijective relation stored as two B+ trees.

Every write to either tree goes through the three checked primitives below.
Mutators look up all the state they depend on before the first write, so a
rejected operation leaves both trees untouched; a checked primitive that
still fails means the trees were already inconsistent and is fatal.

Mutators take the pair of trees explicitly (``forward`` maps the caller's
keys to its values, ``backward`` the reverse), which lets an inverse view
drive the same code with the trees swapped.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Tuple

from bidimap.bplus import BPlusTree
from bidimap.errors import InvariantViolation, ValueConflict
from bidimap.ordering import Comparator, Found, equivalent

logger = logging.getLogger(__name__)


class DualIndexEngine:
    """Owns the key index, the value index and the modification counter."""

    def __init__(
        self,
        key_comparator: Optional[Comparator] = None,
        value_comparator: Optional[Comparator] = None,
        order: Optional[int] = None,
    ) -> None:
        self.key_index = BPlusTree(key_comparator, order)
        self.value_index = BPlusTree(value_comparator, order)
        self._mod_count = 0

    def __len__(self) -> int:
        return len(self.key_index)

    @property
    def mod_count(self) -> int:
        return self._mod_count

    def modified(self) -> None:
        self._mod_count += 1

    def partner(self, index: BPlusTree) -> BPlusTree:
        return self.value_index if index is self.key_index else self.key_index

    # ------------------------------------------------------------------
    # Checked primitives
    # ------------------------------------------------------------------
    def add_checked(self, index: BPlusTree, key: Any, value: Any) -> None:
        if not index.insert(key, value):
            self._violation("add", key, "key is already mapped")

    def replace_checked(self, index: BPlusTree, key: Any, old_value: Any, new_value: Any) -> None:
        found = index.lookup(key)
        if found is None:
            self._violation("replace", key, "key is not mapped")
        if not equivalent(self.partner(index).comparator, found.value, old_value):
            self._violation("replace", key, f"expected {old_value!r}, found {found.value!r}")
        index.replace(key, new_value)

    def remove_checked(self, index: BPlusTree, key: Any, expected_value: Any) -> None:
        found = index.lookup(key)
        if found is None:
            self._violation("remove", key, "key is not mapped")
        if not equivalent(self.partner(index).comparator, found.value, expected_value):
            self._violation("remove", key, f"expected {expected_value!r}, found {found.value!r}")
        index.remove(key)

    def _violation(self, primitive: str, key: Any, reason: str) -> None:
        logger.error("%s_checked failed for key %r: %s", primitive, key, reason)
        raise InvariantViolation(f"{primitive}_checked({key!r}): {reason}")

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------
    def put(self, forward: BPlusTree, backward: BPlusTree, key: Any, value: Any) -> Optional[Found]:
        """Map ``key`` to ``value``, detaching any other key that held ``value``.

        Returns the previous mapping of ``key`` or ``None`` if it was absent.
        """
        current = forward.lookup(key)
        if current is not None and equivalent(backward.comparator, current.value, value):
            return current
        holder = backward.lookup(value)

        if current is None:
            self.add_checked(forward, key, value)
        else:
            self.replace_checked(forward, key, current.value, value)
            self.remove_checked(backward, current.value, key)

        if holder is None:
            self.add_checked(backward, value, key)
        else:
            self.replace_checked(backward, value, holder.value, key)
            self.remove_checked(forward, holder.value, value)

        self.modified()
        return current

    def remove_key(self, forward: BPlusTree, backward: BPlusTree, key: Any) -> Optional[Found]:
        found = forward.lookup(key)
        if found is None:
            return None
        self.remove_checked(forward, key, found.value)
        self.remove_checked(backward, found.value, key)
        self.modified()
        return found

    def remove_entry(self, forward: BPlusTree, backward: BPlusTree, key: Any, value: Any) -> bool:
        found = forward.lookup(key)
        if found is None or not equivalent(backward.comparator, found.value, value):
            return False
        self.remove_checked(forward, key, found.value)
        self.remove_checked(backward, found.value, key)
        self.modified()
        return True

    def update_during_iteration(
        self,
        forward: BPlusTree,
        backward: BPlusTree,
        key: Any,
        old_value: Any,
        new_value: Any,
        bump: bool = True,
    ) -> bool:
        """Swap the value of an existing entry without evicting anybody.

        Used by cursors and ``replace_all`` where detaching another key would
        pull an entry out from under the traversal. Returns False when the
        values are equivalent and nothing changed.
        A caller batching several swaps into one logical mutation passes
        ``bump=False`` and calls ``modified()`` once itself.
        """
        if equivalent(backward.comparator, old_value, new_value):
            return False
        holder = backward.lookup(new_value)
        if holder is not None:
            raise ValueConflict(f"{new_value!r} is already mapped from {holder.value!r}")
        self.replace_checked(forward, key, old_value, new_value)
        self.remove_checked(backward, old_value, key)
        self.add_checked(backward, new_value, key)
        if bump:
            self.modified()
        return True

    def clear(self) -> None:
        logger.debug("clearing %d entries", len(self.key_index))
        self.key_index.clear()
        self.value_index.clear()
        self.modified()

    def load(self, pairs: Iterable[Tuple[Any, Any]]) -> None:
        """Bulk load key/value pairs, rejecting a value that two keys share."""
        key_comparator = self.key_index.comparator
        count = 0
        for key, value in pairs:
            holder = self.value_index.lookup(value)
            if holder is not None and not equivalent(key_comparator, holder.value, key):
                raise ValueConflict(f"{value!r} is mapped from both {holder.value!r} and {key!r}")
            self.put(self.key_index, self.value_index, key, value)
            count += 1
        logger.debug("bulk loaded %d entries", count)
