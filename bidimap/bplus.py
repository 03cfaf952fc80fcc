"""Lightweight in-memory B+ tree used as the ordered index of the map.

Keys are unique and ordered by a comparator ``cmp(a, b) -> int``; each key
carries exactly one value. Leaves are doubly linked so that neighbour
queries and ordered iteration walk the leaf chain in either direction.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Any, Iterator, List, Optional, Tuple

from config import Config
from bidimap.ordering import Comparator, Found, natural_order, sort_key

Entry = Tuple[Any, Any]


class _Node:
    """Base class shared by internal and leaf nodes."""

    def __init__(self, order: int) -> None:
        self.order = order
        self.keys: List[Any] = []
        self.parent: Optional[_InternalNode] = None

    def is_leaf(self) -> bool:
        return False


class _LeafNode(_Node):
    """Leaf node storing keys and their values in parallel lists."""

    def __init__(self, order: int) -> None:
        super().__init__(order)
        self.values: List[Any] = []
        self.next: Optional[_LeafNode] = None
        self.prev: Optional[_LeafNode] = None

    def is_leaf(self) -> bool:
        return True


class _InternalNode(_Node):
    """Internal node storing separator keys and child pointers."""

    def __init__(self, order: int) -> None:
        super().__init__(order)
        self.children: List[_Node] = []


class BPlusTree:
    """B+ tree supporting point lookup, insert, replace, removal and neighbour queries."""

    def __init__(self, comparator: Optional[Comparator] = None, order: Optional[int] = None) -> None:
        if order is None:
            order = Config.btree_order
        if order < Config.min_btree_order:
            raise ValueError(f"order must be >= {Config.min_btree_order}")
        self.order = order
        self._compare = comparator or natural_order
        self._sort_key = sort_key(self._compare)
        self._root: _Node = _LeafNode(order)
        self._size = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: Any) -> bool:
        return self.lookup(key) is not None

    def __iter__(self) -> Iterator[Any]:
        for key, _ in self.items():
            yield key

    @property
    def comparator(self) -> Comparator:
        return self._compare

    def lookup(self, key: Any) -> Optional[Found]:
        leaf, idx = self._locate(key)
        if idx is None:
            return None
        return Found(leaf.values[idx])

    def get(self, key: Any, default: Any = None) -> Any:
        found = self.lookup(key)
        return default if found is None else found.value

    def insert(self, key: Any, value: Any) -> bool:
        """Insert a new key. Returns False, leaving the tree untouched, if the key exists."""
        leaf = self._find_leaf(key)
        idx = self._bisect_left(leaf.keys, key)

        if idx < len(leaf.keys) and self._compare(leaf.keys[idx], key) == 0:
            return False

        leaf.keys.insert(idx, key)
        leaf.values.insert(idx, value)
        self._size += 1

        if len(leaf.keys) > self._max_keys:
            self._split_leaf(leaf)
        return True

    def replace(self, key: Any, value: Any) -> Optional[Found]:
        """Overwrite the value of an existing key; absent keys are not inserted."""
        leaf, idx = self._locate(key)
        if idx is None:
            return None
        previous = Found(leaf.values[idx])
        leaf.values[idx] = value
        return previous

    def remove(self, key: Any) -> Optional[Found]:
        leaf, idx = self._locate(key)
        if idx is None:
            return None

        leaf.keys.pop(idx)
        removed = Found(leaf.values.pop(idx))
        self._size -= 1
        self._rebalance_after_delete(leaf)
        return removed

    def clear(self) -> None:
        self._root = _LeafNode(self.order)
        self._size = 0

    def first(self) -> Optional[Entry]:
        return self._entry_at_or_after(self._leftmost_leaf(), 0)

    def last(self) -> Optional[Entry]:
        leaf = self._rightmost_leaf()
        return self._entry_at_or_before(leaf, len(leaf.keys) - 1)

    def lower(self, key: Any) -> Optional[Entry]:
        leaf = self._find_leaf(key)
        return self._entry_at_or_before(leaf, self._bisect_left(leaf.keys, key) - 1)

    def floor(self, key: Any) -> Optional[Entry]:
        leaf = self._find_leaf(key)
        return self._entry_at_or_before(leaf, self._bisect_right(leaf.keys, key) - 1)

    def ceiling(self, key: Any) -> Optional[Entry]:
        leaf = self._find_leaf(key)
        return self._entry_at_or_after(leaf, self._bisect_left(leaf.keys, key))

    def higher(self, key: Any) -> Optional[Entry]:
        leaf = self._find_leaf(key)
        return self._entry_at_or_after(leaf, self._bisect_right(leaf.keys, key))

    def items(self, reverse: bool = False) -> Iterator[Entry]:
        if reverse:
            node: Optional[_LeafNode] = self._rightmost_leaf()
            while node is not None:
                for idx in range(len(node.keys) - 1, -1, -1):
                    yield node.keys[idx], node.values[idx]
                node = node.prev
            return
        node = self._leftmost_leaf()
        while node is not None:
            yield from zip(node.keys, node.values)
            node = node.next

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @property
    def _max_keys(self) -> int:
        return self.order - 1

    @property
    def _min_leaf_keys(self) -> int:
        return (self._max_keys + 1) // 2

    @property
    def _min_internal_keys(self) -> int:
        return ((self.order + 1) // 2) - 1

    def _bisect_left(self, keys: List[Any], key: Any) -> int:
        return bisect_left(keys, self._sort_key(key), key=self._sort_key)

    def _bisect_right(self, keys: List[Any], key: Any) -> int:
        return bisect_right(keys, self._sort_key(key), key=self._sort_key)

    def _locate(self, key: Any) -> Tuple[_LeafNode, Optional[int]]:
        leaf = self._find_leaf(key)
        idx = self._bisect_left(leaf.keys, key)
        if idx < len(leaf.keys) and self._compare(leaf.keys[idx], key) == 0:
            return leaf, idx
        return leaf, None

    def _entry_at_or_after(self, leaf: Optional[_LeafNode], idx: int) -> Optional[Entry]:
        while leaf is not None:
            if idx < len(leaf.keys):
                return leaf.keys[idx], leaf.values[idx]
            leaf = leaf.next
            idx = 0
        return None

    def _entry_at_or_before(self, leaf: Optional[_LeafNode], idx: int) -> Optional[Entry]:
        while leaf is not None:
            if idx >= 0:
                return leaf.keys[idx], leaf.values[idx]
            leaf = leaf.prev
            if leaf is not None:
                idx = len(leaf.keys) - 1
        return None

    def _leftmost_leaf(self) -> _LeafNode:
        node = self._root
        while not node.is_leaf():
            node = node.children[0]  # type: ignore[attr-defined]
        return node  # type: ignore[return-value]

    def _rightmost_leaf(self) -> _LeafNode:
        node = self._root
        while not node.is_leaf():
            node = node.children[-1]  # type: ignore[attr-defined]
        return node  # type: ignore[return-value]

    def _find_leaf(self, key: Any) -> _LeafNode:
        node = self._root
        while not node.is_leaf():
            internal = node  # type: ignore[assignment]
            child_index = self._bisect_right(internal.keys, key)
            node = internal.children[child_index]
        return node  # type: ignore[return-value]

    def _split_leaf(self, leaf: _LeafNode) -> None:
        mid = len(leaf.keys) // 2
        sibling = _LeafNode(self.order)
        sibling.keys = leaf.keys[mid:]
        sibling.values = leaf.values[mid:]
        leaf.keys = leaf.keys[:mid]
        leaf.values = leaf.values[:mid]

        sibling.next = leaf.next
        if sibling.next is not None:
            sibling.next.prev = sibling
        leaf.next = sibling
        sibling.prev = leaf
        sibling.parent = leaf.parent

        self._insert_into_parent(leaf, sibling.keys[0], sibling)

    def _split_internal(self, node: _InternalNode) -> None:
        mid_index = len(node.keys) // 2
        promote_key = node.keys[mid_index]

        sibling = _InternalNode(self.order)
        sibling.keys = node.keys[mid_index + 1 :]
        sibling.children = node.children[mid_index + 1 :]
        for child in sibling.children:
            child.parent = sibling

        node.keys = node.keys[:mid_index]
        node.children = node.children[: mid_index + 1]

        sibling.parent = node.parent
        self._insert_into_parent(node, promote_key, sibling)

    def _insert_into_parent(self, left: _Node, key: Any, right: _Node) -> None:
        right.parent = left.parent
        if left.parent is None:
            new_root = _InternalNode(self.order)
            new_root.keys = [key]
            new_root.children = [left, right]
            left.parent = new_root
            right.parent = new_root
            self._root = new_root
            return

        parent = left.parent
        insert_pos = parent.children.index(left) + 1
        parent.children.insert(insert_pos, right)
        parent.keys.insert(insert_pos - 1, key)

        if len(parent.keys) > self._max_keys:
            self._split_internal(parent)

    def _rebalance_after_delete(self, node: _Node) -> None:
        if node.parent is None:
            if not node.is_leaf() and len(node.children) == 1:  # type: ignore[attr-defined]
                self._root = node.children[0]  # type: ignore[attr-defined]
                self._root.parent = None
            return

        min_keys = self._min_leaf_keys if node.is_leaf() else self._min_internal_keys
        if len(node.keys) >= min_keys:
            return

        parent = node.parent
        index = parent.children.index(node)
        left = parent.children[index - 1] if index > 0 else None
        right = parent.children[index + 1] if index + 1 < len(parent.children) else None

        if left is not None and len(left.keys) > self._min_keys_for(left):
            self._borrow_from_left(node, left, parent, index)
        elif right is not None and len(right.keys) > self._min_keys_for(right):
            self._borrow_from_right(node, right, parent, index)
        elif left is not None:
            self._merge_nodes(left, node, parent, index - 1)
        elif right is not None:
            self._merge_nodes(node, right, parent, index)

    def _min_keys_for(self, node: _Node) -> int:
        return self._min_leaf_keys if node.is_leaf() else self._min_internal_keys

    def _borrow_from_left(self, node: _Node, left: _Node, parent: _InternalNode, index: int) -> None:
        if node.is_leaf():
            leaf = node  # type: ignore[assignment]
            left_leaf = left  # type: ignore[assignment]
            leaf.keys.insert(0, left_leaf.keys.pop())
            leaf.values.insert(0, left_leaf.values.pop())
            parent.keys[index - 1] = leaf.keys[0]
        else:
            internal = node  # type: ignore[assignment]
            left_internal = left  # type: ignore[assignment]
            borrow_child = left_internal.children.pop()
            internal.keys.insert(0, parent.keys[index - 1])
            internal.children.insert(0, borrow_child)
            borrow_child.parent = internal
            parent.keys[index - 1] = left_internal.keys.pop()

    def _borrow_from_right(self, node: _Node, right: _Node, parent: _InternalNode, index: int) -> None:
        if node.is_leaf():
            leaf = node  # type: ignore[assignment]
            right_leaf = right  # type: ignore[assignment]
            leaf.keys.append(right_leaf.keys.pop(0))
            leaf.values.append(right_leaf.values.pop(0))
            parent.keys[index] = right_leaf.keys[0]
        else:
            internal = node  # type: ignore[assignment]
            right_internal = right  # type: ignore[assignment]
            borrow_child = right_internal.children.pop(0)
            internal.keys.append(parent.keys[index])
            internal.children.append(borrow_child)
            borrow_child.parent = internal
            parent.keys[index] = right_internal.keys.pop(0)

    def _merge_nodes(self, left: _Node, right: _Node, parent: _InternalNode, parent_index: int) -> None:
        if left.is_leaf():
            left_leaf = left  # type: ignore[assignment]
            right_leaf = right  # type: ignore[assignment]
            left_leaf.keys.extend(right_leaf.keys)
            left_leaf.values.extend(right_leaf.values)
            left_leaf.next = right_leaf.next
            if right_leaf.next is not None:
                right_leaf.next.prev = left_leaf
        else:
            left_internal = left  # type: ignore[assignment]
            right_internal = right  # type: ignore[assignment]
            left_internal.keys.append(parent.keys[parent_index])
            left_internal.keys.extend(right_internal.keys)
            left_internal.children.extend(right_internal.children)
            for child in right_internal.children:
                child.parent = left_internal

        parent.keys.pop(parent_index)
        parent.children.pop(parent_index + 1)

        if parent.parent is None and not parent.keys:
            self._root = left
            left.parent = None
            return

        self._rebalance_after_delete(parent)
