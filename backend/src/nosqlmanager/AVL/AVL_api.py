from __future__ import annotations
from typing import Any, Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from nosqlmanager.AVL import helpers
from nosqlmanager.AVL.node import AVLNode

K = TypeVar("K")
V = TypeVar("V")


class AVLTree(Generic[K, V]):
    """In-memory AVL index over any totally ordered key type.

    Keys are unique: inserting an existing key replaces its value and leaves the
    shape of the tree alone.
    """

    def __init__(self):
        self.root: Optional[AVLNode[K, V]] = None
        self._size = 0

    # required ops
    def insert(self, key: K, value: V) -> None:
        self.root, added = helpers.insert(self.root, key, value)
        if added: self._size += 1

    def search(self, key: K) -> Optional[V]:
        node = helpers.search_node(self.root, key)
        return node.value if node is not None else None

    def contains(self, key: K) -> bool:
        return helpers.search_node(self.root, key) is not None

    def delete(self, key: K) -> bool:
        self.root, removed = helpers.delete(self.root, key)
        if removed: self._size -= 1
        return removed

    def keys_in_order(self) -> Iterator[K]:
        for node in helpers.iter_nodes(self.root):
            yield node.key

    def items(self) -> Iterator[Tuple[K, V]]:
        for node in helpers.iter_nodes(self.root):
            yield node.key, node.value

    def values(self) -> Iterator[V]:
        for node in helpers.iter_nodes(self.root):
            yield node.value

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self.root is None

    def clear(self) -> None:
        self.root = None
        self._size = 0

    def height(self) -> int:
        return helpers._height(self.root)

    # python protocol
    def __len__(self) -> int: return self._size
    def __contains__(self, key: object) -> bool: return self.contains(key)  # type: ignore[arg-type]
    def __iter__(self) -> Iterator[K]: return self.keys_in_order()

    # viewer support
    def snapshot(self) -> Optional[Dict[str, Any]]:
        """Nested {key, height, balance, left, right} dicts, None when empty."""
        return helpers.snapshot(self.root)

    def as_array(self) -> List[str]:
        out: List[str] = []
        helpers.fill_array(self.root, 0, out)
        return out

    def check(self) -> None:
        """Raise AssertionError if any structural invariant is broken."""
        helpers.check_invariants(self.root)
        n = helpers.count_nodes(self.root)
        if n != self._size:
            raise AssertionError(f"size counter {self._size} != reachable nodes {n}")
