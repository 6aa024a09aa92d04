# backend/src/nosqlmanager/AVL/node.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

K = TypeVar("K")
V = TypeVar("V")


# Index node layout:
#   key, value, left, right, height (leaf = 1, absent child = 0)
@dataclass(eq=False)
class AVLNode(Generic[K, V]):
    key: K
    value: V
    left: Optional["AVLNode[K, V]"] = None
    right: Optional["AVLNode[K, V]"] = None
    height: int = 1

    def __repr__(self) -> str:
        return f"AVLNode(key={self.key!r}, height={self.height})"
