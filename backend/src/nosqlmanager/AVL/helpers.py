from __future__ import annotations
from typing import Any, Dict, Iterator, List, Optional, Tuple

from nosqlmanager.AVL.node import AVLNode


def _height(node: Optional[AVLNode]) -> int:
    return node.height if node is not None else 0

def _update_height(node: Optional[AVLNode]) -> int:
    if node is None: return 0
    node.height = 1 + max(_height(node.left), _height(node.right))
    return node.height

def _balance_factor(node: Optional[AVLNode]) -> int:
    if node is None: return 0
    return _height(node.left) - _height(node.right)

def _rotate_right(y: AVLNode) -> AVLNode:
    x = y.left
    # y.left = b
    y.left = x.right
    # x.right = y
    x.right = y
    _update_height(y); _update_height(x)
    return x

def _rotate_left(x: AVLNode) -> AVLNode:
    y = x.right
    # x.right = b
    x.right = y.left
    # y.left = x
    y.left = x
    _update_height(x); _update_height(y)
    return y

def _rebalance(node: AVLNode) -> AVLNode:
    """Recompute height and fix a |bf| == 2 imbalance at node.

    Straight cases (LL/RR) take bf(child) == 0, zig-zag cases (LR/RL) need a
    strict sign; deletion can leave the heavy child balanced and relies on it.
    """
    _update_height(node)
    bf = _balance_factor(node)
    if bf > 1:
        if _balance_factor(node.left) < 0:  # LR
            node.left = _rotate_left(node.left)
        return _rotate_right(node)
    if bf < -1:
        if _balance_factor(node.right) > 0:  # RL
            node.right = _rotate_right(node.right)
        return _rotate_left(node)
    return node

def insert(node: Optional[AVLNode], key: Any, value: Any) -> Tuple[AVLNode, bool]:
    """Insert or overwrite. Return (new_root, added?)."""
    if node is None:
        return AVLNode(key, value), True
    if key < node.key:
        node.left, added = insert(node.left, key, value)
    elif key > node.key:
        node.right, added = insert(node.right, key, value)
    else:
        # Equal key: overwrite the value, structure untouched
        node.value = value
        return node, False
    return _rebalance(node), added

def min_node(node: AVLNode) -> AVLNode:
    cur = node
    while cur.left is not None:
        cur = cur.left
    return cur

def delete(node: Optional[AVLNode], key: Any) -> Tuple[Optional[AVLNode], bool]:
    """Delete the node with the given key. Return (new_root, removed?)."""
    if node is None: return None, False
    if key < node.key:
        node.left, removed = delete(node.left, key)
        if not removed: return node, False
    elif key > node.key:
        node.right, removed = delete(node.right, key)
        if not removed: return node, False
    else:
        if node.left is None or node.right is None:
            return (node.left or node.right), True
        succ = min_node(node.right)
        node.key, node.value = succ.key, succ.value
        node.right, _ = delete(node.right, succ.key)
    return _rebalance(node), True

def search_node(node: Optional[AVLNode], key: Any) -> Optional[AVLNode]:
    cur = node
    while cur is not None:
        if key < cur.key: cur = cur.left
        elif key > cur.key: cur = cur.right
        else: return cur
    return None

def iter_nodes(node: Optional[AVLNode]) -> Iterator[AVLNode]:
    """In-order walk with an explicit stack."""
    stack: List[AVLNode] = []
    cur = node
    while stack or cur is not None:
        while cur is not None:
            stack.append(cur)
            cur = cur.left
        cur = stack.pop()
        yield cur
        cur = cur.right

def count_nodes(node: Optional[AVLNode]) -> int:
    return sum(1 for _ in iter_nodes(node))

# ----------------------------- Viewer helpers --------------------------------

def snapshot(node: Optional[AVLNode]) -> Optional[Dict[str, Any]]:
    if node is None: return None
    return {
        "key": node.key,
        "height": node.height,
        "balance": _balance_factor(node),
        "left": snapshot(node.left),
        "right": snapshot(node.right),
    }

def fill_array(node: Optional[AVLNode], index: int, out: List[str]):
    """Place nodes at binary-heap positions (children of i at 2i+1, 2i+2)."""
    if node is None: return
    while len(out) <= index: out.append("null")
    out[index] = f"({node.key},h={node.height})"
    fill_array(node.left, 2 * index + 1, out)
    fill_array(node.right, 2 * index + 2, out)

# ----------------------------- Checks ----------------------------------------

def check_invariants(node: Optional[AVLNode]) -> int:
    """Validate order, balance and stored heights. Return the subtree height.

    Raises AssertionError on the first violation found.
    """
    def _walk(n: Optional[AVLNode], lo: Any, hi: Any) -> int:
        if n is None: return 0
        if lo is not None and not lo < n.key:
            raise AssertionError(f"order violated at {n.key!r} (lower bound {lo!r})")
        if hi is not None and not n.key < hi:
            raise AssertionError(f"order violated at {n.key!r} (upper bound {hi!r})")
        lh = _walk(n.left, lo, n.key)
        rh = _walk(n.right, n.key, hi)
        if abs(lh - rh) > 1:
            raise AssertionError(f"unbalanced at {n.key!r}: bf={lh - rh}")
        if n.height != 1 + max(lh, rh):
            raise AssertionError(f"stale height at {n.key!r}: {n.height} != {1 + max(lh, rh)}")
        return n.height
    return _walk(node, None, None)
