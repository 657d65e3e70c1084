from __future__ import annotations
import heapq
import itertools
import numbers
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Union

from lh_codec_errors import EmptyInputError

Token = Hashable


@dataclass(frozen=True)
class Leaf:
    freq: int
    token: Any


@dataclass(frozen=True)
class Node:
    freq: int
    left: "Tree"
    right: "Tree"


Tree = Union[Leaf, Node]


def _leaf_order(freqs: Dict[Token, int]) -> List[Token]:
    # Sequence numbers follow this order, so it must not depend on hash seeds.
    try:
        return sorted(freqs)
    except TypeError:
        return list(freqs)


def build_tree(freqs: Dict[Token, int]) -> Tree:
    """
    Greedy Huffman merge over a token -> count table.

    Ties on frequency are broken by insertion sequence (leaves first, in
    token order, then merged nodes as they are created), so one table always
    yields one tree shape. The first node popped becomes the left child.
    """
    if not freqs:
        raise EmptyInputError("Cannot build a Huffman tree from an empty frequency table")

    seq = itertools.count()
    pq = []
    for tok in _leaf_order(freqs):
        f = freqs[tok]
        if isinstance(f, bool) or not isinstance(f, numbers.Integral):
            raise ValueError(f"Frequency for token {tok!r} must be an integer count, got {f!r}")
        f = int(f)
        if f < 0:
            raise ValueError(f"Negative frequency for token {tok!r}: {f}")
        pq.append((f, next(seq), Leaf(freq=f, token=tok)))
    heapq.heapify(pq)

    while len(pq) > 1:
        fa, _, a = heapq.heappop(pq)
        fb, _, b = heapq.heappop(pq)
        heapq.heappush(pq, (fa + fb, next(seq), Node(freq=fa + fb, left=a, right=b)))
    return pq[0][2]


def leaf_count(tree: Tree) -> int:
    n = 0
    stack = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            n += 1
        else:
            stack.append(node.left)
            stack.append(node.right)
    return n


def tree_depth(tree: Tree) -> int:
    """Number of edges on the longest root-to-leaf path (0 for a bare leaf)."""
    best = 0
    stack = [(tree, 0)]
    while stack:
        node, d = stack.pop()
        if isinstance(node, Leaf):
            best = max(best, d)
        else:
            stack.append((node.left, d + 1))
            stack.append((node.right, d + 1))
    return best
