from __future__ import annotations

from collections import deque
from typing import Iterator

from kdindex.kdtree_node import KdTreeNode


class DepthFirst:
    """Pre-order node iteration, left subtree before right.

    Iterating again restarts from the root.
    """

    def __init__(self, root: KdTreeNode | None):
        self._root = root

    def __iter__(self) -> Iterator[KdTreeNode]:
        stack = [] if self._root is None else [self._root]
        while stack:
            node = stack.pop()
            # Push right first so that left is popped first.
            for child in reversed(list(node.children())):
                stack.append(child)
            yield node


class BreadthFirst:
    """Level order node iteration."""

    def __init__(self, root: KdTreeNode | None):
        self._root = root

    def __iter__(self) -> Iterator[KdTreeNode]:
        queue = deque() if self._root is None else deque([self._root])
        while queue:
            node = queue.popleft()
            queue.extend(node.children())
            yield node
