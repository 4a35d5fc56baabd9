from __future__ import annotations

import logging
import math
from typing import Iterable, Iterator, List, Optional, Tuple

from kdindex.bounded import bounds
from kdindex.bounding_box import BoundingBox
from kdindex.errors import CoordinateIndexError, DimensionMismatchError
from kdindex.kdtree_node import KdTreeNode
from kdindex.numeric import select, variance
from kdindex.point import DEFAULT_DIM, Point
from kdindex.traversal import BreadthFirst, DepthFirst

logger = logging.getLogger(__name__)

# (parent, node) pair. Parent is None for the root.
_Link = Tuple[Optional[KdTreeNode], KdTreeNode]


def _widest_axis(points: List[Point], lo: int, hi: int, dim: int) -> int:
    """Axis of maximum coordinate variance over points[lo:hi].

    Falls back to axis 0 when every axis is degenerate.
    """
    best_axis, best_spread = 0, 0.0
    for axis in range(dim):
        spread = variance(p[axis] for p in points[lo:hi])
        # Infinite coordinates give nan, and such an axis is as wide as it gets.
        if math.isnan(spread):
            spread = math.inf
        if spread > best_spread:
            best_axis, best_spread = axis, spread
    return best_axis


class KdTree:
    """k-d tree over points of a fixed dimension.

    Each node splits its subtree on `axis`. Points of the left subtree are
    less than or equal to the node on that axis, points of the right subtree
    are greater than or equal. New points equal to a node on its axis are
    always routed left, but equal values may end up on either side after bulk
    construction or removal, so lookups check both sides on a tie.
    """

    def __init__(self, dim: int = DEFAULT_DIM):
        if dim < 1:
            raise ValueError(f"Tree dimension must be positive, got {dim}")
        self._dim = dim
        self._root: KdTreeNode | None = None
        self._size = 0

    @classmethod
    def create(cls, points: Iterable[Point], dim: int | None = None) -> KdTree:
        """Build a balanced tree from a buffer of points.

        Each subtree splits on the axis where its points have the largest
        variance, at the median point along that axis.

        Args:
            points: Points to be stored. A list of Point is reordered in
                place. Other inputs (e.g. an (n, dim) array) are converted to
                a new list first.
            dim: Dimension of the tree. Defaults to the dimension of the
                first point.

        Returns:
            New tree holding all points.
        """
        if not isinstance(points, list) or not all(isinstance(p, Point) for p in points):
            points = [p if isinstance(p, Point) else Point(p) for p in points]

        if dim is None:
            dim = points[0].dim if points else DEFAULT_DIM

        tree = cls(dim)
        for p in points:
            tree._check_insertable(p)

        # (lo, hi, parent, is_left_child)
        pending = [(0, len(points), None, False)]
        while pending:
            lo, hi, parent, is_left = pending.pop()
            if lo >= hi:
                continue

            axis = _widest_axis(points, lo, hi, dim)
            median = lo + (hi - lo - 1) // 2
            select(points, median, axis, lo, hi)

            node = KdTreeNode(location_point=points[median], axis=axis)
            if parent is None:
                tree._root = node
            elif is_left:
                parent.left_child = node
            else:
                parent.right_child = node

            pending.append((median + 1, hi, node, False))
            pending.append((lo, median, node, True))

        tree._size = len(points)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Built KdTree with {tree._size} points, depth {tree.depth()}")
        return tree

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def root(self) -> KdTreeNode | None:
        return self._root

    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._root is None

    def depth(self) -> int:
        """Number of levels in the tree. 0 if empty."""
        deepest = 0
        stack = [] if self._root is None else [(self._root, 1)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children())
        return deepest

    def __iter__(self) -> Iterator[Point]:
        for node in self.depth_first():
            yield node.location_point

    def __contains__(self, p: object) -> bool:
        return isinstance(p, Point) and self.contains(p)

    def __repr__(self) -> str:
        return f"KdTree(dim={self._dim}, size={self._size})"

    def depth_first(self) -> DepthFirst:
        return DepthFirst(self._root)

    def breadth_first(self) -> BreadthFirst:
        return BreadthFirst(self._root)

    def bounds(self) -> BoundingBox | None:
        """Tight bounding box of every stored point. None if empty."""
        return bounds(iter(self))

    def _check_dim(self, p: Point) -> None:
        if p.dim != self._dim:
            raise DimensionMismatchError(
                f"Point of dimension {p.dim} does not fit a tree of dimension {self._dim}"
            )

    def _check_axis(self, axis: int) -> None:
        if not 0 <= axis < self._dim:
            raise CoordinateIndexError(
                f"Axis {axis} is out of range for a tree of dimension {self._dim}"
            )

    def _check_insertable(self, p: Point) -> None:
        if not isinstance(p, Point):
            raise TypeError(f"Expected Point, got {type(p).__name__}")
        self._check_dim(p)
        if p.has_nan():
            raise ValueError(f"Cannot index a point with nan coordinates: {p}")

    def add(self, p: Point) -> None:
        """Insert point as a new leaf."""
        self._check_insertable(p)

        if self._root is None:
            self._root = KdTreeNode(location_point=p, axis=0)
            self._size += 1
            return

        node = self._root
        while True:
            next_axis = (node.axis + 1) % self._dim
            if p[node.axis] <= node.split_value:
                if node.left_child is None:
                    node.left_child = KdTreeNode(location_point=p, axis=next_axis)
                    break
                node = node.left_child
            else:
                if node.right_child is None:
                    node.right_child = KdTreeNode(location_point=p, axis=next_axis)
                    break
                node = node.right_child
        self._size += 1

    def _find(self, p: Point) -> _Link | None:
        """Search node holding the point, with its parent."""
        stack: List[_Link] = [] if self._root is None else [(None, self._root)]
        while stack:
            parent, node = stack.pop()
            if node.location_point == p:
                return parent, node

            value, split = p[node.axis], node.split_value
            # On a tie the point may be on either side. Left is searched first.
            if value >= split and node.right_child is not None:
                stack.append((node, node.right_child))
            if value <= split and node.left_child is not None:
                stack.append((node, node.left_child))
        return None

    def contains(self, p: Point) -> bool:
        self._check_dim(p)
        return self._find(p) is not None

    @staticmethod
    def _extreme(
        parent: KdTreeNode | None, root: KdTreeNode, axis: int, minimum: bool
    ) -> _Link:
        """Search node with the smallest (or largest) coordinate on `axis`.

        Args:
            parent: Parent of `root`.
            root: Root of the subtree to be searched.
            axis: Coordinate to be compared.
            minimum: If True, search the minimum. Otherwise, the maximum.

        Returns:
            Found node and its parent.
        """
        best: _Link = (parent, root)
        best_value = root.location_point[axis]

        stack: List[_Link] = [(parent, root)]
        while stack:
            link = stack.pop()
            node = link[1]
            value = node.location_point[axis]
            if (value < best_value) if minimum else (value > best_value):
                best, best_value = link, value

            if node.axis == axis:
                # The other side is entirely beyond this node on `axis`.
                child = node.left_child if minimum else node.right_child
                if child is not None:
                    stack.append((node, child))
            else:
                stack.extend((node, child) for child in node.children())
        return best

    def find_min(self, axis: int) -> Point | None:
        self._check_axis(axis)
        if self._root is None:
            return None
        return self._extreme(None, self._root, axis, minimum=True)[1].location_point

    def find_max(self, axis: int) -> Point | None:
        self._check_axis(axis)
        if self._root is None:
            return None
        return self._extreme(None, self._root, axis, minimum=False)[1].location_point

    def remove(self, p: Point) -> bool:
        """Remove one occurrence of the point.

        A node with children takes over the minimum of its right subtree (or
        the maximum of its left subtree) along its axis, and the node that
        held that value is removed in turn, until a leaf gets detached.

        Args:
            p: Point to be removed.

        Returns:
            If the point was found and removed, return True. Otherwise, return False.
        """
        self._check_dim(p)

        found = self._find(p)
        if found is None:
            logger.debug(f"{p} is not in the tree, nothing removed")
            return False

        parent, node = found
        while not node.is_leaf():
            if node.right_child is not None:
                parent_of_next, replacement = self._extreme(
                    node, node.right_child, node.axis, minimum=True
                )
            else:
                parent_of_next, replacement = self._extreme(
                    node, node.left_child, node.axis, minimum=False
                )
            node.location_point = replacement.location_point
            parent, node = parent_of_next, replacement

        if parent is None:
            self._root = None
        elif parent.left_child is node:
            parent.left_child = None
        else:
            parent.right_child = None
        self._size -= 1
        return True

    def nearest(self, query: Point) -> Point | None:
        """Search the stored point closest to the query (Euclidean).

        Nodes are visited before their children, and the child on the query's
        side of the split before the other one. The other side is only visited
        while the split plane is closer than the best distance found so far.
        When several points are equally close, the first one visited wins.

        Args:
            query: Point to search around.

        Returns:
            Nearest point. None if the tree is empty.
        """
        self._check_dim(query)
        if query.has_nan():
            raise ValueError(f"Cannot search around a point with nan coordinates: {query}")
        if self._root is None:
            return None

        best_point = self._root.location_point
        best_dist = best_point.l2(query)

        stack = [(self._root, BoundingBox.infinite(self._dim))]
        while stack:
            node, cell = stack.pop()
            if cell.dist(query) >= best_dist:
                continue

            dist = node.location_point.l2(query)
            if dist < best_dist:
                best_point, best_dist = node.location_point, dist

            split, value = node.split_value, query[node.axis]
            lower_cell, upper_cell = cell.split_on(node.axis, split)
            if value <= split:
                close, far = (node.left_child, lower_cell), (node.right_child, upper_cell)
            else:
                close, far = (node.right_child, upper_cell), (node.left_child, lower_cell)

            # Far side is pushed first so that the close side is searched first.
            if far[0] is not None and abs(split - value) < best_dist:
                stack.append(far)
            if close[0] is not None:
                stack.append(close)
        return best_point

    def range(self, box: BoundingBox) -> List[Point]:
        """Collect every stored point inside the box (bounds inclusive)."""
        if box.dim != self._dim:
            raise DimensionMismatchError(
                f"Box of dimension {box.dim} does not fit a tree of dimension {self._dim}"
            )

        found = []
        stack = [] if self._root is None else [self._root]
        while stack:
            node = stack.pop()
            if box.contains(node.location_point):
                found.append(node.location_point)

            axis, split = node.axis, node.split_value
            # Right subtree is >= split, left subtree is <= split.
            if node.right_child is not None and split <= box.high[axis]:
                stack.append(node.right_child)
            if node.left_child is not None and split >= box.low[axis]:
                stack.append(node.left_child)
        return found

    def is_valid(self) -> bool:
        """Check ordering of every node against its ancestors, and the size."""
        count = 0
        stack = [] if self._root is None else [(self._root, BoundingBox.infinite(self._dim))]
        while stack:
            node, cell = stack.pop()
            count += 1
            if not cell.contains(node.location_point):
                return False

            lower_cell, upper_cell = cell.split_on(node.axis, node.split_value)
            if node.left_child is not None:
                stack.append((node.left_child, lower_cell))
            if node.right_child is not None:
                stack.append((node.right_child, upper_cell))
        return count == self._size
