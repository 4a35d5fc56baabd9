from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from kdindex.point import Point


@dataclass
class KdTreeNode:
    location_point: Point
    axis: int = 0
    left_child: KdTreeNode | None = None
    right_child: KdTreeNode | None = None

    def is_leaf(self) -> bool:
        return self.left_child is None and self.right_child is None

    def children(self) -> Iterator[KdTreeNode]:
        """Yields present children, left first."""
        if self.left_child is not None:
            yield self.left_child
        if self.right_child is not None:
            yield self.right_child

    @property
    def split_value(self) -> float:
        return self.location_point[self.axis]
