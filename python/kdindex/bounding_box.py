from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from kdindex.errors import DimensionMismatchError, MalformedBoundingBoxError
from kdindex.point import Point


def _center_of(a: float, b: float) -> float:
    if math.isfinite(a) and math.isfinite(b):
        return (a + b) / 2.0
    if math.isnan(a) or math.isnan(b):
        return math.nan
    a_positive = math.copysign(1.0, a) > 0
    b_positive = math.copysign(1.0, b) > 0
    if a_positive and b_positive:
        return math.inf
    if not a_positive and not b_positive:
        return -math.inf
    return 0.0


class BoundingBox:
    """Axis-aligned box between two corner points.

    `low[d] <= high[d]` holds for every dimension. A box made of a single
    point is valid, and `BoundingBox.infinite(dim)` contains every point.
    """

    __slots__ = ("_low", "_high")

    def __init__(self, low: Point | Sequence[float], high: Point | Sequence[float]):
        low = low if isinstance(low, Point) else Point(low)
        high = high if isinstance(high, Point) else Point(high)
        low.check_dim(high)

        lows, highs = low.to_numpy(), high.to_numpy()
        if np.any(np.isnan(lows)) or np.any(np.isnan(highs)) or np.any(lows > highs):
            raise MalformedBoundingBoxError(
                f"Lower corner {low} is not below upper corner {high}"
            )
        self._low = low
        self._high = high

    @classmethod
    def just(cls, point: Point) -> BoundingBox:
        """Degenerate box holding exactly one point."""
        return cls(point, point)

    @classmethod
    def infinite(cls, dim: int = 3) -> BoundingBox:
        return cls(Point.broadcast(-math.inf, dim), Point.broadcast(math.inf, dim))

    @property
    def low(self) -> Point:
        return self._low

    @property
    def high(self) -> Point:
        return self._high

    @property
    def dim(self) -> int:
        return self._low.dim

    def bounds(self) -> BoundingBox:
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self._low == other._low and self._high == other._high

    def __hash__(self) -> int:
        return hash((self._low, self._high))

    def __repr__(self) -> str:
        return f"BoundingBox({list(self._low)}, {list(self._high)})"

    def _check(self, other: Point | BoundingBox) -> None:
        if other.dim != self.dim:
            raise DimensionMismatchError(
                f"Dimension mismatch: box has {self.dim}, got {other.dim}"
            )

    def contains(self, p: Point) -> bool:
        self._check(p)
        coords = p.to_numpy()
        return bool(
            np.all(self._low.to_numpy() <= coords)
            and np.all(coords <= self._high.to_numpy())
        )

    def strictly_contains(self, p: Point) -> bool:
        self._check(p)
        coords = p.to_numpy()
        return bool(
            np.all(self._low.to_numpy() < coords)
            and np.all(coords < self._high.to_numpy())
        )

    def on_edge(self, p: Point) -> bool:
        """Check if point lies on the boundary plane of at least one dimension."""
        self._check(p)
        coords = p.to_numpy()
        return bool(
            np.any(self._low.to_numpy() == coords)
            or np.any(self._high.to_numpy() == coords)
        )

    def union(self, other: BoundingBox) -> BoundingBox:
        self._check(other)
        return BoundingBox(
            Point(np.minimum(self._low.to_numpy(), other._low.to_numpy())),
            Point(np.maximum(self._high.to_numpy(), other._high.to_numpy())),
        )

    def intersection(self, other: BoundingBox) -> BoundingBox:
        """Returns overlapping region of two boxes.

        When the boxes are disjoint along an axis, that axis collapses to the
        larger of the two lower bounds, so the result is still a valid box.
        """
        self._check(other)
        low = np.maximum(self._low.to_numpy(), other._low.to_numpy())
        high = np.minimum(self._high.to_numpy(), other._high.to_numpy())
        return BoundingBox(Point(low), Point(np.maximum(low, high)))

    def overlaps(self, other: BoundingBox) -> bool:
        self._check(other)
        return bool(
            np.all(self._low.to_numpy() < other._high.to_numpy())
            and np.all(other._low.to_numpy() < self._high.to_numpy())
        )

    def surrounds(self, other: BoundingBox) -> bool:
        self._check(other)
        return bool(
            np.all(self._low.to_numpy() <= other._low.to_numpy())
            and np.all(self._high.to_numpy() >= other._high.to_numpy())
        )

    def strictly_surrounds(self, other: BoundingBox) -> bool:
        self._check(other)
        return bool(
            np.all(self._low.to_numpy() < other._low.to_numpy())
            and np.all(self._high.to_numpy() > other._high.to_numpy())
        )

    def expand_to(self, p: Point) -> bool:
        """Grow box so that it contains the point.

        Args:
            p: Point to be included.

        Returns:
            If the box had to grow, return True. Otherwise, return False.
        """
        self._check(p)
        if p.has_nan():
            raise ValueError(f"Cannot expand a bounding box to {p}")
        if self.contains(p):
            return False

        coords = p.to_numpy()
        self._low = Point(np.minimum(self._low.to_numpy(), coords))
        self._high = Point(np.maximum(self._high.to_numpy(), coords))
        return True

    def dist(self, p: Point) -> float:
        """Minimum Euclidean distance from the box to the point, 0 if inside."""
        self._check(p)
        coords = p.to_numpy()
        protrusion = np.maximum(
            0.0,
            np.maximum(self._low.to_numpy() - coords, coords - self._high.to_numpy()),
        )
        return math.sqrt(float(np.sum(protrusion**2)))

    def volume(self) -> float:
        extents = self._high.to_numpy() - self._low.to_numpy()
        # inf * 0 would be nan.
        if np.any(extents == 0):
            return 0.0
        return float(np.prod(extents))

    def center(self) -> Point:
        return Point([_center_of(a, b) for a, b in zip(self._low, self._high)])

    def quadrant(self, corner: Sequence[bool]) -> BoundingBox:
        """Returns sub-box between the selected corner and the center.

        Args:
            corner: One flag per dimension. True picks the upper bound on that
                axis, False picks the lower bound.
        """
        if len(corner) != self.dim:
            raise DimensionMismatchError(
                f"Dimension mismatch: box has {self.dim}, got {len(corner)} corner flags"
            )

        low, high = [], []
        for d, (pick_high, middle) in enumerate(zip(corner, self.center())):
            a = self._high[d] if pick_high else self._low[d]
            if a < middle:
                low.append(a)
                high.append(middle)
            else:
                low.append(middle)
                high.append(a)
        return BoundingBox(Point(low), Point(high))

    def split_on(self, dim: int, value: float) -> tuple[BoundingBox, BoundingBox]:
        """Split box in two along an axis-aligned plane.

        Args:
            dim: Axis of the splitting plane.
            value: Position of the plane on that axis.

        Returns:
            Lower box (upper bound clamped to value) and upper box (lower bound
            clamped to value).
        """
        if not self._low[dim] <= value <= self._high[dim]:
            raise ValueError(
                f"Split value {value} is outside [{self._low[dim]}, {self._high[dim]}]"
            )
        return (
            BoundingBox(self._low, self._high.replace(dim, value)),
            BoundingBox(self._low.replace(dim, value), self._high),
        )
