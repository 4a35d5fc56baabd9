from __future__ import annotations

import math
from typing import Iterable, Iterator

import numpy as np
import numpy.typing as npt

from kdindex.errors import CoordinateIndexError, DimensionMismatchError

DEFAULT_DIM = 3


class Point:
    """Fixed-dimension coordinate vector.

    Points are immutable values. Coordinates are stored in a read-only float64
    array, and two points are equal when every coordinate is equal.
    """

    __slots__ = ("_coords",)

    def __init__(self, coords: Iterable[float] | npt.NDArray):
        if not isinstance(coords, np.ndarray):
            coords = list(coords)
        values = np.array(coords, dtype=np.float64).reshape(-1)
        if values.size == 0:
            raise DimensionMismatchError("Point needs at least one coordinate")
        values.flags.writeable = False
        self._coords = values

    @classmethod
    def zeros(cls, dim: int = DEFAULT_DIM) -> Point:
        return cls(np.zeros(dim))

    @classmethod
    def broadcast(cls, value: float, dim: int = DEFAULT_DIM) -> Point:
        """Create point whose coordinates are all `value`."""
        return cls(np.full(dim, value, dtype=np.float64))

    @property
    def dim(self) -> int:
        return self._coords.size

    def _check_index(self, index: int) -> int:
        # Negative indices are not dimensions.
        if not isinstance(index, (int, np.integer)) or not 0 <= index < self.dim:
            raise CoordinateIndexError(
                f"Index {index} is out of range for a point of dimension {self.dim}"
            )
        return int(index)

    def __getitem__(self, index: int) -> float:
        return float(self._coords[self._check_index(index)])

    def replace(self, index: int, value: float) -> Point:
        """Returns copy of this point with one coordinate replaced.

        Args:
            index: Dimension to be written.
            value: New coordinate value.

        Returns:
            New point. This point is left untouched.
        """
        coords = self._coords.copy()
        coords[self._check_index(index)] = value
        return Point(coords)

    def __len__(self) -> int:
        return self.dim

    def __iter__(self) -> Iterator[float]:
        return iter(self._coords.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.dim == other.dim and bool(np.all(self._coords == other._coords))

    def __hash__(self) -> int:
        return hash(tuple(self._coords.tolist()))

    def __repr__(self) -> str:
        return f"Point({self._coords.tolist()})"

    def to_numpy(self) -> npt.NDArray:
        return self._coords

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self._coords)))

    def has_nan(self) -> bool:
        return bool(np.any(np.isnan(self._coords)))

    def check_dim(self, other: Point | int) -> None:
        """Raise DimensionMismatchError unless `other` has this point's dimension."""
        dim = other if isinstance(other, int) else other.dim
        if dim != self.dim:
            raise DimensionMismatchError(
                f"Dimension mismatch: expected {self.dim}, got {dim}"
            )

    def l2(self, other: Point) -> float:
        """Euclidean distance to other point."""
        self.check_dim(other)
        return math.sqrt(float(np.sum((self._coords - other._coords) ** 2)))

    def l1(self, other: Point) -> float:
        """Manhattan distance to other point."""
        self.check_dim(other)
        return float(np.sum(np.abs(self._coords - other._coords)))

    def bounds(self):
        from kdindex.bounding_box import BoundingBox

        return BoundingBox.just(self)


def l2norm(a: Point, b: Point) -> float:
    return a.l2(b)


def l1norm(a: Point, b: Point) -> float:
    return a.l1(b)
