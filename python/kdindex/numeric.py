"""Streaming statistics and order-statistic selection."""

from __future__ import annotations

from typing import Iterable, List, Optional

from kdindex.point import Point

# Below this many values the pivot is the plain sorted median.
PIVOT_CUTOFF = 20
PIVOT_CHUNK = 10


def average(values: Iterable[float]) -> float:
    """Running mean of a sequence of floats. Returns 0.0 for no values."""
    result = 0.0
    for n, value in enumerate(values):
        result = (n * result + value) / (n + 1)
    return result


def variance(values: Iterable[float]) -> float:
    """Population variance of a sequence of floats."""
    values = list(values)
    mean = average(values)
    return average((value - mean) ** 2 for value in values)


def sorted_median(values: List[float]) -> float:
    """Sorts values in place and returns the median.

    For an even number of values, the lower of the two middle values is
    returned.
    """
    if not values:
        raise ValueError("Median of an empty sequence")
    values.sort()
    return values[(len(values) - 1) // 2]


def pivot(values: List[float]) -> float:
    """Median of medians of chunks of values. Values may be reordered."""
    # Not worth it for small lists.
    if len(values) < PIVOT_CUTOFF:
        return sorted_median(values)

    medians = [
        sorted_median(values[i : i + PIVOT_CHUNK])
        for i in range(0, len(values), PIVOT_CHUNK)
    ]
    return sorted_median(medians)


def quickselect(values: List[float], k: int) -> float:
    """Returns the k-th smallest value (0-based) without fully sorting.

    Args:
        values: Values to select from. They may be reordered.
        k: Order of the value to be found.

    Returns:
        k-th smallest value.
    """
    if not 0 <= k < len(values):
        raise IndexError(f"k={k} is out of range for {len(values)} values")

    while len(values) > 1:
        p = pivot(values)
        less = [v for v in values if v < p]
        greater = [v for v in values if v > p]
        n_equal = len(values) - len(less) - len(greater)

        if k < len(less):
            values = less
        elif k < len(less) + n_equal:
            return p
        else:
            k -= len(less) + n_equal
            values = greater
    return values[0]


def median(values: List[float]) -> float:
    return quickselect(values, (len(values) - 1) // 2)


def select(
    points: List[Point], k: int, axis: int, lo: int = 0, hi: Optional[int] = None
) -> Point:
    """Partition points[lo:hi] in place around its k-th order statistic.

    After the call, points[k] holds the point whose coordinate on `axis` has
    rank k, every point in points[lo:k] is less than or equal to it on that
    axis, and every point in points[k + 1:hi] is greater than or equal.

    Args:
        points: Point buffer to be reordered.
        k: Absolute index of the order statistic, lo <= k < hi.
        axis: Coordinate used for comparison.
        lo: Start of the slice.
        hi: End of the slice. Defaults to len(points).

    Returns:
        Point placed at index k.
    """
    if hi is None:
        hi = len(points)
    if not lo <= k < hi:
        raise IndexError(f"k={k} is out of range for slice [{lo}, {hi})")

    while hi - lo > 1:
        keyed = [(point[axis], point) for point in points[lo:hi]]
        p = pivot([key for key, _ in keyed])

        less = [point for key, point in keyed if key < p]
        equal = [point for key, point in keyed if key == p]
        greater = [point for key, point in keyed if key > p]
        points[lo:hi] = less + equal + greater

        equal_start = lo + len(less)
        equal_end = equal_start + len(equal)
        if k < equal_start:
            hi = equal_start
        elif k < equal_end:
            break
        else:
            lo = equal_end
    return points[k]
