from __future__ import annotations

from typing import Iterable

from kdindex.bounding_box import BoundingBox
from kdindex.point import Point


def bounds(obj: Point | BoundingBox | Iterable[Point]) -> BoundingBox | None:
    """Returns the smallest box enclosing a point, a box, or a set of points.

    Args:
        obj: Point, bounding box, or iterable of points.

    Returns:
        Bounding box. None if `obj` is an empty iterable.
    """
    if isinstance(obj, (Point, BoundingBox)):
        return obj.bounds()

    box = None
    for p in obj:
        if box is None:
            box = BoundingBox.just(p)
        else:
            box.expand_to(p)
    return box
