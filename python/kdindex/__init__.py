"""k-d tree spatial index over fixed-dimension points."""

from kdindex import numeric
from kdindex.bounded import bounds
from kdindex.bounding_box import BoundingBox
from kdindex.errors import (
    CoordinateIndexError,
    DimensionMismatchError,
    KdIndexError,
    MalformedBoundingBoxError,
)
from kdindex.kdtree import KdTree
from kdindex.kdtree_node import KdTreeNode
from kdindex.point import DEFAULT_DIM, Point, l1norm, l2norm
from kdindex.traversal import BreadthFirst, DepthFirst

__all__ = [
    "DEFAULT_DIM",
    "BoundingBox",
    "BreadthFirst",
    "CoordinateIndexError",
    "DepthFirst",
    "DimensionMismatchError",
    "KdIndexError",
    "KdTree",
    "KdTreeNode",
    "MalformedBoundingBoxError",
    "Point",
    "bounds",
    "l1norm",
    "l2norm",
    "numeric",
]
