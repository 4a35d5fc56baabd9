"""Exceptions raised by the spatial index."""


class KdIndexError(Exception):
    """Base exception for all spatial index errors."""

    pass


class DimensionMismatchError(KdIndexError, ValueError):
    """Points or boxes of different dimensionality were combined."""

    pass


class CoordinateIndexError(KdIndexError, IndexError):
    """Coordinate access beyond the dimension of a point."""

    pass


class MalformedBoundingBoxError(KdIndexError, ValueError):
    """Bounding box with a lower bound above its upper bound."""

    pass
