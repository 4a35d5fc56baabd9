"""Shared fixtures for kdindex tests."""

import numpy as np
import pytest

from kdindex import KdTree, Point


@pytest.fixture
def rng():
    return np.random.default_rng(19)


@pytest.fixture
def random_points(rng):
    """200 points in the unit cube, with a few exact duplicates."""
    coords = rng.random((200, 3))
    coords[150:160] = coords[0:10]
    return [Point(c) for c in coords]


@pytest.fixture
def grid_points():
    """Points on an integer grid, many coordinates tie on every axis."""
    return [Point([x, y, z]) for x in range(4) for y in range(4) for z in range(3)]


@pytest.fixture
def small_tree():
    tree = KdTree()
    for coords in ([2, 3, 0], [3, 2, 0], [1, 1.5, 0], [1, 2, 0]):
        tree.add(Point(coords))
    return tree

