from __future__ import annotations

import argparse

import matplotlib.patches as patches
import matplotlib.pyplot as plt
import numpy as np

from kdindex.bounding_box import BoundingBox
from kdindex.kdtree import KdTree
from kdindex.point import Point


def draw_splits(ax, tree: KdTree, extent: BoundingBox) -> int:
    """Draw the split line of every node of a 2D tree.

    Args:
        ax: Matplotlib axes to draw on.
        tree: Tree of dimension 2.
        extent: Region covered by the root node.

    Returns:
        Number of lines drawn.
    """
    drawn = 0
    stack = [] if tree.root is None else [(tree.root, extent)]
    while stack:
        node, cell = stack.pop()
        split = node.split_value
        if node.axis == 0:
            ax.plot([split, split], [cell.low[1], cell.high[1]], color="gray", linewidth=1)
        else:
            ax.plot([cell.low[0], cell.high[0]], [split, split], color="gray", linewidth=1)
        drawn += 1

        lower, upper = cell.split_on(node.axis, split)
        if node.left_child is not None:
            stack.append((node.left_child, lower))
        if node.right_child is not None:
            stack.append((node.right_child, upper))
    return drawn


def plot(ax, points: np.ndarray, target: Point, radius: float) -> tuple[Point, list[Point]]:
    """Build a tree from 2D points and draw it with a nearest and range query.

    Returns:
        Nearest point to target and points found in the query box.
    """
    tree = KdTree.create([Point(p) for p in points], dim=2)
    nearest = tree.nearest(target)

    box = BoundingBox(
        Point([target[0] - radius, target[1] - radius]),
        Point([target[0] + radius, target[1] + radius]),
    )
    found = tree.range(box)

    draw_splits(ax, tree, BoundingBox(Point([0.0, 0.0]), Point([1.0, 1.0])))

    r = patches.Rectangle(
        (box.low[0], box.low[1]),
        2 * radius,
        2 * radius,
        edgecolor="green",
        facecolor="none",
        linewidth=1,
    )
    ax.add_patch(r)

    ax.scatter(points[:, 0], points[:, 1])
    ax.scatter([p[0] for p in found], [p[1] for p in found])
    ax.scatter(target[0], target[1])
    ax.scatter(nearest[0], nearest[1], marker="x", color="red")
    ax.set_aspect("equal")
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    return nearest, found


def main():
    # NOTE:
    # e.g.
    # python3 -m kdindex.main -n 50 -s 19 --radius 0.2
    parser = argparse.ArgumentParser(description="Visualize k-d tree queries")
    parser.add_argument("-n", "--count", type=int, help="Number of points", default=10)
    parser.add_argument("-s", "--seed", type=int, help="Random seed", default=19)
    parser.add_argument(
        "-r", "--radius", type=float, help="Half size of the query box", default=0.3
    )
    parser.add_argument(
        "--rerun", action="store_true", help="Log points to rerun viewer", default=False
    )
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    points = rng.random((args.count, 2))
    target = Point([0.5, 0.5])

    if not args.rerun:
        nearest, found = plot(plt.axes(), points, target, args.radius)
        print(f"Nearest to {target}: {nearest}, {len(found)} points in range")
        plt.show()
    else:
        import rerun as rr

        tree = KdTree.create([Point(p) for p in points], dim=2)
        nearest = tree.nearest(target)

        colors = np.full((args.count, 3), [0, 255, 0])
        all_points = np.append(points, [list(target), list(nearest)], axis=0)
        colors = np.append(colors, np.array([[255, 0, 0], [0, 0, 255]]), axis=0)

        rr.init("kdindex", spawn=True)
        rr.log("points", rr.Points2D(all_points, colors=colors, radii=0.02))


if __name__ == "__main__":
    main()
