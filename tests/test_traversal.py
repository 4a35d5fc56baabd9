from kdindex import BreadthFirst, DepthFirst, KdTree, Point


def locations(nodes):
    return [tuple(node.location_point) for node in nodes]


def test_depth_first_visits_left_first(small_tree):
    assert locations(small_tree.depth_first()) == [
        (2, 3, 0),
        (1, 1.5, 0),
        (1, 2, 0),
        (3, 2, 0),
    ]


def test_breadth_first_is_level_order(small_tree):
    assert locations(small_tree.breadth_first()) == [
        (2, 3, 0),
        (1, 1.5, 0),
        (3, 2, 0),
        (1, 2, 0),
    ]


def test_restartable(small_tree):
    nodes = DepthFirst(small_tree.root)
    assert locations(nodes) == locations(nodes)
    levels = BreadthFirst(small_tree.root)
    assert locations(levels) == locations(levels)


def test_empty():
    assert list(DepthFirst(None)) == []
    assert list(BreadthFirst(KdTree().root)) == []


def test_does_not_mutate(random_points):
    tree = KdTree.create(list(random_points))
    before = locations(tree.breadth_first())
    assert len(list(tree.depth_first())) == tree.size()
    assert locations(tree.breadth_first()) == before
    assert tree.is_valid()


def test_lazy(small_tree):
    nodes = iter(small_tree.depth_first())
    assert next(nodes).location_point == Point([2, 3, 0])
    small_tree.add(Point([0, 0, 0]))
    assert len(list(nodes)) == 4


def test_depth_measured_by_traversal(random_points):
    tree = KdTree.create(list(random_points))
    assert tree.depth() == len(random_points).bit_length()
    assert sum(1 for node in tree.breadth_first() if node.is_leaf()) > 0
