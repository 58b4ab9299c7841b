import pytest

from polygonizer import GeometryConfig, Point, Rectangle, edge_distances
from polygonizer.analysis import EdgeDistanceQuery, RectilinearUnionBuilder


def rect(x, y, w, h):
    return Rectangle(x=x, y=y, width=w, height=h)


@pytest.fixture
def query():
    return EdgeDistanceQuery(GeometryConfig())


@pytest.fixture
def square():
    return RectilinearUnionBuilder(GeometryConfig()).build([rect(0, 0, 10, 10)])


def test_center_of_square(query, square):
    d = query.distances(square, Point(x=5, y=5))
    assert d == (5, 5, 5, 5)
    assert d.width == 10
    assert d.height == 10
    assert not d.on_boundary


def test_up_is_toward_decreasing_y(query, square):
    d = query.distances(square, Point(x=5, y=2))
    assert d.up == pytest.approx(2.0)
    assert d.down == pytest.approx(8.0)
    assert d.left == pytest.approx(5.0)
    assert d.right == pytest.approx(5.0)


@pytest.mark.parametrize("x, y", [
    (0, 0),     # vertex
    (10, 10),   # vertex
    (5, 0),     # top edge
    (10, 5),    # right edge
    (0, 7.5),   # left edge
    (5, 10 + 1e-7),  # within tolerance of the bottom edge
])
def test_point_on_boundary_yields_no_distances(query, square, x, y):
    d = query.distances(square, Point(x=x, y=y))
    assert d == (None, None, None, None)
    assert d.on_boundary
    assert d.width is None and d.height is None


def test_hole_walls_are_nearest(query, frame_rectangles):
    frame = RectilinearUnionBuilder(GeometryConfig()).build(frame_rectangles)
    d = query.distances(frame, Point(x=5, y=15))
    assert d == (5, 5, 15, 15)


def test_wall_crossing_at_exact_vertex_height(query, frame_rectangles):
    frame = RectilinearUnionBuilder(GeometryConfig()).build(frame_rectangles)
    # y = 10 runs along the hole's top edge for x in [10, 20], and the
    # hole's vertical walls end exactly at this height
    d = query.distances(frame, Point(x=5, y=10))
    assert d.left == pytest.approx(5.0)
    assert d.right == pytest.approx(5.0)


def test_point_outside_has_missing_walls(query, square):
    d = query.distances(square, Point(x=-5, y=5))
    assert d.left is None
    assert d.right == pytest.approx(5.0)
    assert d.up is None
    assert d.down is None
    assert not d.on_boundary
    assert d.width is None


def test_l_shape_only_counts_spanning_edges(query):
    boundary = RectilinearUnionBuilder(GeometryConfig()).build(
        [rect(0, 0, 30, 10), rect(0, 10, 10, 20)]
    )
    d = query.distances(boundary, Point(x=5, y=20))
    # The notch wall at x = 10 spans y in [10, 30]; the far wall at x = 30 does not reach y = 20
    assert d == (5, 5, 20, 10)
    d = query.distances(boundary, Point(x=20, y=5))
    assert d == (20, 10, 5, 5)


def test_functional_api_matches_query(square):
    assert edge_distances(square, (2, 3)) == (2, 8, 3, 7)
