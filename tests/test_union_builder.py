import random

import pytest
from shapely.geometry import Point as ShapelyPoint, box
from shapely.ops import unary_union

from polygonizer import BoundaryConsistencyError, GeometryConfig, Rectangle
from polygonizer.analysis import (
    GeometryMetrics, GeometryUtils, RectilinearUnionBuilder, contains_point
)


def rect(x, y, w, h):
    return Rectangle(x=x, y=y, width=w, height=h)


@pytest.fixture
def builder(strict_config):
    return RectilinearUnionBuilder(strict_config)


def boundary_area(boundary):
    return sum(GeometryUtils.signed_area(ring.points) for ring in boundary.rings())


def test_single_rectangle(builder):
    boundary = builder.build([rect(0, 0, 10, 10)])
    assert boundary.outer.points == [(0, 0), (10, 0), (10, 10), (0, 10)]
    assert boundary.holes == []


def test_duplicate_and_contained_rectangles_collapse(builder):
    boundary = builder.build([rect(0, 0, 10, 10), rect(0, 0, 10, 10), rect(2, 2, 3, 3)])
    assert boundary.outer.points == [(0, 0), (10, 0), (10, 10), (0, 10)]
    assert boundary.holes == []


def test_overlapping_rectangles(builder):
    boundary = builder.build([rect(0, 0, 10, 10), rect(5, 5, 10, 10)])
    assert boundary.outer.points == [
        (0, 0), (10, 0), (10, 5), (15, 5), (15, 15), (5, 15), (5, 10), (0, 10)
    ]
    assert boundary.holes == []
    assert boundary_area(boundary) == pytest.approx(175.0)


def test_edge_touching_rectangles_merge_without_seam(builder):
    boundary = builder.build([rect(0, 0, 10, 10), rect(10, 0, 10, 10)])
    assert boundary.outer.points == [(0, 0), (20, 0), (20, 10), (0, 10)]


def test_frame_has_one_hole(builder, frame_rectangles):
    boundary = builder.build(frame_rectangles)
    assert boundary.outer.points == [(0, 0), (30, 0), (30, 30), (0, 30)]
    assert [h.points for h in boundary.holes] == [[(10, 10), (10, 20), (20, 20), (20, 10)]]
    assert GeometryUtils.signed_area(boundary.outer.points) > 0
    assert GeometryUtils.signed_area(boundary.holes[0].points) < 0
    assert boundary_area(boundary) == pytest.approx(800.0)


def test_corner_touch_is_single_pinched_outer_ring(builder):
    boundary = builder.build([rect(0, 0, 1, 1), rect(1, 1, 1, 1)])
    assert boundary.outer.points == [
        (0, 0), (1, 0), (1, 1), (2, 1), (2, 2), (1, 2), (1, 1), (0, 1)
    ]
    assert boundary.holes == []
    assert boundary_area(boundary) == pytest.approx(2.0)


def test_diagonal_gaps_become_two_holes(builder, diagonal_gap_rectangles):
    boundary = builder.build(diagonal_gap_rectangles)
    assert boundary.outer.points == [(0, 0), (4, 0), (4, 4), (0, 4)]
    assert [h.points for h in boundary.holes] == [
        [(1, 1), (1, 2), (2, 2), (2, 1)],
        [(2, 2), (2, 3), (3, 3), (3, 2)],
    ]
    assert boundary_area(boundary) == pytest.approx(14.0)


def test_rings_are_stored_open_and_rectilinear(builder, frame_rectangles):
    boundary = builder.build(frame_rectangles)
    for ring in boundary.rings():
        assert ring.points[0] != ring.points[-1]
        assert ring.closed_coords()[-1] == ring.points[0]
        for start, end in ring.edges():
            assert start[0] == end[0] or start[1] == end[1]


def test_fractional_coordinates(builder):
    boundary = builder.build([rect(0.5, 0.25, 1.25, 1.0), rect(1.75, 0.25, 0.5, 1.0)])
    assert boundary.outer.points == [(0.5, 0.25), (2.25, 0.25), (2.25, 1.25), (0.5, 1.25)]


def test_result_does_not_depend_on_input_order(builder, frame_rectangles):
    shuffled = list(frame_rectangles)
    random.Random(5).shuffle(shuffled)
    assert builder.build(shuffled) == builder.build(frame_rectangles)


def test_random_unions_match_shapely(reference_union_area):
    builder = RectilinearUnionBuilder(GeometryConfig(cross_check_union=True))
    metrics = GeometryMetrics(GeometryConfig())
    rng = random.Random(42)
    for _ in range(20):
        # One anchor rectangle that every other one overlaps keeps it a single island
        rects = [rect(0, 0, 20, 20)]
        for _ in range(rng.randint(1, 12)):
            x, y = rng.randint(-5, 19), rng.randint(-5, 19)
            rects.append(rect(x, y, rng.randint(6, 12), rng.randint(6, 12)))

        boundary = builder.build(rects)
        assert boundary_area(boundary) == pytest.approx(reference_union_area(rects))
        assert boundary.to_shapely().area == pytest.approx(reference_union_area(rects))

        reference = unary_union([box(r.x, r.y, r.max_x, r.max_y) for r in rects])
        c = metrics.centroid(boundary)
        assert c.x == pytest.approx(reference.centroid.x)
        assert c.y == pytest.approx(reference.centroid.y)
        assert contains_point(boundary, c) == reference.intersects(ShapelyPoint(c.x, c.y))


def test_geojson_output(builder, frame_rectangles):
    geojson = builder.build(frame_rectangles).to_geojson()
    assert geojson["type"] == "Polygon"
    assert len(geojson["coordinates"]) == 2
    assert geojson["coordinates"][0][0] == geojson["coordinates"][0][-1]


def test_empty_island_raises(builder):
    with pytest.raises(BoundaryConsistencyError):
        builder.build([])


def test_stitch_rejects_diagonal_edge(builder):
    with pytest.raises(BoundaryConsistencyError, match="non-rectilinear"):
        builder.stitch([((0, 0), (1, 1))])


def test_stitch_rejects_open_chain(builder):
    edges = [((0, 0), (1, 0)), ((1, 0), (1, 1))]
    with pytest.raises(BoundaryConsistencyError, match="unmatched"):
        builder.stitch(edges)


def test_stitch_rejects_duplicate_edges(builder):
    edges = [((0, 0), (1, 0)), ((0, 0), (2, 0))]
    with pytest.raises(BoundaryConsistencyError, match="overlapping"):
        builder.stitch(edges)


def test_classify_requires_single_outer_ring(builder):
    square = [(0, 0), (1, 0), (1, 1), (0, 1)]
    other = [(5, 5), (6, 5), (6, 6), (5, 6)]
    with pytest.raises(BoundaryConsistencyError, match="exactly one outer ring"):
        builder.classify([square, other])


def test_classify_rejects_hole_outside_outer(builder):
    outer = [(0, 0), (4, 0), (4, 4), (0, 4)]
    stray_hole = [(10, 10), (10, 11), (11, 11), (11, 10)]
    with pytest.raises(BoundaryConsistencyError, match="outside"):
        builder.classify([outer, stray_hole])


def test_classify_rejects_degenerate_ring(builder):
    with pytest.raises(BoundaryConsistencyError):
        builder.classify([[(0, 0), (1, 0), (0, 0)]])
