import pytest
from shapely.geometry import box
from shapely.ops import unary_union

from polygonizer import GeometryConfig, IslandCatalog, Rectangle


def rect(x, y, w, h):
    return Rectangle(x=x, y=y, width=w, height=h)


@pytest.fixture
def strict_config():
    # Surface stitching bugs instead of isolating them
    return GeometryConfig(fail_fast=True, cross_check_union=True)


@pytest.fixture
def catalog(strict_config):
    return IslandCatalog(strict_config)


@pytest.fixture
def frame_rectangles():
    """Four bars around a 10x10 gap at (10, 10)"""
    return [
        rect(0, 0, 30, 10),   # top
        rect(0, 20, 30, 10),  # bottom
        rect(0, 10, 10, 10),  # left
        rect(20, 10, 10, 10),  # right
    ]


@pytest.fixture
def diagonal_gap_rectangles():
    """4x4 block of unit cells with the (1, 1) and (2, 2) cells left empty"""
    return [
        rect(col, row, 1, 1)
        for row in range(4)
        for col in range(4)
        if (col, row) not in ((1, 1), (2, 2))
    ]


@pytest.fixture
def reference_union_area():
    def _area(rectangles):
        return unary_union([box(r.x, r.y, r.max_x, r.max_y) for r in rectangles]).area
    return _area
