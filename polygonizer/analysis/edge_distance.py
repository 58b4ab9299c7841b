"""
Nearest boundary wall in each cardinal direction from an interior point
"""

from typing import Optional

from .geometry_utils import GeometryUtils
from ..config import get_config, GeometryConfig
from ..models import Boundary, EdgeDistances, Point


def _nearest(current: Optional[float], candidate: float) -> float:
    if current is None or candidate < current:
        return candidate
    return current


class EdgeDistanceQuery:
    """
    Measure distances from a point to the walls of a boundary

    The point is expected to be inside the boundary's fill; callers test
    containment first. "up" is toward decreasing y.
    """

    def __init__(self, config: Optional[GeometryConfig] = None):
        self.config = config or get_config()
        self.tolerance = self.config.boundary_tolerance

    def is_on_boundary(self, boundary: Boundary, point: Point) -> bool:
        """Check if the point lies on any ring edge, within tolerance"""
        p = point.as_tuple()
        for ring in boundary.rings():
            if GeometryUtils.point_on_ring(ring.points, p, self.tolerance):
                return True
        return False

    def distances(self, boundary: Boundary, point: Point) -> EdgeDistances:
        """
        Find the nearest wall to the left, right, above and below the point

        Every edge of every ring (outer and holes) is either vertical or
        horizontal. A vertical edge spanning the point's y is a left or
        right wall; a horizontal edge spanning its x is an up or down wall.

        Returns:
            EdgeDistances; all four None when the point is on the boundary,
            a single None for a direction without any wall
        """
        if self.is_on_boundary(boundary, point):
            return EdgeDistances(None, None, None, None)

        tol = self.tolerance
        px, py = point.x, point.y
        left = right = up = down = None

        for ring in boundary.rings():
            for start, end in ring.edges():
                if abs(start[0] - end[0]) < tol:
                    # Vertical edge
                    x = start[0]
                    if min(start[1], end[1]) <= py <= max(start[1], end[1]):
                        if x < px:
                            left = _nearest(left, px - x)
                        elif x > px:
                            right = _nearest(right, x - px)
                elif abs(start[1] - end[1]) < tol:
                    # Horizontal edge
                    y = start[1]
                    if min(start[0], end[0]) <= px <= max(start[0], end[0]):
                        if y < py:
                            up = _nearest(up, py - y)
                        elif y > py:
                            down = _nearest(down, y - py)

        return EdgeDistances(left, right, up, down)
