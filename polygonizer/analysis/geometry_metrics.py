"""
Area and centroid of an island boundary (shoelace / Green's theorem)
"""

from typing import Optional, Tuple

import numpy as np
from loguru import logger

from .geometry_utils import GeometryUtils
from ..config import get_config, GeometryConfig
from ..models import Boundary, Point, Ring

# Returned instead of a centroid when the boundary encloses no area
DEGENERATE_CENTROID = Point(x=0.0, y=0.0)


class GeometryMetrics:
    """
    Compute area and centroid from a boundary

    Every ring contributes its signed area and first moments; hole rings
    run clockwise, so their contribution is subtracted automatically.
    Sums are taken relative to a reference vertex to keep the cross
    products small for boundaries far from the origin.
    """

    def __init__(self, config: Optional[GeometryConfig] = None):
        self.config = config or get_config()

    @staticmethod
    def _ring_moments(ring: Ring, origin: Tuple[float, float]) -> Tuple[float, float, float]:
        """Return (2 * signed area, 6 * area * cx, 6 * area * cy) about origin"""
        coords = np.asarray(ring.points, dtype=float)
        if len(coords) < 3:
            return 0.0, 0.0, 0.0

        x = coords[:, 0] - origin[0]
        y = coords[:, 1] - origin[1]
        x_next = np.roll(x, -1)
        y_next = np.roll(y, -1)

        cross = x * y_next - x_next * y
        return (
            float(cross.sum()),
            float(((x + x_next) * cross).sum()),
            float(((y + y_next) * cross).sum())
        )

    def ring_signed_area(self, ring: Ring) -> float:
        """Signed ring area: positive for outer rings, negative for holes"""
        if not ring.points:
            return 0.0
        twice_area, _, _ = self._ring_moments(ring, ring.points[0])
        return twice_area / 2.0

    def compute(self, boundary: Boundary) -> Tuple[float, Point]:
        """
        Calculate area and centroid

        Returns:
            (area, centroid); centroid is DEGENERATE_CENTROID when the
            summed signed area is below the degenerate epsilon
        """
        origin = boundary.outer.points[0] if boundary.outer.points else (0.0, 0.0)

        twice_area = 0.0
        moment_x = 0.0
        moment_y = 0.0
        for ring in boundary.rings():
            a, mx, my = self._ring_moments(ring, origin)
            twice_area += a
            moment_x += mx
            moment_y += my

        signed_area = twice_area / 2.0
        if abs(signed_area) < self.config.degenerate_area_epsilon:
            logger.warning(f"Degenerate boundary with signed area {signed_area:.3g}")
            return abs(signed_area), DEGENERATE_CENTROID

        centroid = Point(
            x=moment_x / (6.0 * signed_area) + origin[0],
            y=moment_y / (6.0 * signed_area) + origin[1]
        )
        return abs(signed_area), centroid

    def area(self, boundary: Boundary) -> float:
        return self.compute(boundary)[0]

    def centroid(self, boundary: Boundary) -> Point:
        return self.compute(boundary)[1]

    @staticmethod
    def perimeter(boundary: Boundary) -> float:
        """Total length of all rings, holes included"""
        return sum(GeometryUtils.ring_perimeter(ring.points) for ring in boundary.rings())
