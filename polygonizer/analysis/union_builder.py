"""
Rectilinear union builder - exact boundary of a set of rectangles

Sweep-line contour extraction:

  1. Snap every coordinate to a fixed-scale integer grid
  2. Split the plane into x-slabs at every distinct rectangle edge
  3. For each slab, merge the y-intervals of the rectangles spanning it
  4. Emit vertical edges where neighbouring slabs disagree and horizontal
     edges at the ends of every covered interval
  5. Stitch the directed edges into closed rings and classify them

Edges are directed so the filled side is on the left: outer rings come out
counter-clockwise (positive shoelace area) and holes clockwise.
"""

from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger
from shapely.geometry import box
from shapely.ops import unary_union

from .geometry_utils import GeometryUtils
from ..config import get_config, GeometryConfig
from ..exceptions import BoundaryConsistencyError
from ..models import Boundary, Rectangle, Ring

GridPoint = Tuple[int, int]
Direction = Tuple[int, int]
Edge = Tuple[GridPoint, GridPoint]


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _turn_preference(d: Direction) -> Tuple[Direction, ...]:
    """Candidate exits for a walk arriving along d: right, straight, left, back"""
    dx, dy = d
    return ((dy, -dx), (dx, dy), (-dy, dx), (-dx, -dy))


class RectilinearUnionBuilder:
    """
    Build the exact union boundary of one island

    Usage:
        builder = RectilinearUnionBuilder()
        boundary = builder.build(rectangles)
    """

    def __init__(self, config: Optional[GeometryConfig] = None):
        self.config = config or get_config()
        self.scale = self.config.grid_scale

    # ============================================================
    # Grid conversion
    # ============================================================

    def snap(self, value: float) -> int:
        return int(round(value * self.scale))

    def unsnap(self, value: int) -> float:
        return value / self.scale

    def snap_rectangle(self, rect: Rectangle) -> Tuple[int, int, int, int]:
        return (self.snap(rect.x), self.snap(rect.y), self.snap(rect.max_x), self.snap(rect.max_y))

    # ============================================================
    # Public API
    # ============================================================

    def build(self, rectangles: Sequence[Rectangle]) -> Boundary:
        """
        Build the boundary of the union of rectangles

        Args:
            rectangles: Non-empty rectangle set forming one island

        Returns:
            Boundary with one outer ring and one hole ring per enclosed gap

        Raises:
            BoundaryConsistencyError: if the edge arrangement cannot be
                stitched into well-formed rings
        """
        boxes = [self.snap_rectangle(r) for r in rectangles]
        boxes = [b for b in boxes if b[0] < b[2] and b[1] < b[3]]
        if not boxes:
            raise BoundaryConsistencyError("island has no rectangle with positive area on the grid")

        edges = self.boundary_edges(boxes)
        rings = self.stitch(edges)
        outer, holes = self.classify(rings)

        boundary = Boundary(
            outer=self._to_ring(outer),
            holes=[self._to_ring(h) for h in holes]
        )
        logger.debug(
            f"Built boundary from {len(boxes)} rectangles: "
            f"{len(boundary.outer)} outer vertices, {len(boundary.holes)} holes"
        )

        if self.config.cross_check_union:
            self.cross_check(rectangles, outer, holes)

        return boundary

    # ============================================================
    # Sweep
    # ============================================================

    def slab_coverage(
        self,
        boxes: Sequence[Tuple[int, int, int, int]]
    ) -> Tuple[List[int], List[List[Tuple[int, int]]]]:
        """
        Covered y-intervals per x-slab

        Returns:
            (xs, coverage) where coverage[i] holds the merged intervals of
            the slab between xs[i] and xs[i + 1]
        """
        xs = sorted({b[0] for b in boxes} | {b[2] for b in boxes})
        by_start = sorted(boxes)

        coverage = []
        active = []
        k = 0
        for i in range(len(xs) - 1):
            x_lo = xs[i]
            while k < len(by_start) and by_start[k][0] <= x_lo:
                active.append(by_start[k])
                k += 1
            # xs holds every right edge, so ending after x_lo means spanning the slab
            active = [b for b in active if b[2] > x_lo]
            coverage.append(GeometryUtils.merge_intervals([(b[1], b[3]) for b in active]))

        return xs, coverage

    def boundary_edges(self, boxes: Sequence[Tuple[int, int, int, int]]) -> List[Edge]:
        """Directed boundary edges with the filled side on the left"""
        xs, coverage = self.slab_coverage(boxes)
        edges: List[Edge] = []

        # Vertical edges where a slab's coverage differs from its neighbour's
        for i, x in enumerate(xs):
            left = coverage[i - 1] if i > 0 else []
            right = coverage[i] if i < len(coverage) else []
            for y0, y1 in GeometryUtils.subtract_intervals(right, left):
                edges.append(((x, y1), (x, y0)))  # filled to the east, heading -y
            for y0, y1 in GeometryUtils.subtract_intervals(left, right):
                edges.append(((x, y0), (x, y1)))  # filled to the west, heading +y

        # Horizontal edges at both ends of every covered interval
        for i, intervals in enumerate(coverage):
            x_lo, x_hi = xs[i], xs[i + 1]
            for y0, y1 in intervals:
                edges.append(((x_lo, y0), (x_hi, y0)))
                edges.append(((x_hi, y1), (x_lo, y1)))

        return edges

    # ============================================================
    # Stitching
    # ============================================================

    def stitch(self, edges: Sequence[Edge]) -> List[List[GridPoint]]:
        """
        Walk directed edges into closed rings

        Where several edges leave one vertex (rectangles meeting only at a
        corner) the walk takes the right-most turn, which keeps the empty
        side on the right together: the outside of an island becomes a
        single ring and every enclosed gap its own ring.
        """
        outgoing: Dict[GridPoint, Dict[Direction, GridPoint]] = {}
        indegree: Counter = Counter()

        for start, end in edges:
            direction = (_sign(end[0] - start[0]), _sign(end[1] - start[1]))
            if direction == (0, 0) or (direction[0] and direction[1]):
                raise BoundaryConsistencyError(f"non-rectilinear edge {start} -> {end}")
            exits = outgoing.setdefault(start, {})
            if direction in exits:
                raise BoundaryConsistencyError(f"overlapping boundary edges leaving {start}")
            exits[direction] = end
            indegree[end] += 1

        for vertex in set(outgoing) | set(indegree):
            out_count = len(outgoing.get(vertex, {}))
            if out_count != indegree[vertex]:
                raise BoundaryConsistencyError(
                    f"unmatched half-edges at {vertex}: {indegree[vertex]} in, {out_count} out"
                )

        rings = []
        for start in sorted(outgoing):
            while outgoing[start]:
                first = min(outgoing[start])
                vertex = outgoing[start].pop(first)
                heading = first
                ring = [start]

                while True:
                    exits = outgoing.get(vertex, {})
                    chosen = None
                    for candidate in _turn_preference(heading):
                        if candidate in exits or (vertex == start and candidate == first):
                            chosen = candidate
                            break
                    if chosen is None:
                        raise BoundaryConsistencyError(f"boundary walk dead-ends at {vertex}")
                    if vertex == start and chosen == first:
                        break
                    ring.append(vertex)
                    vertex = exits.pop(chosen)
                    heading = chosen

                rings.append(GeometryUtils.remove_collinear(ring))

        return rings

    def classify(
        self,
        rings: Sequence[List[GridPoint]]
    ) -> Tuple[List[GridPoint], List[List[GridPoint]]]:
        """
        Split rings into the outer ring and holes by signed area

        Raises:
            BoundaryConsistencyError: on degenerate rings, anything other
                than exactly one outer ring, or a hole outside the outer ring
        """
        outers = []
        holes = []
        for ring in rings:
            if len(ring) < 4:
                raise BoundaryConsistencyError(f"ring with {len(ring)} vertices")
            area = GeometryUtils.signed_area(ring)
            if area > 0:
                outers.append(ring)
            elif area < 0:
                holes.append(ring)
            else:
                raise BoundaryConsistencyError(f"zero-area ring starting at {ring[0]}")

        if len(outers) != 1:
            raise BoundaryConsistencyError(f"expected exactly one outer ring, found {len(outers)}")
        outer = GeometryUtils.rotate_to_min(outers[0])

        for hole in holes:
            for vertex in hole:
                on_outer = GeometryUtils.point_on_ring(outer, vertex, 0)
                if not on_outer and not GeometryUtils.point_in_ring(outer, vertex[0], vertex[1]):
                    raise BoundaryConsistencyError(f"hole vertex {vertex} lies outside the outer ring")

        holes = sorted((GeometryUtils.rotate_to_min(h) for h in holes), key=lambda h: h[0])
        return outer, holes

    def _to_ring(self, points: Sequence[GridPoint]) -> Ring:
        return Ring(points=[(self.unsnap(x), self.unsnap(y)) for x, y in points])

    # ============================================================
    # Verification
    # ============================================================

    def cross_check(
        self,
        rectangles: Sequence[Rectangle],
        outer: Sequence[GridPoint],
        holes: Sequence[Sequence[GridPoint]]
    ) -> None:
        """Compare the built area with an independent shapely union"""
        grid_area = GeometryUtils.signed_area(outer) + sum(GeometryUtils.signed_area(h) for h in holes)
        area = grid_area / (self.scale * self.scale)

        expected = unary_union([box(r.x, r.y, r.max_x, r.max_y) for r in rectangles]).area
        # Snapping moves each edge by at most half a grid step
        allowed = sum(r.width + r.height for r in rectangles) / self.scale + 1e-9

        if abs(area - expected) > allowed:
            raise BoundaryConsistencyError(
                f"union area {area:.6f} differs from reference {expected:.6f}"
            )
