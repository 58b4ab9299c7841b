"""
Spatial indexing (region quadtree) for island containment queries
"""

from typing import List, Optional, Sequence

from loguru import logger

from .geometry_utils import GeometryUtils, Bounds
from ..config import get_config, GeometryConfig
from ..models import Boundary, IslandRecord, Point


def contains_point(boundary: Boundary, point: Point, tolerance: float = 1e-6) -> bool:
    """
    Check if the boundary's fill contains the point

    Points on any ring count as contained. Otherwise the point must be
    inside the outer ring and outside every hole.
    """
    p = point.as_tuple()
    if not GeometryUtils.bounds_contain_point(boundary.bounds, p[0], p[1], tolerance):
        return False

    for ring in boundary.rings():
        if GeometryUtils.point_on_ring(ring.points, p, tolerance):
            return True

    if not GeometryUtils.point_in_ring(boundary.outer.points, p[0], p[1]):
        return False
    for hole in boundary.holes:
        if GeometryUtils.point_in_ring(hole.points, p[0], p[1]):
            return False
    return True


class QuadtreeNode:
    """
    Quadtree node holding island records

    A leaf subdivides once it holds more than capacity records and is above
    max_depth. A record spanning several quadrants is pushed into each of
    them.
    """

    def __init__(
        self,
        bounds: Bounds,
        depth: int = 0,
        capacity: int = 4,
        max_depth: int = 10,
        tolerance: float = 1e-6
    ):
        self.bounds = bounds
        self.depth = depth
        self.capacity = capacity
        self.max_depth = max_depth
        self.tolerance = tolerance
        self.items: List[IslandRecord] = []
        self.children: Optional[List["QuadtreeNode"]] = None

    def insert(self, record: IslandRecord) -> bool:
        """Insert a record into every leaf its bounds intersect"""
        if not GeometryUtils.bounds_intersect(self.bounds, record.bounds):
            return False

        if self.children is None:
            self.items.append(record)
            if len(self.items) > self.capacity and self.depth < self.max_depth:
                self._subdivide()
            return True

        for child in self.children:
            child.insert(record)
        return True

    def _subdivide(self) -> None:
        min_x, min_y, max_x, max_y = self.bounds
        mid_x = (min_x + max_x) / 2
        mid_y = (min_y + max_y) / 2

        self.children = [
            self._child((min_x, min_y, mid_x, mid_y)),
            self._child((mid_x, min_y, max_x, mid_y)),
            self._child((min_x, mid_y, mid_x, max_y)),
            self._child((mid_x, mid_y, max_x, max_y)),
        ]

        # Existing records move down into the children
        items = self.items
        self.items = []
        for record in items:
            for child in self.children:
                child.insert(record)

    def _child(self, bounds: Bounds) -> "QuadtreeNode":
        return QuadtreeNode(bounds, self.depth + 1, self.capacity, self.max_depth, self.tolerance)

    def find_containing(self, point: Point) -> Optional[IslandRecord]:
        """Return the first record whose fill contains the point"""
        if not GeometryUtils.bounds_contain_point(self.bounds, point.x, point.y, self.tolerance):
            return None

        for record in self.items:
            if contains_point(record.boundary, point, self.tolerance):
                return record

        if self.children is not None:
            for child in self.children:
                result = child.find_containing(point)
                if result is not None:
                    return result

        return None

    def node_count(self) -> int:
        if self.children is None:
            return 1
        return 1 + sum(child.node_count() for child in self.children)

    def height(self) -> int:
        if self.children is None:
            return self.depth
        return max(child.height() for child in self.children)


class SpatialIndex:
    """
    Quadtree over a snapshot of island records

    Usage:
        index = SpatialIndex.build(records)
        record = index.find_containing(Point(x=5, y=5))
    """

    def __init__(self, root: Optional[QuadtreeNode], size: int):
        self.root = root
        self.size = size

    def __len__(self) -> int:
        return self.size

    @classmethod
    def build(
        cls,
        records: Sequence[IslandRecord],
        config: Optional[GeometryConfig] = None
    ) -> "SpatialIndex":
        """
        Build an index whose root covers every record's bounds

        Records are inserted in ascending id order, so the first match in
        any node is the lowest id.
        """
        config = config or get_config()
        if not records:
            return cls(None, 0)

        root = QuadtreeNode(
            GeometryUtils.bounds_union([r.bounds for r in records]),
            capacity=config.quadtree_capacity,
            max_depth=config.quadtree_max_depth,
            tolerance=config.boundary_tolerance
        )
        for record in sorted(records, key=lambda r: r.id):
            root.insert(record)

        index = cls(root, len(records))
        logger.debug(f"Indexed {len(records)} islands in {index.node_count()} quadtree nodes")
        return index

    def find_containing(self, point: Point) -> Optional[IslandRecord]:
        if self.root is None:
            return None
        return self.root.find_containing(point)

    def node_count(self) -> int:
        return self.root.node_count() if self.root else 0

    def depth(self) -> int:
        return self.root.height() if self.root else 0
