"""
Island catalog - orchestrates the geometry engine

Flow for one analyze() call:

  1. Validate rectangles (the whole call fails on the first bad one)
  2. Group rectangles into islands
  3. Build the exact union boundary of each island
  4. Compute area and centroid from each boundary
  5. Assemble IslandRecords and index them in a quadtree

Every call produces a fresh, read-only snapshot that replaces the previous
one wholesale.
"""

import json
import math
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from loguru import logger

from .config import get_config, validate_config, GeometryConfig
from .exceptions import BoundaryConsistencyError, InvalidRectangle
from .models import (
    Boundary, Bounds, EdgeDistances, IslandFailure, IslandRecord, Point,
    PointMeasurement, Rectangle
)
from .analysis import (
    RectangleIslandGrouper, RectilinearUnionBuilder, GeometryMetrics,
    EdgeDistanceQuery, SpatialIndex, contains_point
)

PointLike = Union[Point, Tuple[float, float]]
RectangleLike = Union[Rectangle, Dict[str, float], Sequence[float]]


def _as_point(point: PointLike) -> Point:
    if isinstance(point, Point):
        return point
    return Point(x=point[0], y=point[1])


def _as_rectangle(index: int, value: RectangleLike) -> Rectangle:
    if isinstance(value, Rectangle):
        return value
    try:
        if isinstance(value, dict):
            return Rectangle(**value)
        x, y, width, height = value
        return Rectangle(x=x, y=y, width=width, height=height)
    except (TypeError, ValueError) as e:
        raise InvalidRectangle(index, value, f"not a rectangle: {e}") from e


class IslandCatalog:
    """
    Analyze rectangles into islands and answer point queries

    Usage:
        catalog = IslandCatalog()
        records = catalog.analyze([Rectangle(x=0, y=0, width=10, height=10)])
        island_id = catalog.find_containing_island(Point(x=5, y=5))
        distances = catalog.edge_distances(island_id, Point(x=5, y=5))
    """

    def __init__(self, config: Optional[GeometryConfig] = None):
        self.config = config or get_config()
        validate_config(self.config)

        self.grouper = RectangleIslandGrouper(self.config)
        self.union_builder = RectilinearUnionBuilder(self.config)
        self.metrics = GeometryMetrics(self.config)
        self.edge_query = EdgeDistanceQuery(self.config)

        # Current snapshot
        self.rectangles: List[Rectangle] = []
        self.records: List[IslandRecord] = []
        self.failures: List[IslandFailure] = []
        self.index = SpatialIndex(None, 0)
        self._by_id: Dict[int, IslandRecord] = {}

    # ============================================================
    # Analysis
    # ============================================================

    def validate(self, rectangles: Sequence[RectangleLike]) -> List[Rectangle]:
        """
        Check every rectangle before any grouping starts

        Raises:
            InvalidRectangle: for non-finite values, a non-positive width
                or height, or a size that vanishes on the coordinate grid
        """
        resolution = 1.0 / self.config.grid_scale
        validated = []

        for i, value in enumerate(rectangles):
            rect = _as_rectangle(i, value)
            if not all(math.isfinite(v) for v in (rect.x, rect.y, rect.width, rect.height)):
                raise InvalidRectangle(i, rect, "non-finite coordinate")
            if rect.width <= 0 or rect.height <= 0:
                raise InvalidRectangle(i, rect, "width and height must be positive")
            snapped = self.union_builder.snap_rectangle(rect)
            if snapped[0] >= snapped[2] or snapped[1] >= snapped[3]:
                raise InvalidRectangle(i, rect, f"smaller than the coordinate resolution {resolution:g}")
            validated.append(rect)

        return validated

    def analyze(self, rectangles: Sequence[RectangleLike]) -> List[IslandRecord]:
        """
        Run the full analysis and replace the current snapshot

        Args:
            rectangles: Rectangle models, dicts or (x, y, width, height) tuples

        Returns:
            IslandRecords in id order; ids follow island discovery order
        """
        rects = self.validate(rectangles)

        islands = self.grouper.group(rects)
        logger.info(f"Grouped {len(rects)} rectangles into {len(islands)} islands")

        records = []
        failures = []
        for island_id, members in enumerate(islands):
            try:
                records.append(self._build_record(island_id, members, rects))
            except BoundaryConsistencyError as e:
                if self.config.fail_fast:
                    raise BoundaryConsistencyError(str(e), island_id=island_id) from e
                logger.error(f"Island {island_id} skipped: {e}")
                failures.append(IslandFailure(
                    island_id=island_id,
                    rectangle_indices=members,
                    reason=str(e)
                ))

        self.rectangles = rects
        self.records = records
        self.failures = failures
        self._by_id = {r.id: r for r in records}
        self.index = SpatialIndex.build(records, self.config)

        logger.info(
            f"Analysis complete: {len(records)} islands, "
            f"total area {sum(r.area for r in records):.2f}"
            + (f", {len(failures)} failed" if failures else "")
        )
        return list(records)

    def _build_record(
        self,
        island_id: int,
        members: List[int],
        rects: Sequence[Rectangle]
    ) -> IslandRecord:
        boundary = self.union_builder.build([rects[i] for i in members])
        island_area, island_centroid = self.metrics.compute(boundary)
        degenerate = island_area < self.config.degenerate_area_epsilon

        logger.debug(
            f"Island {island_id}: {len(members)} rectangles, area {island_area:.2f}, "
            f"centroid ({island_centroid.x:.2f}, {island_centroid.y:.2f})"
        )
        return IslandRecord(
            id=island_id,
            area=island_area,
            centroid=island_centroid,
            boundary=boundary,
            rectangle_indices=members,
            perimeter=self.metrics.perimeter(boundary),
            degenerate=degenerate
        )

    # ============================================================
    # Queries
    # ============================================================

    def get_record(self, island_id: int) -> IslandRecord:
        """Raises KeyError for an unknown id"""
        return self._by_id[island_id]

    def find_record(self, point: PointLike) -> Optional[IslandRecord]:
        return self.index.find_containing(_as_point(point))

    def find_containing_island(self, point: PointLike) -> Optional[int]:
        """Id of the island whose fill contains the point (indexed lookup)"""
        record = self.find_record(point)
        return record.id if record else None

    def edge_distances(self, island_id: int, point: PointLike) -> EdgeDistances:
        return self.edge_query.distances(self.get_record(island_id).boundary, _as_point(point))

    def measure_at_point(self, point: PointLike) -> Optional[PointMeasurement]:
        """
        Wall distances and the width and height of the island at a point

        Returns None when no island contains the point.
        """
        point = _as_point(point)
        record = self.find_record(point)
        if record is None:
            return None

        distances = self.edge_query.distances(record.boundary, point)
        return PointMeasurement(
            island_id=record.id,
            point=point,
            left=distances.left,
            right=distances.right,
            up=distances.up,
            down=distances.down,
            width=distances.width,
            height=distances.height,
            island_bounds=record.bounds
        )

    def island_bounds_at(self, point: PointLike) -> Optional[Bounds]:
        """Bounding box of the island containing the point"""
        record = self.find_record(point)
        return record.bounds if record else None

    def rectangles_at(self, point: PointLike) -> Optional[List[Rectangle]]:
        """Input rectangles of the island containing the point"""
        record = self.find_record(point)
        if record is None:
            return None
        return [self.rectangles[i] for i in record.rectangle_indices]

    def summary(self) -> Dict[str, Any]:
        return {
            "rectangles": len(self.rectangles),
            "islands": len(self.records),
            "failed_islands": len(self.failures),
            "holes": sum(len(r.boundary.holes) for r in self.records),
            "total_area": sum(r.area for r in self.records),
            "total_perimeter": sum(r.perimeter for r in self.records),
            "degenerate_islands": sum(1 for r in self.records if r.degenerate),
            "index_nodes": self.index.node_count(),
            "index_depth": self.index.depth()
        }

    def save(self, output_path: str) -> str:
        """Save the current snapshot to a JSON file"""
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

        data = {
            "islands": [r.model_dump() for r in self.records],
            "failures": [f.model_dump() for f in self.failures],
            "summary": self.summary()
        }
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logger.info(f"Saved {len(self.records)} islands to {output_path}")
        return output_path


# ============================================================
# Functional API
# ============================================================

def analyze(
    rectangles: Sequence[RectangleLike],
    config: Optional[GeometryConfig] = None
) -> List[IslandRecord]:
    """Group rectangles into islands and measure each one"""
    return IslandCatalog(config).analyze(rectangles)


def find_containing_island(
    records: Sequence[IslandRecord],
    point: PointLike,
    config: Optional[GeometryConfig] = None
) -> Optional[int]:
    """Linear scan in id order; returns the first containing island's id"""
    config = config or get_config()
    point = _as_point(point)
    for record in sorted(records, key=lambda r: r.id):
        if contains_point(record.boundary, point, config.boundary_tolerance):
            return record.id
    return None


def edge_distances(
    boundary: Boundary,
    point: PointLike,
    config: Optional[GeometryConfig] = None
) -> EdgeDistances:
    return EdgeDistanceQuery(config).distances(boundary, _as_point(point))


def area(record: IslandRecord) -> float:
    return record.area


def centroid(record: IslandRecord) -> Point:
    return record.centroid
