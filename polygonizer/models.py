"""
Pydantic models for the island geometry engine

All models are immutable value objects: a snapshot produced by one
analyze() call is never patched in place.
"""

from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from shapely.geometry import Polygon

# (min_x, min_y, max_x, max_y), same order as shapely's .bounds
Bounds = Tuple[float, float, float, float]
Coord = Tuple[float, float]


# ============================================================
# Input Types
# ============================================================

class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def as_tuple(self) -> Coord:
        return (self.x, self.y)


class Rectangle(BaseModel):
    """Axis-aligned rectangle; (x, y) is the minimum corner"""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def bounds(self) -> Bounds:
        return (self.x, self.y, self.max_x, self.max_y)

    def contains_point(self, x: float, y: float) -> bool:
        return self.x <= x <= self.max_x and self.y <= y <= self.max_y


# ============================================================
# Boundary Types
# ============================================================

class Ring(BaseModel):
    """
    Closed rectilinear ring

    Vertices are stored open: the closing vertex is implicit and the first
    vertex is never repeated at the end.
    """
    model_config = ConfigDict(frozen=True)

    points: List[Coord]

    def __len__(self) -> int:
        return len(self.points)

    def edges(self) -> Iterator[Tuple[Coord, Coord]]:
        """Consecutive vertex pairs, including the closing edge"""
        n = len(self.points)
        for i in range(n):
            yield self.points[i], self.points[(i + 1) % n]

    def closed_coords(self) -> List[Coord]:
        """Vertices with the first one repeated at the end"""
        if not self.points:
            return []
        return list(self.points) + [self.points[0]]

    @property
    def bounds(self) -> Bounds:
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return (min(xs), min(ys), max(xs), max(ys))


class Boundary(BaseModel):
    """Union geometry of one island: outer ring plus hole rings"""
    model_config = ConfigDict(frozen=True)

    outer: Ring
    holes: List[Ring] = Field(default_factory=list)

    def rings(self) -> List[Ring]:
        return [self.outer] + list(self.holes)

    @property
    def bounds(self) -> Bounds:
        # Holes lie inside the outer ring
        return self.outer.bounds

    def to_geojson(self) -> Dict[str, Any]:
        """Convert to a GeoJSON Polygon geometry"""
        return {
            "type": "Polygon",
            "coordinates": [
                [list(c) for c in ring.closed_coords()] for ring in self.rings()
            ]
        }

    def to_shapely(self) -> Polygon:
        return Polygon(self.outer.points, [h.points for h in self.holes])


class IslandRecord(BaseModel):
    """Analysis result for one island"""
    model_config = ConfigDict(frozen=True)

    id: int
    area: float
    centroid: Point
    boundary: Boundary
    rectangle_indices: List[int] = Field(default_factory=list)  # Indices into the analyzed input
    perimeter: float = 0.0  # Outer ring plus holes
    degenerate: bool = False  # Centroid is the (0, 0) sentinel

    @property
    def bounds(self) -> Bounds:
        return self.boundary.bounds


class IslandFailure(BaseModel):
    """An island whose boundary could not be built"""
    model_config = ConfigDict(frozen=True)

    island_id: int
    rectangle_indices: List[int]
    reason: str


# ============================================================
# Query Results
# ============================================================

class EdgeDistances(NamedTuple):
    """
    Distance to the nearest boundary wall in each cardinal direction

    "up" is toward decreasing y, "down" toward increasing y. All four are
    None when the query point lies on the boundary.
    """
    left: Optional[float]
    right: Optional[float]
    up: Optional[float]
    down: Optional[float]

    @property
    def on_boundary(self) -> bool:
        return all(d is None for d in self)

    @property
    def width(self) -> Optional[float]:
        if self.left is None or self.right is None:
            return None
        return self.left + self.right

    @property
    def height(self) -> Optional[float]:
        if self.up is None or self.down is None:
            return None
        return self.up + self.down


class PointMeasurement(BaseModel):
    """Combined point query: containing island, wall distances and extents"""
    island_id: int
    point: Point
    left: Optional[float] = None
    right: Optional[float] = None
    up: Optional[float] = None
    down: Optional[float] = None
    width: Optional[float] = None  # left + right
    height: Optional[float] = None  # up + down
    island_bounds: Bounds

    @property
    def distances(self) -> EdgeDistances:
        return EdgeDistances(self.left, self.right, self.up, self.down)
