"""
Polygonizer - exact island geometry for sets of axis-aligned rectangles

Groups rectangles into islands of touching or overlapping members, builds
the exact union boundary of each island (outer ring plus holes), measures
area and centroid, and answers containment and wall-distance queries.
"""

from .config import GeometryConfig, get_config, validate_config
from .exceptions import PolygonizerError, InvalidRectangle, BoundaryConsistencyError
from .models import (
    Point, Rectangle, Ring, Boundary, IslandRecord, IslandFailure,
    EdgeDistances, PointMeasurement
)
from .pipeline import (
    IslandCatalog, analyze, find_containing_island, edge_distances, area, centroid
)
from .loaders import load_rectangles, load_sample_rectangles

__all__ = [
    "GeometryConfig",
    "get_config",
    "validate_config",
    "PolygonizerError",
    "InvalidRectangle",
    "BoundaryConsistencyError",
    "Point",
    "Rectangle",
    "Ring",
    "Boundary",
    "IslandRecord",
    "IslandFailure",
    "EdgeDistances",
    "PointMeasurement",
    "IslandCatalog",
    "analyze",
    "find_containing_island",
    "edge_distances",
    "area",
    "centroid",
    "load_rectangles",
    "load_sample_rectangles",
]
