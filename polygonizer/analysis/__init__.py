"""
Analysis modules for Polygonizer
"""

from .island_grouper import RectangleIslandGrouper
from .union_builder import RectilinearUnionBuilder
from .geometry_metrics import GeometryMetrics, DEGENERATE_CENTROID
from .edge_distance import EdgeDistanceQuery
from .spatial_index import SpatialIndex, QuadtreeNode, contains_point
from .geometry_utils import GeometryUtils

__all__ = [
    "RectangleIslandGrouper",
    "RectilinearUnionBuilder",
    "GeometryMetrics",
    "DEGENERATE_CENTROID",
    "EdgeDistanceQuery",
    "SpatialIndex",
    "QuadtreeNode",
    "contains_point",
    "GeometryUtils"
]
