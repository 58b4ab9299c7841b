"""
Error types raised by the geometry engine

Query outcomes such as "no containing island" or "point on boundary" are
ordinary None results and never raise.
"""

from typing import Any, Optional


class PolygonizerError(Exception):
    """Base class for engine errors"""


class InvalidRectangle(PolygonizerError, ValueError):
    """A rectangle with non-positive (or sub-grid) width or height"""

    def __init__(self, index: int, rectangle: Any, reason: str):
        self.index = index
        self.rectangle = rectangle
        self.reason = reason
        super().__init__(f"Invalid rectangle at index {index}: {reason} ({rectangle})")


class BoundaryConsistencyError(PolygonizerError, RuntimeError):
    """Internal invariant violation while building an island boundary"""

    def __init__(self, message: str, island_id: Optional[int] = None):
        self.island_id = island_id
        if island_id is not None:
            message = f"Island {island_id}: {message}"
        super().__init__(message)
