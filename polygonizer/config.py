"""
Configuration settings for Polygonizer
"""

from dataclasses import dataclass


@dataclass
class GeometryConfig:
    """Geometry engine configuration"""
    # Coordinates are snapped to a grid of 10 ** -coordinate_precision
    # before union construction
    coordinate_precision: int = 6

    # Point-on-boundary and edge classification tolerance (input units)
    boundary_tolerance: float = 1e-6

    # Below this absolute signed area an island is reported as degenerate
    degenerate_area_epsilon: float = 1e-6

    # Quadtree settings
    quadtree_capacity: int = 4  # Items per node before it subdivides
    quadtree_max_depth: int = 10

    # Above this many rectangles the grouper switches from pairwise BFS
    # to the sorted sweep
    sweep_threshold: int = 64

    # Error handling
    fail_fast: bool = False  # Raise on the first island that fails to build
    cross_check_union: bool = False  # Verify each union area with shapely

    @property
    def grid_scale(self) -> int:
        return 10 ** self.coordinate_precision


# Global config instance
config = GeometryConfig()


def get_config() -> GeometryConfig:
    """Get global configuration"""
    return config


def validate_config(config: GeometryConfig) -> None:
    """
    Validate that all configuration values are usable.
    Raises ValueError if any value is missing or invalid.
    """
    errors = []

    if config.coordinate_precision is None:
        errors.append("coordinate_precision is required in config but not set")
    elif not 0 <= config.coordinate_precision <= 12:
        errors.append(f"coordinate_precision must be between 0 and 12, got {config.coordinate_precision}")

    if config.boundary_tolerance is None or config.boundary_tolerance < 0:
        errors.append(f"boundary_tolerance must be non-negative, got {config.boundary_tolerance}")

    if config.degenerate_area_epsilon is None or config.degenerate_area_epsilon < 0:
        errors.append(f"degenerate_area_epsilon must be non-negative, got {config.degenerate_area_epsilon}")

    if config.quadtree_capacity is None or config.quadtree_capacity < 1:
        errors.append(f"quadtree_capacity must be at least 1, got {config.quadtree_capacity}")

    if config.quadtree_max_depth is None or config.quadtree_max_depth < 0:
        errors.append(f"quadtree_max_depth must be non-negative, got {config.quadtree_max_depth}")

    if config.sweep_threshold is None or config.sweep_threshold < 0:
        errors.append(f"sweep_threshold must be non-negative, got {config.sweep_threshold}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
