"""
Geometry utilities for interval, ring and point calculations
"""

import math
from typing import List, Tuple, Sequence

Interval = Tuple[float, float]
Coord = Tuple[float, float]
Bounds = Tuple[float, float, float, float]


class GeometryUtils:
    """Utility functions for geometric operations"""

    # ============================================================
    # 1-D intervals
    # ============================================================

    @staticmethod
    def merge_intervals(intervals: Sequence[Interval]) -> List[Interval]:
        """
        Merge overlapping or touching intervals

        Returns sorted, pairwise separated intervals covering the same set
        """
        merged: List[Interval] = []
        for start, end in sorted(intervals):
            if merged and start <= merged[-1][1]:
                if end > merged[-1][1]:
                    merged[-1] = (merged[-1][0], end)
            else:
                merged.append((start, end))
        return merged

    @staticmethod
    def subtract_intervals(
        a: Sequence[Interval],
        b: Sequence[Interval]
    ) -> List[Interval]:
        """
        Parts of a not covered by b

        Both inputs must be merged (sorted and separated). Zero-length
        leftovers are dropped.
        """
        result: List[Interval] = []
        j = 0
        for start, end in a:
            cursor = start
            # Skip b intervals entirely to the left of this one
            while j < len(b) and b[j][1] <= cursor:
                j += 1
            k = j
            while k < len(b) and b[k][0] < end:
                if b[k][0] > cursor:
                    result.append((cursor, b[k][0]))
                cursor = max(cursor, b[k][1])
                if cursor >= end:
                    break
                k += 1
            if cursor < end:
                result.append((cursor, end))
        return result

    # ============================================================
    # Bounding boxes
    # ============================================================

    @staticmethod
    def bounds_union(bounds_list: Sequence[Bounds]) -> Bounds:
        """Smallest box covering every box in the list"""
        return (
            min(b[0] for b in bounds_list),
            min(b[1] for b in bounds_list),
            max(b[2] for b in bounds_list),
            max(b[3] for b in bounds_list)
        )

    @staticmethod
    def bounds_intersect(a: Bounds, b: Bounds) -> bool:
        """Inclusive box intersection test"""
        return a[0] <= b[2] and b[0] <= a[2] and a[1] <= b[3] and b[1] <= a[3]

    @staticmethod
    def bounds_contain_point(bounds: Bounds, x: float, y: float, tolerance: float = 0.0) -> bool:
        return (
            bounds[0] - tolerance <= x <= bounds[2] + tolerance and
            bounds[1] - tolerance <= y <= bounds[3] + tolerance
        )

    # ============================================================
    # Rings
    # ============================================================

    @staticmethod
    def signed_area(points: Sequence[Coord]) -> float:
        """Shoelace signed area; positive for counter-clockwise rings"""
        n = len(points)
        if n < 3:
            return 0
        area = 0
        for i in range(n):
            j = (i + 1) % n
            area += points[i][0] * points[j][1]
            area -= points[j][0] * points[i][1]
        return area / 2

    @staticmethod
    def ring_perimeter(points: Sequence[Coord]) -> float:
        """Calculate the length of a closed ring"""
        if len(points) < 2:
            return 0.0

        perimeter = 0.0
        n = len(points)
        for i in range(n):
            j = (i + 1) % n
            dx = points[j][0] - points[i][0]
            dy = points[j][1] - points[i][1]
            perimeter += math.sqrt(dx*dx + dy*dy)

        return perimeter

    @staticmethod
    def remove_collinear(points: Sequence[Coord]) -> List[Coord]:
        """
        Drop vertices that continue straight on in a rectilinear ring

        A vertex is kept only where the ring turns.
        """
        n = len(points)
        kept = []
        # Turning vertices still turn once the straight runs between them
        # are collapsed, so a single pass is enough
        for i in range(n):
            prev = points[i - 1]
            curr = points[i]
            nxt = points[(i + 1) % n]
            straight = (
                (prev[0] == curr[0] == nxt[0]) or
                (prev[1] == curr[1] == nxt[1])
            )
            if not straight:
                kept.append(curr)
        return kept

    @staticmethod
    def rotate_to_min(points: Sequence[Coord]) -> List[Coord]:
        """Rotate a ring so it starts at its smallest (x, y) vertex"""
        if not points:
            return []
        start = min(range(len(points)), key=lambda i: (points[i][0], points[i][1]))
        return list(points[start:]) + list(points[:start])

    # ============================================================
    # Point tests
    # ============================================================

    @staticmethod
    def point_on_segment(
        point: Coord,
        start: Coord,
        end: Coord,
        tolerance: float = 1e-6
    ) -> bool:
        """
        Check if the point lies on the segment

        The point must fall inside the segment's bounding box and be
        collinear with it, both within tolerance.
        """
        px, py = point
        x1, y1 = start
        x2, y2 = end

        within_box = (
            min(x1, x2) - tolerance <= px <= max(x1, x2) + tolerance and
            min(y1, y2) - tolerance <= py <= max(y1, y2) + tolerance
        )
        if not within_box:
            return False

        length = math.hypot(x2 - x1, y2 - y1)
        if length == 0:
            return math.hypot(px - x1, py - y1) <= tolerance

        # Perpendicular distance from the supporting line
        cross = (py - y1) * (x2 - x1) - (px - x1) * (y2 - y1)
        return abs(cross) / length <= tolerance

    @staticmethod
    def point_on_ring(points: Sequence[Coord], point: Coord, tolerance: float = 1e-6) -> bool:
        n = len(points)
        for i in range(n):
            if GeometryUtils.point_on_segment(point, points[i], points[(i + 1) % n], tolerance):
                return True
        return False

    @staticmethod
    def point_in_ring(points: Sequence[Coord], x: float, y: float) -> bool:
        """Point-in-polygon check (ray casting); boundary points are undefined"""
        n = len(points)
        inside = False

        j = n - 1
        for i in range(n):
            xi, yi = points[i]
            xj, yj = points[j]

            if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
                inside = not inside
            j = i

        return inside
