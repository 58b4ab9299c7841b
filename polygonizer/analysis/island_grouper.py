"""
Island grouping - partitions rectangles into connected components

Two rectangles are connected when they overlap, contain one another, or
merely touch along an edge or at a corner. Adjacency is decided on the
same integer grid the union builder snaps to, so rectangles whose snapped
edges meet always share an island.
"""

import heapq
from collections import deque
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from .geometry_utils import GeometryUtils
from .union_builder import RectilinearUnionBuilder
from ..config import get_config, GeometryConfig
from ..models import Rectangle

GridBox = Tuple[int, int, int, int]


class _DisjointSet:
    """Union-find with path halving and union by size"""

    def __init__(self, n: int):
        self.parent = list(range(n))
        self.size = [1] * n

    def find(self, i: int) -> int:
        while self.parent[i] != i:
            self.parent[i] = self.parent[self.parent[i]]
            i = self.parent[i]
        return i

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return
        if self.size[ra] < self.size[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        self.size[ra] += self.size[rb]


class RectangleIslandGrouper:
    """
    Group rectangles into islands

    Islands are returned ordered by their smallest input index, and each
    island lists its members by ascending input index. Both strategies
    produce the same partition.
    """

    def __init__(self, config: Optional[GeometryConfig] = None):
        self.config = config or get_config()
        self.snapper = RectilinearUnionBuilder(self.config)

    def group(self, rectangles: Sequence[Rectangle]) -> List[List[int]]:
        """
        Partition rectangles into islands

        Args:
            rectangles: Input rectangles

        Returns:
            List of islands, each a list of indices into rectangles
        """
        if not rectangles:
            return []

        if len(rectangles) > self.config.sweep_threshold:
            islands = self.group_sweep(rectangles)
            strategy = "sweep"
        else:
            islands = self.group_pairwise(rectangles)
            strategy = "pairwise"

        logger.debug(f"Grouped {len(rectangles)} rectangles into {len(islands)} islands ({strategy})")
        return islands

    def snap_boxes(self, rectangles: Sequence[Rectangle]) -> List[GridBox]:
        return [self.snapper.snap_rectangle(r) for r in rectangles]

    @staticmethod
    def are_connected(a: GridBox, b: GridBox) -> bool:
        """Touch-or-overlap adjacency of grid boxes with inclusive bounds"""
        # Containment is a special case of overlap
        return GeometryUtils.bounds_intersect(a, b)

    def group_pairwise(self, rectangles: Sequence[Rectangle]) -> List[List[int]]:
        """Breadth-first traversal over the pairwise adjacency graph, O(n^2)"""
        boxes = self.snap_boxes(rectangles)
        islands = []
        visited = set()

        for i in range(len(boxes)):
            if i in visited:
                continue

            group = []
            queue = deque([i])
            visited.add(i)

            while queue:
                current = queue.popleft()
                group.append(current)

                for j in range(len(boxes)):
                    if j not in visited and self.are_connected(boxes[current], boxes[j]):
                        queue.append(j)
                        visited.add(j)

            islands.append(sorted(group))

        return islands

    def group_sweep(self, rectangles: Sequence[Rectangle]) -> List[List[int]]:
        """
        Sweep over x-sorted rectangles with union-find

        Rectangles are visited by left edge. An active set, expired by
        right edge, holds every rectangle whose x-range can still reach the
        sweep position, so only x-overlapping pairs are tested for y-overlap.
        """
        boxes = self.snap_boxes(rectangles)
        n = len(boxes)
        dsu = _DisjointSet(n)
        order = sorted(range(n), key=lambda i: (boxes[i][0], i))

        active = {}  # index -> grid box
        expiry = []  # heap of (max_x, index)

        for i in order:
            min_x, min_y, max_x, max_y = boxes[i]

            # Inclusive bounds: a box ending exactly at min_x still touches it
            while expiry and expiry[0][0] < min_x:
                _, gone = heapq.heappop(expiry)
                active.pop(gone, None)

            for j, other in active.items():
                if min_y <= other[3] and other[1] <= max_y:
                    dsu.union(i, j)

            active[i] = boxes[i]
            heapq.heappush(expiry, (max_x, i))

        components = {}
        for i in range(n):
            components.setdefault(dsu.find(i), []).append(i)

        # Members are already ascending; order islands by first member
        return sorted(components.values(), key=lambda members: members[0])
