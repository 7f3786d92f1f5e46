"""
Purpose: Geometry models for the road network.
What it does:
- Point (x, y) on the normalized 0-100 map plane
- RoadSegment (start, end), an undirected horizontal or vertical road piece

Rule: No graph search here. Models only.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

# Two points closer than this are the same intersection.
EPSILON = 1.0


@dataclass(frozen=True)
class Point:
    """
    A position on the map, in percent of the viewport on each axis.
    """
    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def is_close(self, other: Point, epsilon: float = EPSILON) -> bool:
        return self.distance_to(other) < epsilon

    def key(self) -> Tuple[int, int]:
        """Rounded coordinates, used to settle a node only once during search."""
        return (round(self.x), round(self.y))

    def lerp(self, other: Point, t: float) -> Point:
        return Point(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
        )


@dataclass(frozen=True)
class RoadSegment:
    """
    An undirected straight road piece. Only horizontal and vertical
    roads exist on the map.
    """
    start: Point
    end: Point

    def __post_init__(self) -> None:
        if not (self.is_horizontal or self.is_vertical):
            raise ValueError(f"Road segment {self.start} -> {self.end} must be horizontal or vertical")

    @property
    def is_horizontal(self) -> bool:
        return self.start.y == self.end.y

    @property
    def is_vertical(self) -> bool:
        return self.start.x == self.end.x

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    def other_end(self, point: Point, epsilon: float = EPSILON):
        """
        If `point` sits on one of this segment's endpoints, return the opposite
        endpoint. Otherwise None.
        """
        if self.start.is_close(point, epsilon):
            return self.end
        if self.end.is_close(point, epsilon):
            return self.start
        return None
