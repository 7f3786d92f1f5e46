"""
Purpose: The static road graph.
What it does:
- Holds the fixed set of road segments the vehicle may drive on
- Answers adjacency queries (which intersections can I reach directly?)
- Snaps arbitrary map coordinates onto the road grid so they can be used
  as pathfinding endpoints

Intersections are implicit: they are the endpoints of the segments.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Set

from .models import EPSILON, Point, RoadSegment

# Long roads as they are laid out on the map: three horizontal, three vertical.
DEFAULT_ROADS: List[RoadSegment] = [
    RoadSegment(Point(20, 20), Point(80, 20)),
    RoadSegment(Point(20, 50), Point(80, 50)),
    RoadSegment(Point(20, 80), Point(80, 80)),
    RoadSegment(Point(20, 20), Point(20, 80)),
    RoadSegment(Point(50, 20), Point(50, 80)),
    RoadSegment(Point(80, 20), Point(80, 80)),
]


class RoadNetwork:
    """
    Undirected graph of road segments.

    Every query is pure and deterministic; the network never changes after
    construction.
    """

    def __init__(self, segments: Iterable[RoadSegment], epsilon: float = EPSILON):
        self._segments = tuple(segments)
        self.epsilon = epsilon

    @classmethod
    def from_roads(cls, roads: Sequence[RoadSegment], epsilon: float = EPSILON) -> RoadNetwork:
        """
        Build a network from long roads, splitting each road wherever another
        road crosses it. Without the split, a crossing in the middle of a road
        would not be a graph node and could never be reached.
        """
        horizontal = [road for road in roads if road.is_horizontal]
        vertical = [road for road in roads if road.is_vertical and not road.is_horizontal]

        segments: List[RoadSegment] = []

        for road in horizontal:
            y = road.start.y
            low, high = sorted((road.start.x, road.end.x))
            cuts = {low, high}
            for other in vertical:
                x = other.start.x
                other_low, other_high = sorted((other.start.y, other.end.y))
                if low <= x <= high and other_low <= y <= other_high:
                    cuts.add(x)
            ordered = sorted(cuts)
            for a, b in zip(ordered, ordered[1:]):
                segments.append(RoadSegment(Point(a, y), Point(b, y)))

        for road in vertical:
            x = road.start.x
            low, high = sorted((road.start.y, road.end.y))
            cuts = {low, high}
            for other in horizontal:
                y = other.start.y
                other_low, other_high = sorted((other.start.x, other.end.x))
                if low <= y <= high and other_low <= x <= other_high:
                    cuts.add(y)
            ordered = sorted(cuts)
            for a, b in zip(ordered, ordered[1:]):
                segments.append(RoadSegment(Point(x, a), Point(x, b)))

        return cls(segments, epsilon=epsilon)

    @property
    def segments(self) -> Sequence[RoadSegment]:
        return self._segments

    # --- Adjacency ---

    def neighbors_of(self, point: Point) -> Set[Point]:
        """
        All points reachable from `point` over a single segment.
        `point` must match a segment endpoint within epsilon.
        """
        neighbors: Set[Point] = set()
        for segment in self._segments:
            other = segment.other_end(point, self.epsilon)
            if other is not None:
                neighbors.add(other)
        return neighbors

    def intersections(self) -> List[Point]:
        """Unique segment endpoints, in first-seen order."""
        seen = {}
        for segment in self._segments:
            for endpoint in (segment.start, segment.end):
                seen.setdefault(endpoint.key(), endpoint)
        return list(seen.values())

    def is_intersection(self, point: Point) -> bool:
        return any(point.is_close(node, self.epsilon) for node in self.intersections())

    def nearest_intersection(self, point: Point) -> Optional[Point]:
        nodes = self.intersections()
        if not nodes:
            return None
        return min(nodes, key=point.distance_to)

    # --- Snapping ---

    def snap_to_network(self, point: Point) -> Point:
        """
        Project `point` onto the nearest horizontal road's y and the nearest
        vertical road's x, independently. On a grid of full-length roads the
        result is always an intersection.

        If the network has no road in one direction, that coordinate is kept.
        """
        horizontal_ys = [segment.start.y for segment in self._segments if segment.is_horizontal]
        vertical_xs = [segment.start.x for segment in self._segments if segment.is_vertical]

        # min() keeps the first road on a tie
        y = min(horizontal_ys, key=lambda road_y: abs(road_y - point.y)) if horizontal_ys else point.y
        x = min(vertical_xs, key=lambda road_x: abs(road_x - point.x)) if vertical_xs else point.x
        return Point(x, y)

    def __repr__(self) -> str:
        return f"RoadNetwork(segments={len(self._segments)})"


def default_network(epsilon: float = EPSILON) -> RoadNetwork:
    """The 3x3 city grid with roads at 20, 50 and 80 on both axes."""
    return RoadNetwork.from_roads(DEFAULT_ROADS, epsilon=epsilon)
