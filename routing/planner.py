"""
Purpose: Path planning strategies over the road network.
What it does:
- TrafficAwarePlanner: uniform-cost search (Dijkstra) where arriving at a red
  signal costs extra. This is the planner real deliveries use.
- AxisAlignedPlanner: the naive "go along x, then along y" route, ignoring the
  graph and the signals.
- path_cost: the traffic cost model applied to a fixed path.

Both planners are interchangeable: anything with plan(origin, destination)
works wherever a planner is expected.

Known approximation: signal states are sampled once, when planning starts.
They are not projected to the time the vehicle would actually reach each
intersection.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from traffic.controller import TrafficSignalController, state_at
from traffic.models import SignalState, TrafficSignal

from .models import Point
from .network import RoadNetwork
from .policy import RoutingPolicy, default_routing_policy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedRoute:
    """
    Output of a planner run.
    waypoints always holds at least two points: origin first, destination last.
    on_network is False when the planner fell back to a straight line.
    """
    waypoints: List[Point]
    cost: float
    on_network: bool = True


def edge_cost(
    u: Point,
    v: Point,
    signals: Sequence[TrafficSignal],
    policy: RoutingPolicy,
) -> float:
    """Length of u -> v, plus the traffic penalty if v sits at a red signal."""
    cost = u.distance_to(v)
    if state_at(signals, v, policy.signal_radius) is SignalState.RED:
        cost += policy.traffic_penalty
    return cost


def path_cost(
    path: Sequence[Point],
    signals: Sequence[TrafficSignal],
    policy: Optional[RoutingPolicy] = None,
) -> float:
    """
    Cost of driving `path` as-is: total length plus one penalty per
    waypoint (after the first) that sits at a red signal.
    """
    policy = policy or default_routing_policy()
    return sum(edge_cost(u, v, signals, policy) for u, v in zip(path, path[1:]))


def axis_aligned_path(origin: Point, destination: Point) -> List[Point]:
    """
    Move to the destination's x first, then to its y.
    Returns 2 or 3 points; never consults the road graph.
    """
    path = [origin]
    current = origin
    if current.x != destination.x:
        current = Point(destination.x, current.y)
        path.append(current)
    if current.y != destination.y:
        path.append(destination)
    if len(path) == 1:
        # Already there: a zero-length move keeps the path drivable.
        path.append(destination)
    return path


class PathPlanner:
    """
    Strategy base. Subclasses implement plan_route().
    """

    def plan_route(self, origin: Point, destination: Point) -> PlannedRoute:
        raise NotImplementedError

    def plan(self, origin: Point, destination: Point) -> List[Point]:
        return self.plan_route(origin, destination).waypoints


class AxisAlignedPlanner(PathPlanner):

    def __init__(self, signals: Optional[TrafficSignalController] = None, policy: Optional[RoutingPolicy] = None):
        # signals are only used to price the route, never to choose it
        self.signals = signals
        self.policy = policy or default_routing_policy()

    def plan_route(self, origin: Point, destination: Point) -> PlannedRoute:
        waypoints = axis_aligned_path(origin, destination)
        snapshot = self.signals.snapshot() if self.signals else []
        return PlannedRoute(waypoints=waypoints, cost=path_cost(waypoints, snapshot, self.policy))


class TrafficAwarePlanner(PathPlanner):
    """
    Uniform-cost search over the road graph.

    Frontier entries are (cost, sequence, node, path). The sequence number
    makes ties pop in insertion order and keeps heapq from comparing points.
    """

    def __init__(
        self,
        network: RoadNetwork,
        signals: TrafficSignalController,
        policy: Optional[RoutingPolicy] = None,
    ):
        self.network = network
        self.signals = signals
        self.policy = policy or default_routing_policy()

    def plan_route(self, origin: Point, destination: Point) -> PlannedRoute:
        # One sample of the signals for the whole search.
        snapshot = self.signals.snapshot()
        epsilon = self.policy.epsilon

        counter = itertools.count()
        frontier: List[Tuple[float, int, Point, List[Point]]] = [(0.0, next(counter), origin, [origin])]
        settled: Dict[Tuple[int, int], float] = {}

        while frontier:
            cost, _, node, path = heapq.heappop(frontier)

            key = node.key()
            if key in settled:
                continue
            settled[key] = cost

            if node.is_close(destination, epsilon):
                if len(path) == 1:
                    path = [origin, destination]
                logger.debug("Planned %d-waypoint route %s -> %s (cost %.1f, %d nodes settled)",
                             len(path), origin, destination, cost, len(settled))
                return PlannedRoute(waypoints=path, cost=cost)

            for neighbor in sorted(self.network.neighbors_of(node), key=lambda p: (p.x, p.y)):
                if neighbor.key() in settled:
                    continue
                next_cost = cost + edge_cost(node, neighbor, snapshot, self.policy)
                heapq.heappush(frontier, (next_cost, next(counter), neighbor, path + [neighbor]))

        # Not connected through the network: drive straight there, off-road.
        logger.warning("No road route from %s to %s; falling back to a direct path", origin, destination)
        fallback = [origin, destination]
        return PlannedRoute(waypoints=fallback, cost=path_cost(fallback, snapshot, self.policy), on_network=False)
