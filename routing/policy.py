"""
Purpose: Central configuration for routing and traffic signals.
What it does:

Stores all tunable thresholds:

EPSILON = 1.0               (same-intersection tolerance, map units)
TRAFFIC_PENALTY = 20        (extra cost for arriving at a red signal)
SIGNAL_RADIUS = 2           (how close a node must be to "have" a signal)
SIGNAL_CYCLE_MS = 5000      (how often every signal flips)

Rule: No logic here - just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class RoutingPolicy:
    """
    Central configuration for the path planner and the signal controller.
    """

    # --- Geometry ---
    # Two points closer than this are treated as the same intersection.
    epsilon: float = 1.0

    # --- Traffic cost model ---
    # Added to an edge's length when the node it leads to has a red signal.
    traffic_penalty: float = 20.0

    # A node is "at" a signal when it lies within this distance of it.
    # Keep it small enough that two signals never overlap.
    signal_radius: float = 2.0

    # --- Signal cycle ---
    # Period of the shared green/red toggle.
    signal_cycle_ms: int = 5000

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup.
        """
        if self.epsilon <= 0:
            raise ValueError("epsilon must be > 0")

        if self.traffic_penalty < 0:
            raise ValueError("traffic_penalty must be >= 0")

        if self.signal_radius <= 0:
            raise ValueError("signal_radius must be > 0")

        if self.signal_cycle_ms <= 0:
            raise ValueError("signal_cycle_ms must be > 0")


def default_routing_policy() -> RoutingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = RoutingPolicy()
    p.validate()
    return p


def routing_policy_from_env() -> RoutingPolicy:
    """
    Same as the default policy, with overrides read from the environment
    (or a .env file):

    ROUTING_EPSILON=1.0
    TRAFFIC_PENALTY=20
    SIGNAL_RADIUS=2
    SIGNAL_CYCLE_MS=5000
    """
    load_dotenv()
    defaults = RoutingPolicy()
    p = RoutingPolicy(
        epsilon=float(os.getenv("ROUTING_EPSILON", defaults.epsilon)),
        traffic_penalty=float(os.getenv("TRAFFIC_PENALTY", defaults.traffic_penalty)),
        signal_radius=float(os.getenv("SIGNAL_RADIUS", defaults.signal_radius)),
        signal_cycle_ms=int(os.getenv("SIGNAL_CYCLE_MS", defaults.signal_cycle_ms)),
    )
    p.validate()
    return p
