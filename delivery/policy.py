"""
Purpose: Central configuration for the delivery simulation timings.
What it does:

Stores all tunable durations and rates:

PREP_TIME_MS = 8000         (kitchen time before the order is ready)
DELIVERY_TIME_MS = 10000    (how long the drive is animated for)
START_DELAY_MS = 500        ("Starting delivery" pause before the vehicle moves)
TICKS_PER_SECOND = 60
DESTINATION_RANGE = 15..85  (where random customers are placed)

Rule: No logic here - just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from routing.models import Point


@dataclass(frozen=True)
class DeliveryPolicy:
    """
    Central configuration for the delivery session and animator.
    """

    # --- Depot ---
    # Where the restaurant is and where the vehicle parks between deliveries.
    depot: Point = Point(20, 20)

    # --- Stage durations ---
    prep_time_ms: int = 8000
    delivery_time_ms: int = 10000
    start_delay_ms: int = 500

    # --- Animation ---
    ticks_per_second: int = 60

    # --- Random customers ---
    destination_min: int = 15
    destination_max: int = 85
    # None means a fresh, unpredictable sequence on every run.
    random_seed: Optional[int] = None

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup.
        """
        if self.prep_time_ms < 0:
            raise ValueError("prep_time_ms must be >= 0")

        if self.delivery_time_ms <= 0:
            raise ValueError("delivery_time_ms must be > 0")

        if self.start_delay_ms < 0:
            raise ValueError("start_delay_ms must be >= 0")

        if self.ticks_per_second <= 0:
            raise ValueError("ticks_per_second must be > 0")

        if self.destination_min > self.destination_max:
            raise ValueError("destination_min must be <= destination_max")

        if not (0 <= self.destination_min and self.destination_max <= 100):
            raise ValueError("destination range must stay on the 0-100 map")


def default_delivery_policy() -> DeliveryPolicy:
    """
    Convenience factory for the default policy.
    """
    p = DeliveryPolicy()
    p.validate()
    return p


def fast_delivery_policy() -> DeliveryPolicy:
    """
    Example: short stages for demos and smoke runs.
    """
    p = DeliveryPolicy(
        prep_time_ms=1000,
        delivery_time_ms=3000,
        start_delay_ms=100,
    )
    p.validate()
    return p


def delivery_policy_from_env() -> DeliveryPolicy:
    """
    Default policy with overrides from the environment (or a .env file):

    PREP_TIME_MS=8000
    DELIVERY_TIME_MS=10000
    START_DELAY_MS=500
    TICKS_PER_SECOND=60
    DELIVERY_SEED=42
    """
    load_dotenv()
    defaults = DeliveryPolicy()
    seed = os.getenv("DELIVERY_SEED")
    p = DeliveryPolicy(
        prep_time_ms=int(os.getenv("PREP_TIME_MS", defaults.prep_time_ms)),
        delivery_time_ms=int(os.getenv("DELIVERY_TIME_MS", defaults.delivery_time_ms)),
        start_delay_ms=int(os.getenv("START_DELAY_MS", defaults.start_delay_ms)),
        ticks_per_second=int(os.getenv("TICKS_PER_SECOND", defaults.ticks_per_second)),
        random_seed=int(seed) if seed else None,
    )
    p.validate()
    return p
