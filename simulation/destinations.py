"""
Purpose: Random delivery locations.
What it does:
Draws integer map coordinates uniformly from [low, high] on both axes using a
seeded numpy generator, so a given seed always yields the same customers.
The raw point is not on a road; callers snap it onto the network.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from routing.models import Point


class DestinationGenerator:

    def __init__(self, seed: Optional[int] = None, low: int = 15, high: int = 85):
        if low > high:
            raise ValueError("low must be <= high")
        self.seed = seed
        self.low = low
        self.high = high
        self._rng = np.random.default_rng(seed)

    def next_point(self) -> Point:
        x, y = self._rng.integers(self.low, self.high + 1, size=2)
        return Point(float(x), float(y))
