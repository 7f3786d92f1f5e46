"""
Purpose: Owns every traffic signal on the map and cycles them.
What it does:
- Creates one signal per configured intersection, all GREEN
- Flips every signal at once on each tick (the only mutator)
- Answers "is there a signal near this point, and what colour is it?"

The controller knows nothing about deliveries. It runs on its own timer.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from routing.models import Point
from routing.policy import RoutingPolicy, default_routing_policy

from .models import SignalState, TrafficSignal

logger = logging.getLogger(__name__)

DEFAULT_SIGNAL_POSITIONS: List[Point] = [
    Point(50, 20),
    Point(50, 50),
    Point(20, 50),
    Point(80, 50),
]

SignalListener = Callable[[List[TrafficSignal]], None]


class TrafficSignalController:

    def __init__(self, positions: Optional[Sequence[Point]] = None, policy: Optional[RoutingPolicy] = None):
        self.policy = policy or default_routing_policy()
        if positions is None:
            positions = DEFAULT_SIGNAL_POSITIONS
        self._signals = [
            TrafficSignal(id=index, position=position, state=SignalState.GREEN)
            for index, position in enumerate(positions)
        ]
        # Plain threading lock: uncontended on the cooperative scheduler,
        # serializes reads/writes if a caller drives tick() from another thread.
        self._lock = threading.Lock()
        self._listeners: List[SignalListener] = []
        self._timer = None

    # --- Mutator ---

    def tick(self) -> None:
        """Flip every signal simultaneously (green <-> red)."""
        with self._lock:
            for signal in self._signals:
                signal.state = signal.state.flipped()
            states = [replace(signal) for signal in self._signals]

        logger.debug("Traffic signals flipped to %s", states[0].state.value if states else "n/a")
        for listener in list(self._listeners):
            listener(states)

    # --- Queries ---

    def state_near(self, point: Point, radius: Optional[float] = None) -> Optional[SignalState]:
        """
        State of the signal within `radius` of `point`, or None if no signal
        is that close. Signals never overlap, so the first hit is the answer.
        """
        radius = self.policy.signal_radius if radius is None else radius
        with self._lock:
            for signal in self._signals:
                if signal.position.distance_to(point) < radius:
                    return signal.state
        return None

    def snapshot(self) -> List[TrafficSignal]:
        """Copies of the current signals; safe to keep after the next tick."""
        with self._lock:
            return [replace(signal) for signal in self._signals]

    # --- Timer lifecycle ---

    def subscribe(self, listener: SignalListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: SignalListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start(self, scheduler) -> None:
        """Arm the fixed-period cycle on `scheduler`. Calling twice is a no-op."""
        if self._timer is not None:
            return
        self._timer = scheduler.call_every(self.policy.signal_cycle_ms, self.tick)
        logger.info("Traffic signal cycle started (%d signals, every %d ms)", len(self._signals), self.policy.signal_cycle_ms)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @property
    def running(self) -> bool:
        return self._timer is not None


def state_at(signals: Sequence[TrafficSignal], point: Point, radius: float) -> Optional[SignalState]:
    """
    Same lookup as TrafficSignalController.state_near, over a frozen snapshot.
    """
    for signal in signals:
        if signal.position.distance_to(point) < radius:
            return signal.state
    return None
