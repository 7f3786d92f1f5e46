"""
Purpose: Moves the vehicle along a planned path, one tick at a time.
What it does:
- Splits the drive into total_ticks = duration_s * ticks_per_second ticks
- On each tick derives progress, the current segment, the interpolated
  position and the remaining ETA, and reports them as an AnimationFrame
- Emits a terminal "Delivered" frame at progress 1 and stops

Timing model: every path point gets an equal share of the total time,
regardless of how long its segment is. The last share is spent at the
destination.

Single-flight: starting a traversal cancels the previous one first. A
generation counter turns any callback that slipped through into a no-op.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from routing.models import Point

from .models import STATUS_DELIVERED, STATUS_DELIVERING, Vehicle, VehicleStatus
from .policy import DeliveryPolicy, default_delivery_policy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnimationFrame:
    """
    What one tick reports to observers.
    """
    step: int
    total_ticks: int
    progress: float
    position: Point
    segment_index: int
    eta_minutes: int
    status: str

    @property
    def is_terminal(self) -> bool:
        return self.status == STATUS_DELIVERED


FrameListener = Callable[[AnimationFrame], None]
CompletionListener = Callable[[AnimationFrame], None]


def eta_minutes(progress: float, total_duration_ms: float) -> int:
    """Whole minutes left, rounded up. 0 once progress reaches 1."""
    remaining = max(0.0, 1.0 - progress)
    return math.ceil(remaining * total_duration_ms / 60000)


def total_ticks_for(total_duration_ms: float, ticks_per_second: int) -> int:
    return max(1, round(total_duration_ms / 1000 * ticks_per_second))


class _Traversal:
    """Mutable state of the traversal in flight."""

    def __init__(self, generation: int, path: List[Point], total_duration_ms: float, total_ticks: int):
        self.generation = generation
        self.path = path
        self.total_duration_ms = total_duration_ms
        self.total_ticks = total_ticks
        self.step_duration_ms = total_duration_ms / total_ticks
        self.step = 0
        self.segment_index = 0
        self.progress = 0.0


class DeliveryAnimator:

    def __init__(
        self,
        scheduler,
        vehicle: Vehicle,
        policy: Optional[DeliveryPolicy] = None,
        on_frame: Optional[FrameListener] = None,
        on_complete: Optional[CompletionListener] = None,
    ):
        self.scheduler = scheduler
        self.vehicle = vehicle
        self.policy = policy or default_delivery_policy()
        self.on_frame = on_frame
        self.on_complete = on_complete

        self._generation = 0
        self._traversal: Optional[_Traversal] = None
        self._handle = None
        self.last_frame: Optional[AnimationFrame] = None

    # --- Public API ---

    def start(self, path: Sequence[Point], total_duration_ms: float) -> bool:
        """
        Begin driving `path` over `total_duration_ms`. Any traversal already
        running is cancelled first.

        A path with fewer than two points is ignored: nothing is scheduled,
        nothing changes, and False is returned.
        """
        if not path or len(path) < 2:
            logger.debug("Ignoring degenerate path with %d point(s)", len(path) if path else 0)
            return False
        if total_duration_ms <= 0:
            raise ValueError("total_duration_ms must be > 0")

        self.cancel()

        self._generation += 1
        total_ticks = total_ticks_for(total_duration_ms, self.policy.ticks_per_second)
        self._traversal = _Traversal(self._generation, list(path), total_duration_ms, total_ticks)
        logger.info("Animating %d-waypoint path over %d ticks (%.0f ms)", len(path), total_ticks, total_duration_ms)

        self._tick(self._generation)
        return True

    def cancel(self) -> None:
        """Stop the running traversal, if any. Its completion never fires."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._traversal is not None:
            logger.debug("Cancelled traversal at step %d/%d", self._traversal.step, self._traversal.total_ticks)
        self._traversal = None

    @property
    def is_running(self) -> bool:
        return self._traversal is not None

    @property
    def progress(self) -> float:
        if self._traversal is not None:
            return self._traversal.progress
        return self.last_frame.progress if self.last_frame else 0.0

    # --- Tick loop ---

    def _tick(self, generation: int) -> None:
        traversal = self._traversal
        if traversal is None or traversal.generation != generation:
            return
        self._handle = None

        progress = traversal.step / traversal.total_ticks
        traversal.progress = progress

        if progress >= 1:
            self._finish(traversal)
            return

        path = traversal.path
        last_segment = len(path) - 2

        raw = progress * len(path) - traversal.segment_index
        while raw >= 1 and traversal.segment_index < last_segment:
            traversal.segment_index += 1
            raw = progress * len(path) - traversal.segment_index

        start = path[traversal.segment_index]
        end = path[traversal.segment_index + 1]
        position = start.lerp(end, min(1.0, raw))

        self.vehicle.position = position
        self.vehicle.status = VehicleStatus.DELIVERING

        self._emit(AnimationFrame(
            step=traversal.step,
            total_ticks=traversal.total_ticks,
            progress=progress,
            position=position,
            segment_index=traversal.segment_index,
            eta_minutes=eta_minutes(progress, traversal.total_duration_ms),
            status=STATUS_DELIVERING,
        ))

        # A listener may have started or cancelled a traversal from inside the frame callback.
        if self._traversal is not traversal:
            return

        traversal.step += 1
        self._handle = self.scheduler.call_later(traversal.step_duration_ms, self._tick, generation)

    def _finish(self, traversal: _Traversal) -> None:
        destination = traversal.path[-1]
        self.vehicle.position = destination

        frame = AnimationFrame(
            step=traversal.step,
            total_ticks=traversal.total_ticks,
            progress=1.0,
            position=destination,
            segment_index=len(traversal.path) - 2,
            eta_minutes=0,
            status=STATUS_DELIVERED,
        )
        self._traversal = None
        self._emit(frame)
        logger.info("Traversal complete at %s", destination)
        if self.on_complete:
            self.on_complete(frame)

    def _emit(self, frame: AnimationFrame) -> None:
        self.last_frame = frame
        if self.on_frame:
            self.on_frame(frame)
