"""
Simulation support package.

Public API:
- Scheduler, TimerHandle, VirtualClock, AsyncioScheduler
- DestinationGenerator (seeded random customers)

TraceRecorder lives in simulation.trace; it depends on dispatch events, so it
is not re-exported here.
"""
from .scheduler import AsyncioScheduler, Scheduler, TimerHandle, VirtualClock
from .destinations import DestinationGenerator

__all__ = [
    "Scheduler",
    "TimerHandle",
    "VirtualClock",
    "AsyncioScheduler",
    "DestinationGenerator",
]
