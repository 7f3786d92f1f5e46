#Marks traffic as a package.
#Re-exports the signal models and the controller that cycles them.
#No business logic.

from .models import SignalState, TrafficSignal
from .controller import DEFAULT_SIGNAL_POSITIONS, TrafficSignalController, state_at

__all__ = [
    "SignalState",
    "TrafficSignal",
    "TrafficSignalController",
    "DEFAULT_SIGNAL_POSITIONS",
    "state_at",
]
