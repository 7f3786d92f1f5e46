"""
Purpose: Core data models for the traffic domain.
What it does:
Defines a traffic signal and the two states it can be in.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from routing.models import Point


class SignalState(str, Enum):
    GREEN = "green"
    RED = "red"

    def flipped(self) -> SignalState:
        return SignalState.RED if self is SignalState.GREEN else SignalState.GREEN


@dataclass
class TrafficSignal:
    """
    A signal installed at a fixed intersection. Only the controller changes
    its state.
    """
    id: int
    position: Point
    state: SignalState = SignalState.GREEN
