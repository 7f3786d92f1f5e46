"""
Purpose: Messages between the delivery core and its collaborators.
What it does:
- Inbound: OrderReadyForDelivery (from the order subsystem)
- Outbound to the order subsystem: DeliveryStarted, DeliveryCompleted
- Outbound to presentation: DeliveryProgress, TrafficSignalsChanged
- EventBus: synchronous publish/subscribe keyed by event type

Handlers run in subscription order on the publisher's call stack. A handler
that raises stops the publish and the error reaches the publisher.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, DefaultDict, List, Tuple, Type

from routing.models import Point
from traffic.models import TrafficSignal


@dataclass(frozen=True)
class OrderReadyForDelivery:
    order_id: str
    item: str
    destination: Point


@dataclass(frozen=True)
class DeliveryStarted:
    order_id: str
    delivery_id: str
    path: Tuple[Point, ...]


@dataclass(frozen=True)
class DeliveryCompleted:
    order_id: str
    delivery_id: str


@dataclass(frozen=True)
class DeliveryProgress:
    """One animation tick, as presentation sees it."""
    order_id: str
    delivery_id: str
    at_ms: float
    position: Point
    vehicle_status: str
    status_text: str
    eta_minutes: int
    progress: float


@dataclass(frozen=True)
class TrafficSignalsChanged:
    signals: Tuple[TrafficSignal, ...]


Handler = Callable[[Any], None]


class EventBus:

    def __init__(self):
        self._handlers: DefaultDict[Type, List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: Type, handler: Handler) -> None:
        if handler in self._handlers.get(event_type, []):
            self._handlers[event_type].remove(handler)

    def publish(self, event: Any) -> None:
        # snapshot so a handler can (un)subscribe while we iterate
        for handler in list(self._handlers.get(type(event), [])):
            handler(event)
