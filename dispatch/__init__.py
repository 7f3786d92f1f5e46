#Expose the high-level pipeline pieces:
#Events and the bus they travel on
#The delivery session (the "one object" entry point) and its factory

from .events import (
    DeliveryCompleted,
    DeliveryProgress,
    DeliveryStarted,
    EventBus,
    OrderReadyForDelivery,
    TrafficSignalsChanged,
)
from .session import DeliverySession, SessionSnapshot, SessionState, build_session

__all__ = [
    "EventBus",
    "OrderReadyForDelivery",
    "DeliveryStarted",
    "DeliveryCompleted",
    "DeliveryProgress",
    "TrafficSignalsChanged",
    "DeliverySession",
    "SessionSnapshot",
    "SessionState",
    "build_session",
]
