"""
Purpose: Core data models for the delivery domain.
What it does:
Defines the Vehicle that drives the route and the Delivery it is working on.
Both are plain mutable records; the animator and the session update them in
place and observers read them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List
import uuid

from routing.models import Point

STATUS_STARTING = "Starting delivery"
STATUS_DELIVERING = "delivering"
STATUS_DELIVERED = "Delivered"


class VehicleStatus(str, Enum):
    IDLE = "idle"
    DELIVERING = "delivering"


class DeliveryStatus(str, Enum):
    PENDING = "pending"
    PLANNING = "planning"
    ANIMATING = "animating"
    DELIVERED = "delivered"
    # superseded by a newer delivery before it finished
    CANCELLED = "cancelled"


@dataclass
class Vehicle:
    """
    The single delivery vehicle. Parked at the depot unless a delivery is
    animating.
    """
    id: int
    position: Point
    status: VehicleStatus = VehicleStatus.IDLE

    def park(self, depot: Point) -> None:
        self.position = depot
        self.status = VehicleStatus.IDLE


@dataclass
class Delivery:
    """
    One trip from the depot to a customer.
    """
    id: str
    order_id: str
    origin: Point
    destination: Point
    path: List[Point] = field(default_factory=list)
    status: DeliveryStatus = DeliveryStatus.PENDING

    @classmethod
    def new(cls, order_id: str, origin: Point, destination: Point) -> Delivery:
        return cls(id=str(uuid.uuid4()), order_id=order_id, origin=origin, destination=destination)

    @property
    def is_active(self) -> bool:
        return self.status in (DeliveryStatus.PLANNING, DeliveryStatus.ANIMATING)
