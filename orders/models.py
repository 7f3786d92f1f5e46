"""
Purpose: Domain models for the Orders capability.
What it does:
- Defines the Order record the delivery core reacts to
  (id, item, delivery destination, timestamps, status)

Defines enums/constants:
- OrderStatus = PREPARING | READY | OUT_FOR_DELIVERY | DELIVERED

Payments, reviews and menus belong to the order subsystem and are not
modelled here.

Rule: No routing, no timers. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

from routing.models import Point


class OrderStatus(Enum):
    PREPARING = "PREPARING"
    READY = "READY"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"


@dataclass
class Order:
    """
    A single customer order on its way from the kitchen to the door.
    """

    id: str
    item: str
    destination: Point

    created_at: datetime = field(default_factory=datetime.utcnow)
    ready_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None

    status: OrderStatus = OrderStatus.PREPARING

    @staticmethod # Factory method with a generated id
    def new(item: str, destination: Point) -> Order:
        return Order(id=str(uuid.uuid4()), item=item, destination=destination)
