"""
Orders domain package.

Public API:
- Domain models: Order, OrderStatus

Should not contain business logic.
"""
from .models import Order, OrderStatus

__all__ = ["Order",
           "OrderStatus",
           ]
