"""
Delivery domain package.

Public API:
- Domain models: Vehicle, VehicleStatus, Delivery, DeliveryStatus
- DeliveryAnimator and the AnimationFrame it reports
- DeliveryPolicy and its factories
"""
from .models import Delivery, DeliveryStatus, Vehicle, VehicleStatus
from .animator import AnimationFrame, DeliveryAnimator, eta_minutes
from .policy import DeliveryPolicy, default_delivery_policy, delivery_policy_from_env, fast_delivery_policy

__all__ = [
    "Delivery",
    "DeliveryStatus",
    "Vehicle",
    "VehicleStatus",
    "AnimationFrame",
    "DeliveryAnimator",
    "eta_minutes",
    "DeliveryPolicy",
    "default_delivery_policy",
    "delivery_policy_from_env",
    "fast_delivery_policy",
]
