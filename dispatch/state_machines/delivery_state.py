from delivery.models import Delivery, DeliveryStatus

class DeliveryStateException(Exception):
    """Raised when an invalid delivery transition is attempted."""
    pass

def begin_planning(delivery: Delivery) -> Delivery:
    """
    Called as soon as the session accepts an order for delivery.
    """
    if delivery.status != DeliveryStatus.PENDING:
        raise DeliveryStateException(f"Cannot start planning delivery {delivery.id} from {delivery.status}")

    delivery.status = DeliveryStatus.PLANNING
    return delivery

def begin_animating(delivery: Delivery) -> Delivery:
    """
    Called when the planned path is handed to the animator.
    A delivery without at least two waypoints cannot be driven.
    """
    if delivery.status != DeliveryStatus.PLANNING:
        raise DeliveryStateException(f"Cannot animate delivery {delivery.id} from {delivery.status}")
    if len(delivery.path) < 2:
        raise DeliveryStateException(f"Delivery {delivery.id} has no drivable path ({len(delivery.path)} points)")

    delivery.status = DeliveryStatus.ANIMATING
    return delivery

def mark_delivered(delivery: Delivery) -> Delivery:
    """
    Called when the animator reports the terminal frame.
    """
    if delivery.status != DeliveryStatus.ANIMATING:
        raise DeliveryStateException(f"Delivery {delivery.id} is not ANIMATING. Current: {delivery.status}")

    delivery.status = DeliveryStatus.DELIVERED
    return delivery

def cancel_delivery(delivery: Delivery) -> Delivery:
    """
    Superseded: a newer order took the vehicle while this one was still
    planning or on the road.
    """
    if not delivery.is_active:
        raise DeliveryStateException(f"Cannot cancel delivery {delivery.id} in {delivery.status}")

    delivery.status = DeliveryStatus.CANCELLED
    return delivery
