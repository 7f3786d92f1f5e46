from datetime import datetime
from orders.models import Order, OrderStatus

class OrderStateException(Exception):
    """Raised when an invalid state transition is attempted."""
    pass

def transition_order_to_ready(order: Order) -> Order:
    """
    Called when the kitchen's prep timer runs out.
    """
    if order.status != OrderStatus.PREPARING:
        raise OrderStateException(f"Cannot transition order {order.id} to READY from {order.status}")

    order.status = OrderStatus.READY
    order.ready_at = datetime.utcnow()
    return order

def transition_order_to_out_for_delivery(order: Order) -> Order:
    """
    Called once a route is planned and the vehicle is about to leave.
    """
    if order.status != OrderStatus.READY:
        raise OrderStateException(f"Order {order.id} is not READY. Current: {order.status}")
    order.status = OrderStatus.OUT_FOR_DELIVERY
    return order

def transition_order_to_delivered(order: Order) -> Order:
    if order.status != OrderStatus.OUT_FOR_DELIVERY:
        raise OrderStateException(f"Order {order.id} is not OUT_FOR_DELIVERY. Current: {order.status}")
    order.status = OrderStatus.DELIVERED
    order.delivered_at = datetime.utcnow()
    return order

def revert_order_to_ready(order: Order) -> Order:
    """
    Fallback: the vehicle was taken by a newer order before this one arrived.
    The order goes back to READY so the order subsystem can resubmit it.
    """
    if order.status == OrderStatus.DELIVERED:
        raise OrderStateException(f"Order {order.id} was already delivered")
    order.status = OrderStatus.READY
    return order
