"""
Purpose: Orchestrator for a single delivery vehicle (the "glue").
What it does:
Reacts to "order ready for delivery", plans a route with the injected
planner, drives it with the animator, and tells the order subsystem when the
food has arrived.

    idle -> planning -> animating -> delivered -> idle

Only one delivery is active at a time. A new ready order while another is
planning or on the road supersedes it: the old traversal's timers are
cancelled before anything new is armed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from delivery.animator import AnimationFrame, DeliveryAnimator, eta_minutes
from delivery.models import STATUS_STARTING, Delivery, Vehicle, VehicleStatus
from delivery.policy import DeliveryPolicy, default_delivery_policy
from orders.models import Order, OrderStatus
from routing.models import Point
from routing.network import RoadNetwork, default_network
from routing.planner import PathPlanner, TrafficAwarePlanner
from routing.policy import RoutingPolicy, default_routing_policy
from simulation.destinations import DestinationGenerator
from traffic.controller import TrafficSignalController
from traffic.models import TrafficSignal

from .events import (
    DeliveryCompleted,
    DeliveryProgress,
    DeliveryStarted,
    EventBus,
    OrderReadyForDelivery,
    TrafficSignalsChanged,
)
from .state_machines.delivery_state import begin_animating, begin_planning, cancel_delivery, mark_delivered
from .state_machines.order_state import (
    revert_order_to_ready,
    transition_order_to_delivered,
    transition_order_to_out_for_delivery,
    transition_order_to_ready,
)

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    PLANNING = "planning"
    ANIMATING = "animating"
    DELIVERED = "delivered"


@dataclass(frozen=True)
class SessionSnapshot:
    """
    Everything presentation needs to draw one frame.
    """
    state: SessionState
    vehicle_position: Point
    vehicle_status: VehicleStatus
    status_text: str
    eta_minutes: int
    signals: Tuple[TrafficSignal, ...]


class DeliverySession:
    """
    Coordinates planner and animator for one vehicle based at the depot.
    """

    def __init__(
        self,
        network: RoadNetwork,
        signals: TrafficSignalController,
        planner: PathPlanner,
        scheduler,
        *,
        events: Optional[EventBus] = None,
        policy: Optional[DeliveryPolicy] = None,
        destinations: Optional[DestinationGenerator] = None,
    ):
        self.network = network
        self.signals = signals
        self.planner = planner
        self.scheduler = scheduler
        self.events = events or EventBus()
        self.policy = policy or default_delivery_policy()
        self.destinations = destinations or DestinationGenerator(
            seed=self.policy.random_seed,
            low=self.policy.destination_min,
            high=self.policy.destination_max,
        )

        self.vehicle = Vehicle(id=1, position=self.policy.depot)
        self.animator = DeliveryAnimator(
            scheduler,
            self.vehicle,
            self.policy,
            on_frame=self._on_frame,
            on_complete=self._on_traversal_complete,
        )

        self.state = SessionState.IDLE
        self.status_text = ""
        self.eta_minutes = 0
        self.orders: Dict[str, Order] = {}

        self._active: Optional[Delivery] = None
        self._start_handle = None
        # true only when this session armed the signal cycle itself
        self._owns_signals = False
        self._prep_handles: Dict[str, object] = {}

        self.events.subscribe(OrderReadyForDelivery, self.handle_order_ready)
        self.signals.subscribe(self._on_signals_changed)

    # --- Lifecycle ---

    def start(self) -> None:
        """
        Start the signal cycle unless it is already running. Deliveries can be
        accepted before or after.
        """
        if self.signals.running:
            return
        self.signals.start(self.scheduler)
        self._owns_signals = True

    def close(self) -> None:
        """
        Cancel every timer this session armed and stop listening. The signal
        cycle is only stopped if this session started it.
        """
        self.events.unsubscribe(OrderReadyForDelivery, self.handle_order_ready)
        self.signals.unsubscribe(self._on_signals_changed)
        for handle in self._prep_handles.values():
            handle.cancel()
        self._prep_handles.clear()
        if self._start_handle is not None:
            self._start_handle.cancel()
            self._start_handle = None
        self.animator.cancel()
        if self._owns_signals:
            self.signals.stop()
            self._owns_signals = False

    @property
    def active_delivery(self) -> Optional[Delivery]:
        return self._active

    # --- Order intake ---

    def place_order(self, item: str) -> Order:
        """
        Take an order for `item` to a random customer. The kitchen holds it for
        prep_time_ms, then it is announced as ready for delivery.
        """
        raw = self.destinations.next_point()
        destination = self.network.snap_to_network(raw)
        order = Order.new(item=item, destination=destination)
        self.orders[order.id] = order

        logger.info("Order %s placed for %s, delivering to %s (raw %s)", order.id, item, destination, raw)
        self._prep_handles[order.id] = self.scheduler.call_later(
            self.policy.prep_time_ms, self._order_prepared, order.id
        )
        return order

    def _order_prepared(self, order_id: str) -> None:
        self._prep_handles.pop(order_id, None)
        order = self.orders[order_id]
        transition_order_to_ready(order)
        self.events.publish(OrderReadyForDelivery(order_id=order.id, item=order.item, destination=order.destination))

    # --- idle -> planning ---

    def handle_order_ready(self, event: OrderReadyForDelivery) -> Delivery:
        # Validate the incoming order before touching the running delivery,
        # so a rejected event leaves the session as it was.
        order = self.orders.get(event.order_id)
        if order is not None:
            transition_order_to_out_for_delivery(order)

        if self._active is not None:
            self._supersede(self._active)

        depot = self.policy.depot
        destination = self.network.snap_to_network(event.destination)

        delivery = Delivery.new(order_id=event.order_id, origin=depot, destination=destination)
        begin_planning(delivery)
        self._active = delivery
        self.state = SessionState.PLANNING
        self.vehicle.park(depot)

        delivery.path = self.planner.plan(depot, destination)

        self.status_text = STATUS_STARTING
        self.eta_minutes = eta_minutes(0.0, self.policy.delivery_time_ms)
        logger.info("Delivery %s for order %s planned: %s", delivery.id, event.order_id, delivery.path)
        self.events.publish(DeliveryStarted(
            order_id=event.order_id,
            delivery_id=delivery.id,
            path=tuple(delivery.path),
        ))

        # a DeliveryStarted handler may already have superseded this delivery
        if self._active is not delivery:
            return delivery

        if self.policy.start_delay_ms > 0:
            self._start_handle = self.scheduler.call_later(self.policy.start_delay_ms, self._begin_animation, delivery.id)
        else:
            self._begin_animation(delivery.id)
        return delivery

    # --- planning -> animating ---

    def _begin_animation(self, delivery_id: str) -> None:
        self._start_handle = None
        delivery = self._active
        if delivery is None or delivery.id != delivery_id:
            return

        begin_animating(delivery)
        self.state = SessionState.ANIMATING
        self.animator.start(delivery.path, self.policy.delivery_time_ms)

    def _on_frame(self, frame: AnimationFrame) -> None:
        self.status_text = frame.status
        self.eta_minutes = frame.eta_minutes
        delivery = self._active
        if delivery is None:
            return
        self.events.publish(DeliveryProgress(
            order_id=delivery.order_id,
            delivery_id=delivery.id,
            at_ms=self.scheduler.now_ms(),
            position=frame.position,
            vehicle_status=self.vehicle.status.value,
            status_text=frame.status,
            eta_minutes=frame.eta_minutes,
            progress=frame.progress,
        ))

    # --- animating -> delivered -> idle ---

    def _on_traversal_complete(self, frame: AnimationFrame) -> None:
        delivery = self._active
        if delivery is None:
            return

        mark_delivered(delivery)
        order = self.orders.get(delivery.order_id)
        if order is not None:
            transition_order_to_delivered(order)

        self.state = SessionState.DELIVERED
        self._active = None
        logger.info("Delivery %s for order %s completed at %s", delivery.id, delivery.order_id, frame.position)
        self.events.publish(DeliveryCompleted(order_id=delivery.order_id, delivery_id=delivery.id))

        # a DeliveryCompleted handler may have dispatched the next order already
        if self._active is None:
            self.vehicle.park(self.policy.depot)
            self.state = SessionState.IDLE
            self.status_text = ""

    def _supersede(self, delivery: Delivery) -> None:
        if self._start_handle is not None:
            self._start_handle.cancel()
            self._start_handle = None
        self.animator.cancel()

        cancel_delivery(delivery)
        order = self.orders.get(delivery.order_id)
        if order is not None and order.status == OrderStatus.OUT_FOR_DELIVERY:
            revert_order_to_ready(order)

        logger.warning("Delivery %s for order %s superseded by a newer order", delivery.id, delivery.order_id)
        self._active = None

    # --- Observation ---

    def _on_signals_changed(self, signals: List[TrafficSignal]) -> None:
        self.events.publish(TrafficSignalsChanged(signals=tuple(signals)))

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            vehicle_position=self.vehicle.position,
            vehicle_status=self.vehicle.status,
            status_text=self.status_text,
            eta_minutes=self.eta_minutes,
            signals=tuple(self.signals.snapshot()),
        )


def build_session(
    scheduler,
    *,
    routing_policy: Optional[RoutingPolicy] = None,
    delivery_policy: Optional[DeliveryPolicy] = None,
    network: Optional[RoadNetwork] = None,
    events: Optional[EventBus] = None,
    start: bool = True,
) -> DeliverySession:
    """
    Wire network, signals, planner and session together. The returned session
    owns the signal cycle; call close() to stop everything.
    """
    routing_policy = routing_policy or default_routing_policy()
    delivery_policy = delivery_policy or default_delivery_policy()

    network = network or default_network(epsilon=routing_policy.epsilon)
    signals = TrafficSignalController(policy=routing_policy)
    planner = TrafficAwarePlanner(network, signals, routing_policy)

    session = DeliverySession(
        network,
        signals,
        planner,
        scheduler,
        events=events,
        policy=delivery_policy,
    )
    if start:
        session.start()
    return session
