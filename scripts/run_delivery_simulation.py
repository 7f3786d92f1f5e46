import asyncio
import logging
import os
import sys
from dataclasses import replace

from delivery.policy import delivery_policy_from_env
from dispatch.events import DeliveryCompleted, DeliveryStarted, EventBus
from dispatch.session import build_session
from routing.policy import routing_policy_from_env
from simulation.scheduler import AsyncioScheduler, VirtualClock
from simulation.trace import TraceRecorder

MENU = ["Margherita", "Pepperoni", "Veggie Supreme", "BBQ Chicken", "Spicy Diavola"]


def print_events(events: EventBus) -> None:
    events.subscribe(DeliveryStarted, lambda e: print(f"  -> Order {e.order_id[:8]} out for delivery via {[(p.x, p.y) for p in e.path]}"))
    events.subscribe(DeliveryCompleted, lambda e: print(f"  -> Order {e.order_id[:8]} delivered!"))


def run_simulation(num_orders: int = 5, seed: int = 7):
    """
    Offline run on a virtual clock: orders are placed one delivery apart so
    each finishes before the next is ready.
    """
    print("=== STARTING DELIVERY SIMULATION (virtual clock) ===")

    clock = VirtualClock()
    events = EventBus()
    print_events(events)
    recorder = TraceRecorder(events)

    policy = delivery_policy_from_env()
    if policy.random_seed is None:
        policy = replace(policy, random_seed=seed)
    session = build_session(clock, routing_policy=routing_policy_from_env(), delivery_policy=policy, events=events)

    cycle_ms = policy.prep_time_ms + policy.start_delay_ms + policy.delivery_time_ms + 1000
    for i in range(num_orders):
        item = MENU[i % len(MENU)]
        order = session.place_order(item)
        print(f"Order {order.id[:8]} ({item}) -> ({order.destination.x}, {order.destination.y})")
        clock.advance(cycle_ms)
        snapshot = session.snapshot()
        print(f"  state={snapshot.state.value} vehicle=({snapshot.vehicle_position.x}, {snapshot.vehicle_position.y}) "
              f"status='{snapshot.status_text}' eta={snapshot.eta_minutes}min")

    session.close()

    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    output_path = os.path.join(base_dir, "delivery_trace.csv")
    recorder.write_csv(output_path)

    print("\n--- Per-delivery summary ---")
    print(recorder.summary().to_string(index=False))
    print("\n=== SIMULATION COMPLETE ===")
    print(f"Deliveries completed: {len(recorder.completed)} / {num_orders}")
    print(f"Trace written to '{output_path}'.")


async def run_live(item: str = "Margherita"):
    """
    Real-time run on the asyncio loop: one order, printed as it moves.
    """
    print("=== STARTING DELIVERY SIMULATION (real time) ===")
    scheduler = AsyncioScheduler()
    events = EventBus()
    print_events(events)
    done = asyncio.Event()
    events.subscribe(DeliveryCompleted, lambda e: done.set())

    session = build_session(scheduler, routing_policy=routing_policy_from_env(), delivery_policy=delivery_policy_from_env(), events=events)
    session.place_order(item)
    try:
        while not done.is_set():
            snapshot = session.snapshot()
            print(f"  [{snapshot.state.value}] ({snapshot.vehicle_position.x:.1f}, {snapshot.vehicle_position.y:.1f}) "
                  f"'{snapshot.status_text}' ETA {snapshot.eta_minutes} min")
            await asyncio.sleep(1)
    finally:
        session.close()
    print("=== SIMULATION COMPLETE ===")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if "--live" in sys.argv:
        asyncio.run(run_live())
    else:
        run_simulation()
