import pytest

from routing.models import Point
from routing.policy import RoutingPolicy
from simulation.scheduler import VirtualClock
from traffic.controller import DEFAULT_SIGNAL_POSITIONS, TrafficSignalController
from traffic.models import SignalState


@pytest.fixture
def controller():
    return TrafficSignalController()


def test_signals_start_green(controller):
    signals = controller.snapshot()
    assert len(signals) == len(DEFAULT_SIGNAL_POSITIONS)
    assert all(signal.state == SignalState.GREEN for signal in signals)


def test_tick_flips_every_signal_together(controller):
    controller.tick()
    assert {signal.state for signal in controller.snapshot()} == {SignalState.RED}

    controller.tick()
    assert {signal.state for signal in controller.snapshot()} == {SignalState.GREEN}


def test_state_near(controller):
    assert controller.state_near(Point(50, 20)) == SignalState.GREEN
    assert controller.state_near(Point(51, 21), radius=2) == SignalState.GREEN
    assert controller.state_near(Point(35, 20)) is None
    # (20, 20) is the depot: no signal there
    assert controller.state_near(Point(20, 20)) is None

    controller.tick()
    assert controller.state_near(Point(80, 50)) == SignalState.RED


def test_snapshot_is_a_copy(controller):
    before = controller.snapshot()
    controller.tick()
    assert before[0].state == SignalState.GREEN
    assert controller.snapshot()[0].state == SignalState.RED


def test_cycle_runs_on_the_scheduler():
    """
    The controller flips every signal_cycle_ms once started, and stops cleanly.
    """
    clock = VirtualClock()
    controller = TrafficSignalController(policy=RoutingPolicy(signal_cycle_ms=5000))
    seen = []
    controller.subscribe(lambda signals: seen.append(signals[0].state))

    controller.start(clock)
    controller.start(clock)  # second start must not arm a second timer
    assert controller.running

    clock.advance(4999)
    assert seen == []

    clock.advance(1)
    assert seen == [SignalState.RED]

    clock.advance(5000)
    assert seen == [SignalState.RED, SignalState.GREEN]

    controller.stop()
    clock.advance(20000)
    assert len(seen) == 2
    assert not controller.running
    assert clock.pending() == 0
