import math

import pytest

from delivery.animator import DeliveryAnimator, eta_minutes, total_ticks_for
from delivery.models import STATUS_DELIVERED, STATUS_DELIVERING, Vehicle, VehicleStatus
from delivery.policy import DeliveryPolicy
from routing.models import Point
from simulation.scheduler import VirtualClock

DEPOT = Point(20, 20)
L_PATH = [Point(20, 20), Point(50, 20), Point(50, 50)]


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def recorder():
    class Recorder:
        def __init__(self):
            self.frames = []
            self.completions = []

        def on_frame(self, frame):
            self.frames.append(frame)

        def on_complete(self, frame):
            self.completions.append(frame)

    return Recorder()


@pytest.fixture
def animator(clock, recorder):
    vehicle = Vehicle(id=1, position=DEPOT)
    return DeliveryAnimator(
        clock,
        vehicle,
        DeliveryPolicy(ticks_per_second=60),
        on_frame=recorder.on_frame,
        on_complete=recorder.on_complete,
    )


def test_tick_count_and_halfway_point(clock, recorder, animator):
    """
    10 s at 60 ticks/s is 600 ticks. Tick 300 is exactly halfway.
    """
    assert animator.start(L_PATH, 10000)
    clock.advance(10050)

    frames = recorder.frames
    assert frames[0].total_ticks == 600
    assert len(frames) == 601  # ticks 0..599 plus the terminal frame

    halfway = frames[300]
    assert halfway.step == 300
    assert halfway.progress == 0.5
    assert halfway.eta_minutes == math.ceil(0.5 * 10000 / 60000)


def test_progress_rises_and_eta_falls_to_zero(clock, recorder, animator):
    animator.start(L_PATH, 10000)
    clock.advance(10050)

    progresses = [frame.progress for frame in recorder.frames]
    etas = [frame.eta_minutes for frame in recorder.frames]
    assert progresses == sorted(progresses)
    assert etas == sorted(etas, reverse=True)

    final = recorder.frames[-1]
    assert final.progress == 1
    assert final.eta_minutes == 0
    assert final.status == STATUS_DELIVERED
    assert final.position == Point(50, 50)
    assert all(frame.status == STATUS_DELIVERING for frame in recorder.frames[:-1])


def test_completion_fires_once_and_stops_ticking(clock, recorder, animator):
    animator.start(L_PATH, 10000)
    clock.advance(30000)

    assert len(recorder.completions) == 1
    assert not animator.is_running
    assert animator.progress == 1
    assert clock.pending() == 0


def test_position_is_interpolated_with_equal_share_per_point(clock, recorder, animator):
    animator.start(L_PATH, 10000)
    clock.advance(10050)
    frames = recorder.frames

    # first third of the time: first segment
    assert frames[0].position == DEPOT
    assert frames[100].position.x == pytest.approx(35)
    assert frames[100].position.y == pytest.approx(20)

    # second third: second segment
    assert frames[300].segment_index == 1
    assert frames[300].position.x == pytest.approx(50)
    assert frames[300].position.y == pytest.approx(35)

    # last third: parked on the destination
    assert frames[450].position.x == pytest.approx(50)
    assert frames[450].position.y == pytest.approx(50)


def test_vehicle_is_mutated_in_place(clock, animator):
    vehicle = animator.vehicle
    animator.start(L_PATH, 10000)
    assert vehicle.status == VehicleStatus.DELIVERING

    clock.advance(10050)
    assert vehicle.position == Point(50, 50)


def test_two_point_off_road_path_is_driven_like_any_other(clock, recorder, animator):
    animator.start([DEPOT, Point(35, 35)], 2000)
    clock.advance(2100)

    assert len(recorder.completions) == 1
    assert recorder.completions[0].position == Point(35, 35)


def test_degenerate_path_is_a_no_op(clock, recorder, animator):
    assert animator.start([DEPOT], 10000) is False
    assert animator.start([], 10000) is False

    assert recorder.frames == []
    assert clock.pending() == 0
    assert animator.vehicle.status == VehicleStatus.IDLE
    assert not animator.is_running


def test_second_start_cancels_the_first(clock, recorder, animator):
    """
    Restarting mid-drive must leave exactly one traversal alive: the new one.
    """
    first = [DEPOT, Point(80, 20), Point(80, 80)]
    second = [DEPOT, Point(20, 80)]

    animator.start(first, 10000)
    clock.advance(3000)
    animator.start(second, 10000)
    clock.advance(20000)

    assert len(recorder.completions) == 1
    assert recorder.completions[0].position == Point(20, 80)
    assert recorder.frames[-1].position == Point(20, 80)
    assert animator.vehicle.position == Point(20, 80)
    assert clock.pending() == 0


def test_back_to_back_starts(clock, recorder, animator):
    animator.start([DEPOT, Point(80, 80)], 10000)
    animator.start([DEPOT, Point(50, 80)], 10000)
    clock.advance(10050)

    assert [frame.position for frame in recorder.completions] == [Point(50, 80)]


def test_cancel_suppresses_completion(clock, recorder, animator):
    animator.start(L_PATH, 10000)
    clock.advance(5000)
    animator.cancel()
    clock.advance(10000)

    assert recorder.completions == []
    assert clock.pending() == 0


def test_restart_from_completion_callback(clock):
    """
    A completion handler may immediately start the next drive.
    """
    vehicle = Vehicle(id=1, position=DEPOT)
    done = []

    def on_complete(frame):
        done.append(frame.position)
        if len(done) == 1:
            animator.start([frame.position, DEPOT], 1000)

    animator = DeliveryAnimator(clock, vehicle, DeliveryPolicy(), on_complete=on_complete)
    animator.start([DEPOT, Point(50, 20)], 1000)
    clock.advance(3000)

    assert done == [Point(50, 20), DEPOT]


def test_eta_minutes():
    assert eta_minutes(0.0, 10000) == 1
    assert eta_minutes(1.0, 10000) == 0
    assert eta_minutes(0.0, 180000) == 3
    assert eta_minutes(0.5, 180000) == 2


def test_total_ticks_rounds_and_never_hits_zero():
    assert total_ticks_for(10000, 60) == 600
    assert total_ticks_for(1234, 60) == 74
    assert total_ticks_for(1, 60) == 1


def test_non_positive_duration_is_rejected(animator):
    with pytest.raises(ValueError):
        animator.start(L_PATH, 0)
