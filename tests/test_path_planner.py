import pytest

from routing.models import Point, RoadSegment
from routing.network import DEFAULT_ROADS, RoadNetwork, default_network
from routing.planner import (
    AxisAlignedPlanner,
    PathPlanner,
    TrafficAwarePlanner,
    axis_aligned_path,
    path_cost,
)
from traffic.controller import TrafficSignalController

DEPOT = Point(20, 20)


@pytest.fixture
def network():
    return default_network()


@pytest.fixture
def signals():
    return TrafficSignalController()


def test_axis_aligned_path_goes_x_then_y():
    assert axis_aligned_path(DEPOT, Point(50, 50)) == [Point(20, 20), Point(50, 20), Point(50, 50)]
    assert axis_aligned_path(DEPOT, Point(20, 80)) == [Point(20, 20), Point(20, 80)]
    assert axis_aligned_path(DEPOT, Point(80, 20)) == [Point(20, 20), Point(80, 20)]
    assert axis_aligned_path(DEPOT, DEPOT) == [DEPOT, DEPOT]


def test_axis_aligned_cost_with_one_red_signal():
    """
    All green the path costs 30 + 30 = 60. A red signal at (50, 20) adds 20.
    """
    path = axis_aligned_path(DEPOT, Point(50, 50))
    controller = TrafficSignalController(positions=[Point(50, 20)])
    assert path_cost(path, controller.snapshot()) == pytest.approx(60)

    controller.tick()
    assert path_cost(path, controller.snapshot()) == pytest.approx(80)

    route = AxisAlignedPlanner(controller).plan_route(DEPOT, Point(50, 50))
    assert route.cost == pytest.approx(80)


def test_more_red_signals_never_lower_the_cost(signals):
    path = [Point(20, 20), Point(50, 20), Point(50, 50), Point(80, 50)]
    green = path_cost(path, signals.snapshot())
    signals.tick()
    red = path_cost(path, signals.snapshot())
    assert red >= green
    # (50,20), (50,50) and (80,50) all carry a signal
    assert red == pytest.approx(green + 3 * 20)


def test_traffic_aware_all_green_returns_shortest_route(network, signals):
    planner = TrafficAwarePlanner(network, signals)
    route = planner.plan_route(DEPOT, Point(50, 50))

    assert route.on_network
    assert route.cost == pytest.approx(60)
    assert route.waypoints[0] == DEPOT
    assert route.waypoints[-1].is_close(Point(50, 50))
    assert len(route.waypoints) == 3


def test_red_signal_reroutes_around_it(network):
    """
    Two equal 60-unit routes lead to (50, 50). A red light on (20, 50)
    makes the one through (50, 20) cheaper.
    """
    signals = TrafficSignalController(positions=[Point(20, 50)])
    planner = TrafficAwarePlanner(network, signals)

    assert planner.plan(DEPOT, Point(50, 50)) == [Point(20, 20), Point(20, 50), Point(50, 50)]

    signals.tick()
    route = planner.plan_route(DEPOT, Point(50, 50))
    assert route.waypoints == [Point(20, 20), Point(50, 20), Point(50, 50)]
    assert route.cost == pytest.approx(60)


def test_penalty_is_paid_when_no_detour_is_cheaper(network, signals):
    signals.tick()
    route = TrafficAwarePlanner(network, signals).plan_route(DEPOT, Point(80, 20))
    assert route.waypoints == [Point(20, 20), Point(50, 20), Point(80, 20)]
    assert route.cost == pytest.approx(60 + 20)


def test_signals_are_sampled_when_planning_starts(network):
    signals = TrafficSignalController(positions=[Point(20, 50)])
    planner = TrafficAwarePlanner(network, signals)
    signals.tick()
    assert planner.plan(DEPOT, Point(50, 50))[1] == Point(50, 20)


def test_every_plan_starts_at_origin_ends_at_destination_and_follows_roads(network, signals):
    planner = TrafficAwarePlanner(network, signals)
    for destination in network.intersections():
        path = planner.plan(DEPOT, destination)
        assert len(path) >= 2
        assert path[0] == DEPOT
        assert path[-1].is_close(destination)
        for u, v in zip(path, path[1:]):
            if u.is_close(v):
                continue
            assert v in network.neighbors_of(u)


def test_destination_off_the_network_falls_back_to_a_straight_line(network, signals):
    route = TrafficAwarePlanner(network, signals).plan_route(DEPOT, Point(35, 35))
    assert route.waypoints == [DEPOT, Point(35, 35)]
    assert not route.on_network


def test_disconnected_network_falls_back(signals):
    network = RoadNetwork([
        RoadSegment(Point(20, 20), Point(50, 20)),
        RoadSegment(Point(20, 80), Point(80, 80)),
    ])
    path = TrafficAwarePlanner(network, signals).plan(DEPOT, Point(80, 80))
    assert path == [DEPOT, Point(80, 80)]


def test_unsplit_roads_fall_back_for_middle_crossings(signals):
    path = TrafficAwarePlanner(RoadNetwork(DEFAULT_ROADS), signals).plan(DEPOT, Point(50, 50))
    assert path == [DEPOT, Point(50, 50)]


def test_origin_already_at_destination_still_gives_two_points(network, signals):
    assert TrafficAwarePlanner(network, signals).plan(DEPOT, DEPOT) == [DEPOT, DEPOT]


def test_planners_are_interchangeable(network, signals):
    planners = [AxisAlignedPlanner(signals), TrafficAwarePlanner(network, signals)]
    for planner in planners:
        assert isinstance(planner, PathPlanner)
        path = planner.plan(DEPOT, Point(80, 80))
        assert path[0] == DEPOT
        assert path[-1] == Point(80, 80)
