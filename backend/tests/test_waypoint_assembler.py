"""Tests for the waypoint assembler."""

import pytest

from route_engine.core.errors import (
    AmbiguousRouteError,
    InsufficientWaypointsError,
    NotFoundError,
    RouteDataError,
)
from route_engine.core.network import Direction, EntityKind, NetworkEntity, RouteRecord
from route_engine.core.waypoint_assembler import (
    assemble,
    build_entities,
    ordered_route,
    plan_route,
    terminals_for,
)


def names(waypoints) -> list[str]:
    return [w.name for w in waypoints]


def make_simple_network() -> list[NetworkEntity]:
    """origin -> A -> B -> C -> destination on a single route."""
    route = RouteRecord(
        id=7, origin_name="origin", destination_name="destination",
        origin_lat=-24.60, origin_lon=25.90,
        destination_lat=-24.64, destination_lon=25.94,
    )
    stops = [
        NetworkEntity(id=1, name="A", lat=-24.61, lon=25.91, route_id=7, stop_order=1),
        NetworkEntity(id=2, name="B", lat=-24.62, lon=25.92, route_id=7, stop_order=2),
        NetworkEntity(id=3, name="C", lat=-24.63, lon=25.93, route_id=7, stop_order=3),
    ]
    return build_entities(stops, [route])


def test_reverse_slice_towards_origin():
    result = assemble(make_simple_network(), "B", "origin")
    assert names(result) == ["B", "A", "origin"]
    assert result[-1].kind is EntityKind.ORIGIN


def test_forward_slice_between_stops():
    plan = plan_route(make_simple_network(), "A", "C")
    assert names(plan.waypoints) == ["A", "B", "C"]
    assert plan.direction is Direction.FORWARD
    assert [w.stop_order for w in plan.waypoints] == [1, 2, 3]


def test_stop_to_destination_terminal():
    result = assemble(make_simple_network(), "C", "destination")
    assert names(result) == ["C", "destination"]
    assert result[-1].kind is EntityKind.DESTINATION


def test_stops_sorted_by_stop_order(entities):
    plan = plan_route(entities, "Main Mall", "Game City")
    assert plan.route_id == 1
    assert plan.direction is Direction.FORWARD
    assert names(plan.waypoints) == ["Main Mall", "Bus Rank", "Kgale View", "Riverwalk", "Game City"]
    assert [w.stop_order for w in plan.waypoints] == [0, 1, 2, 3, 4]


def test_terminal_pair_reversed(entities):
    plan = plan_route(entities, "Game City", "Main Mall")
    assert plan.route_id == 1
    assert plan.direction is Direction.REVERSE
    assert names(plan.waypoints) == ["Game City", "Riverwalk", "Kgale View", "Bus Rank", "Main Mall"]
    assert [w.stop_order for w in plan.waypoints] == [4, 3, 2, 1, 0]


def test_shared_terminal_resolved_by_other_end(entities):
    plan = plan_route(entities, "Main Mall", "Broadhurst")
    assert plan.route_id == 2
    assert names(plan.waypoints) == ["Main Mall", "Village", "Game City", "Broadhurst"]


def test_stop_named_like_terminal_uses_stop_route(entities):
    """Route 2 has a stop called 'Game City', which is also route 1's terminal."""
    plan = plan_route(entities, "Village", "Game City")
    assert plan.route_id == 2
    assert names(plan.waypoints) == ["Village", "Game City"]
    assert plan.waypoints[-1].kind is EntityKind.STOP
    assert all(w.route_id == 2 for w in plan.waypoints)


def test_unknown_from_name(entities):
    with pytest.raises(NotFoundError) as exc:
        assemble(entities, "Nowhere", "Main Mall")
    assert exc.value.name == "Nowhere"


def test_unknown_to_name(entities):
    with pytest.raises(NotFoundError) as exc:
        assemble(entities, "Bus Rank", "Nowhere")
    assert exc.value.name == "Nowhere"


def test_names_are_matched_exactly(entities):
    with pytest.raises(NotFoundError):
        assemble(entities, "bus rank", "Main Mall")


def test_stops_on_different_routes(entities):
    with pytest.raises(AmbiguousRouteError):
        assemble(entities, "Bus Rank", "Village")


def test_same_stop_is_insufficient(entities):
    with pytest.raises(InsufficientWaypointsError):
        assemble(entities, "Bus Rank", "Bus Rank")


def test_duplicate_stop_order_rejected(entities):
    extra = NetworkEntity(id=14, name="Extra", lat=-24.67, lon=25.89, route_id=1, stop_order=2)
    with pytest.raises(RouteDataError):
        assemble(entities + [extra], "Extra", "Main Mall")


def test_missing_terminal_rejected():
    stops = [
        NetworkEntity(id=1, name="A", lat=0.0, lon=0.0, route_id=3, stop_order=1),
        NetworkEntity(id=2, name="B", lat=0.0, lon=0.1, route_id=3, stop_order=2),
    ]
    with pytest.raises(RouteDataError):
        assemble(stops, "A", "B")


def test_high_stop_orders_stay_before_destination():
    route = RouteRecord(
        id=3, origin_name="Start", destination_name="End",
        origin_lat=0.0, origin_lon=0.0, destination_lat=0.0, destination_lon=1.0,
    )
    stops = [
        NetworkEntity(id=31, name="Far", lat=0.0, lon=0.9, route_id=3, stop_order=1500),
        NetworkEntity(id=32, name="Mid", lat=0.0, lon=0.5, route_id=3, stop_order=999),
        NetworkEntity(id=33, name="Near", lat=0.0, lon=0.1, route_id=3, stop_order=0),
    ]
    sequence = ordered_route(build_entities(stops, [route]), 3)
    assert names(sequence) == ["Start", "Near", "Mid", "Far", "End"]


def test_terminals_carry_route_coordinates():
    route = RouteRecord(
        id=9, origin_name="North", destination_name="South",
        origin_lat=1.0, origin_lon=2.0, destination_lat=3.0, destination_lon=4.0,
    )
    origin, destination = terminals_for(route)
    assert (origin.lat, origin.lon, origin.kind) == (1.0, 2.0, EntityKind.ORIGIN)
    assert (destination.lat, destination.lon, destination.kind) == (3.0, 4.0, EntityKind.DESTINATION)
    assert origin.is_terminal and destination.is_terminal
