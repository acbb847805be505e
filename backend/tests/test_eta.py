"""Tests for per-stop ETA building."""

import datetime

import pytest

from route_engine.core.errors import InputMismatchError
from route_engine.core.eta import build_etas, estimate_etas
from route_engine.core.network import Leg, Waypoint

T = datetime.datetime(2026, 5, 4, 7, 30, tzinfo=datetime.timezone.utc)


def make_waypoints(n: int) -> list[Waypoint]:
    # Stops 0.01° of latitude apart (~1.1 km) heading north
    return [
        Waypoint(latitude=-24.70 + 0.01 * i, longitude=25.90, name=f"Stop {i}", stop_order=i)
        for i in range(n)
    ]


def test_cumulative_durations():
    legs = [Leg(distance_m=800, duration_s=60), Leg(distance_m=1500, duration_s=120)]
    results = build_etas(make_waypoints(3), legs, T)
    assert [r.eta for r in results] == [
        T,
        T + datetime.timedelta(seconds=60),
        T + datetime.timedelta(seconds=180),
    ]
    assert [r.waypoint.name for r in results] == ["Stop 0", "Stop 1", "Stop 2"]


def test_traffic_duration_preferred():
    legs = [
        Leg(distance_m=800, duration_s=60, duration_in_traffic_s=90),
        Leg(distance_m=1500, duration_s=120),
    ]
    results = build_etas(make_waypoints(3), legs, T)
    assert results[1].eta == T + datetime.timedelta(seconds=90)
    assert results[2].eta == T + datetime.timedelta(seconds=210)


def test_zero_traffic_duration_is_used():
    legs = [Leg(distance_m=10, duration_s=60, duration_in_traffic_s=0)]
    results = build_etas(make_waypoints(2), legs, T)
    assert results[1].eta == T


def test_leg_count_mismatch():
    with pytest.raises(InputMismatchError):
        build_etas(make_waypoints(3), [Leg(distance_m=800, duration_s=60)], T)


def test_no_waypoints():
    assert build_etas([], [], T) == []
    with pytest.raises(InputMismatchError):
        build_etas([], [Leg(distance_m=1, duration_s=1)], T)


def test_estimate_at_average_speed():
    results = estimate_etas(make_waypoints(2), T, average_speed_kmh=40)
    assert results[0].eta == T
    # ~1112 m at 40 km/h (11.1 m/s) is ~100 s
    seconds = (results[1].eta - T).total_seconds()
    assert 95 <= seconds <= 105


def test_estimate_is_cumulative():
    results = estimate_etas(make_waypoints(3), T)
    first = (results[1].eta - T).total_seconds()
    second = (results[2].eta - T).total_seconds()
    assert second == pytest.approx(2 * first, rel=1e-3)


def test_estimate_rejects_non_positive_speed():
    with pytest.raises(ValueError):
        estimate_etas(make_waypoints(2), T, average_speed_kmh=0)
