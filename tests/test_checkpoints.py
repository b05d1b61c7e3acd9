"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Tests for checkpoint classification and placement.
"""

from __future__ import annotations

import pytest

from services.brevet.checkpoints import (
    classify_waypoints,
    find_checkpoint_near,
    is_checkpoint,
    is_navigation_instruction,
    map_checkpoints,
    nearest_track_distance,
)
from services.brevet.gpx_track import parse_gpx_track
from services.brevet.models import Checkpoint
from utils.errors import InsufficientDataError
from utils.geo import haversine_km
from utils.gpx_parser import RawWaypoint, TrackPoint


@pytest.fixture
def track():
    """Points every 0.1 degree along the equator."""
    points = []
    total = 0.0
    for i in range(11):
        lng = round(i * 0.1, 1)
        if points:
            total += haversine_km(0.0, points[-1].lng, 0.0, lng)
        points.append(TrackPoint(lat=0.0, lng=lng, elevation_m=0.0, cumulative_distance_km=total))
    return points


def test_navigation_terms():
    assert is_navigation_instruction("Turn left onto Main St")
    assert is_navigation_instruction("Bridge", "continue straight")
    assert is_navigation_instruction("HEAD north")
    assert not is_navigation_instruction("Checkpoint 3")
    assert not is_navigation_instruction("", None)
    assert not is_navigation_instruction(None, None)


def test_checkpoint_terms():
    assert is_checkpoint("Checkpoint 3")
    assert is_checkpoint("CP")
    assert is_checkpoint("Kontroll Umeå")
    assert is_checkpoint("Control at the bakery")
    assert is_checkpoint("Unnamed", "Checkpoint", None)
    assert is_checkpoint("Cafe", None, "chk")
    assert not is_checkpoint("Bakery")
    assert not is_checkpoint("Viewpoint", "Flag", "")


def test_classify_rejects_navigation_even_with_checkpoint_terms():
    waypoints = [
        RawWaypoint(lat=0.0, lng=0.0, name="Checkpoint 3"),
        RawWaypoint(lat=0.0, lng=0.0, name="Turn left onto Main St", symbol="CP"),
        RawWaypoint(lat=0.0, lng=0.0, name="Water fountain"),
        RawWaypoint(lat=0.0, lng=0.0, name="Unnamed", symbol="Checkpoint", type="Checkpoint"),
    ]
    accepted = classify_waypoints(waypoints)
    assert [w.name for w in accepted] == ["Checkpoint 3", "Unnamed"]


def test_nearest_track_distance(track):
    distance = nearest_track_distance(0.001, 0.52, track)
    assert distance == track[5].cumulative_distance_km


def test_nearest_track_distance_empty_track():
    with pytest.raises(InsufficientDataError):
        nearest_track_distance(0.0, 0.0, [])


def test_map_checkpoints_sorted_by_distance(track):
    waypoints = [
        RawWaypoint(lat=0.0, lng=0.81, name="CP2"),
        RawWaypoint(lat=0.0, lng=0.29, name="CP1", description="Boulangerie"),
    ]
    checkpoints = map_checkpoints(waypoints, track)

    assert [cp.name for cp in checkpoints] == ["CP1", "CP2"]
    assert checkpoints[0].distance_km == track[3].cumulative_distance_km
    assert checkpoints[0].description == "Boulangerie"
    assert checkpoints[1].distance_km == track[8].cumulative_distance_km


def test_map_checkpoints_deduplicates_same_name(track):
    waypoints = [
        RawWaypoint(lat=0.0, lng=0.5, name="CP1"),
        RawWaypoint(lat=0.001, lng=0.501, name="CP1"),
        RawWaypoint(lat=0.0, lng=0.5, name="CP1 bis"),
    ]
    checkpoints = map_checkpoints(waypoints, track)
    assert [cp.name for cp in checkpoints] == ["CP1", "CP1 bis"]


def test_find_checkpoint_near():
    checkpoints = [
        Checkpoint(lat=0.0, lng=0.0, name="CP1", distance_km=55.6),
        Checkpoint(lat=0.0, lng=0.0, name="CP2", distance_km=88.9),
    ]
    assert find_checkpoint_near(checkpoints, 55.65).name == "CP1"
    assert find_checkpoint_near(checkpoints, 88.9).name == "CP2"
    assert find_checkpoint_near(checkpoints, 55.8) is None
    assert find_checkpoint_near([], 0.0) is None


def test_parse_gpx_track_without_waypoints(gpx_builder):
    """Three points, no waypoints: three track points and no checkpoint list."""
    gpx = gpx_builder([(45.0, 5.0), (45.1, 5.1), (45.2, 5.2)])
    parsed = parse_gpx_track(gpx)

    assert len(parsed.track_points) == 3
    assert parsed.checkpoints is None
    assert parsed.total_distance_km == parsed.track_points[-1].cumulative_distance_km


def test_parse_gpx_track_places_checkpoints(gpx_builder, straight_route):
    gpx = gpx_builder(
        straight_route,
        waypoints=[
            {"lat": 0.0, "lon": 0.8, "name": "CP2 Café"},
            {"lat": 0.0, "lon": 0.3, "name": "Turn right", "sym": "Checkpoint"},
            {"lat": 0.0, "lon": 0.4, "name": "Kontroll 1"},
            {"lat": 0.0, "lon": 0.6, "name": "Picnic area"},
        ],
    )
    parsed = parse_gpx_track(gpx)

    assert [cp.name for cp in parsed.checkpoints] == ["Kontroll 1", "CP2 Café"]
    assert parsed.checkpoints[0].distance_km == parsed.track_points[4].cumulative_distance_km
    assert parsed.checkpoints[1].distance_km == parsed.track_points[8].cumulative_distance_km
