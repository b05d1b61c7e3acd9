"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Checkpoint detection for GPX waypoints.

Route planners export turn-by-turn cues as waypoints alongside the real
controls, so waypoints are filtered by name before being placed on the
route.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

import numpy as np
from streamlit.logger import get_logger

from config import CHECKPOINT_MATCH_TOLERANCE_KM, CHECKPOINT_TERMS, NAVIGATION_TERMS
from services.brevet.models import Checkpoint
from utils.errors import InsufficientDataError
from utils.geo import haversine_km_to_many
from utils.gpx_parser import RawWaypoint, TrackPoint

logger = get_logger(__name__)


def is_navigation_instruction(name: Optional[str], description: Optional[str] = None) -> bool:
    """True when the waypoint text reads like a turn cue (turn, left, onto...)."""
    if not name and not description:
        return False
    text = f"{name or ''} {description or ''}".lower()
    return any(term in text for term in NAVIGATION_TERMS)


def is_checkpoint(
    name: Optional[str], symbol: Optional[str] = None, type_: Optional[str] = None
) -> bool:
    """True when the name, symbol or type designates a control.

    An exact match on any field wins; otherwise any field containing one of
    the checkpoint terms is accepted.
    """
    fields = [(value or "").lower() for value in (name, symbol, type_)]
    if any(value == term for value in fields for term in CHECKPOINT_TERMS):
        return True
    return any(term in value for value in fields for term in CHECKPOINT_TERMS)


def classify_waypoints(waypoints: Iterable[RawWaypoint]) -> list[RawWaypoint]:
    """Keep the waypoints that are checkpoints and not navigation cues."""
    accepted = []
    for wpt in waypoints:
        if is_navigation_instruction(wpt.name, wpt.description):
            logger.debug(f"Skipping navigation waypoint: {wpt.name}")
            continue
        if is_checkpoint(wpt.name, wpt.symbol, wpt.type):
            accepted.append(wpt)
        else:
            logger.debug(f"Skipping non-checkpoint waypoint: {wpt.name}")
    return accepted


def nearest_track_distance(lat: float, lng: float, track_points: Sequence[TrackPoint]) -> float:
    """Cumulative distance of the track point closest to (lat, lng).

    Linear scan over the whole track; ties go to the earliest point.
    """
    if not track_points:
        raise InsufficientDataError("Cannot place a checkpoint on an empty track")
    distances = haversine_km_to_many(
        lat,
        lng,
        [p.lat for p in track_points],
        [p.lng for p in track_points],
    )
    return track_points[int(np.argmin(distances))].cumulative_distance_km


def _deduplicate(
    checkpoints: list[Checkpoint], tolerance_km: float = CHECKPOINT_MATCH_TOLERANCE_KM
) -> list[Checkpoint]:
    unique: list[Checkpoint] = []
    for cp in checkpoints:
        duplicate = any(
            kept.name == cp.name and abs(kept.distance_km - cp.distance_km) < tolerance_km
            for kept in unique
        )
        if duplicate:
            logger.debug(f"Dropping duplicate checkpoint {cp.name} at {cp.distance_km:.2f} km")
            continue
        unique.append(cp)
    return unique


def map_checkpoints(
    waypoints: Iterable[RawWaypoint],
    track_points: Sequence[TrackPoint],
    tolerance_km: float = CHECKPOINT_MATCH_TOLERANCE_KM,
) -> list[Checkpoint]:
    """Place checkpoint waypoints on the route.

    Args:
        waypoints: Waypoints already accepted by classify_waypoints
        track_points: Cumulative-distance track in document order
        tolerance_km: Same-name checkpoints closer than this collapse into one

    Returns:
        Checkpoints sorted by distance along the route
    """
    mapped = [
        Checkpoint(
            lat=wpt.lat,
            lng=wpt.lng,
            name=wpt.name,
            description=wpt.description,
            distance_km=nearest_track_distance(wpt.lat, wpt.lng, track_points),
        )
        for wpt in waypoints
    ]
    mapped.sort(key=lambda cp: cp.distance_km)
    return _deduplicate(mapped, tolerance_km)


def find_checkpoint_near(
    checkpoints: Iterable[Checkpoint],
    distance_km: float,
    tolerance_km: float = CHECKPOINT_MATCH_TOLERANCE_KM,
) -> Optional[Checkpoint]:
    """First checkpoint lying within tolerance of the given route distance."""
    for cp in checkpoints:
        if abs(cp.distance_km - distance_km) < tolerance_km:
            return cp
    return None
