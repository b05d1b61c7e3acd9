"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later
"""

from __future__ import annotations

from typing import Union

from streamlit.logger import get_logger

from config import CHECKPOINT_MATCH_TOLERANCE_KM
from services.brevet.checkpoints import classify_waypoints, map_checkpoints
from services.brevet.models import GpxTrack
from utils.gpx_parser import read_gpx

logger = get_logger(__name__)


def parse_gpx_track(
    gpx: Union[str, bytes], tolerance_km: float = CHECKPOINT_MATCH_TOLERANCE_KM
) -> GpxTrack:
    """Parse a GPX route and place its checkpoints along the track.

    Args:
        gpx: GPX file content as text or raw bytes
        tolerance_km: Distance under which same-name checkpoints are merged

    Returns:
        GpxTrack; ``checkpoints`` is None when the file has no checkpoint waypoints

    Raises:
        ParseError: the content is not well-formed XML
        InsufficientDataError: fewer than two valid track points
    """
    doc = read_gpx(gpx)
    accepted = classify_waypoints(doc.waypoints)
    checkpoints = map_checkpoints(accepted, doc.track_points, tolerance_km)
    logger.info(
        f"GPX route: {doc.total_distance_km:.1f} km, {len(doc.track_points)} points, "
        f"{len(checkpoints)} checkpoints out of {len(doc.waypoints)} waypoints"
    )
    return GpxTrack(
        total_distance_km=doc.total_distance_km,
        track_points=doc.track_points,
        checkpoints=tuple(checkpoints) if checkpoints else None,
        name=doc.name,
    )
