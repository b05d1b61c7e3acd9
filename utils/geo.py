"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Great-circle distance helpers.

The haversine package returns the angular distance when asked for radians,
which is then scaled by a fixed 6371 km Earth radius so that route totals
match the ones published by the ACP control calculators.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from haversine import Unit, haversine, haversine_vector

from config import EARTH_RADIUS_KM


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance in kilometers between two (lat, lng) points in degrees."""
    if lat1 == lat2 and lng1 == lng2:
        return 0.0
    return haversine((lat1, lng1), (lat2, lng2), unit=Unit.RADIANS) * EARTH_RADIUS_KM


def haversine_km_to_many(
    lat: float, lng: float, lats: Sequence[float], lngs: Sequence[float]
) -> np.ndarray:
    """Distances in kilometers from one point to each point of a sequence.

    Args:
        lat: Latitude of the reference point
        lng: Longitude of the reference point
        lats: Latitudes of the candidate points
        lngs: Longitudes of the candidate points

    Returns:
        numpy array with one distance per candidate, in input order
    """
    targets = np.column_stack([np.asarray(lats, dtype=float), np.asarray(lngs, dtype=float)])
    if len(targets) == 0:
        return np.empty(0, dtype=float)
    origin = np.repeat([[lat, lng]], len(targets), axis=0)
    return haversine_vector(origin, targets, unit=Unit.RADIANS) * EARTH_RADIUS_KM
