"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later
"""

from __future__ import annotations

from types import MappingProxyType

EARTH_RADIUS_KM = 6371.0

# ACP speed bands: (start_km, end_km, min_speed_kmh, max_speed_kmh)
SPEED_LIMITS = (
    (0, 200, 15.0, 34.0),
    (200, 400, 15.0, 32.0),
    (400, 600, 15.0, 30.0),
    (600, 1000, 11.428, 28.0),
    (1000, 1300, 13.333, 26.0),
)

# Official overall time limits in hours, keyed by official distance (km)
OFFICIAL_TIME_LIMITS = MappingProxyType(
    {
        200: 13.5,
        300: 20.0,
        400: 27.0,
        600: 40.0,
        1000: 75.0,
        1200: 90.0,
    }
)

STANDARD_DISTANCES = (200, 300, 400, 600, 1000, 1200)

# A route up to 5% longer than a standard distance still counts as that brevet
OFFICIAL_DISTANCE_TOLERANCE = 1.05

# Controls closer than this to the start close at a flat 20 km/h
RELAXED_CLOSING_LIMIT_KM = 60
RELAXED_CLOSING_SPEED_KMH = 20.0

START_CONTROL_OPEN_HOURS = 1.0

DEFAULT_CONTROL_INTERVAL_KM = 50.0
CHECKPOINT_MATCH_TOLERANCE_KM = 0.1

# ==============================================================================
# WAYPOINT CLASSIFICATION
# ==============================================================================

NAVIGATION_TERMS = ("turn", "left", "right", "continue", "straight", "onto", "head")

CHECKPOINT_TERMS = ("checkpoint", "check point", "chk", "cp", "kontroll", "control")
