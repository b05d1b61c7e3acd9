"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later
"""

from __future__ import annotations

import math
from typing import Iterable

from streamlit.logger import get_logger

from config import DEFAULT_CONTROL_INTERVAL_KM
from services.brevet.models import Checkpoint
from utils.errors import InvalidInputError

logger = get_logger(__name__)


def _check_total(total_distance_km: float) -> None:
    if not math.isfinite(total_distance_km) or total_distance_km < 0:
        logger.warning(f"Invalid total distance: {total_distance_km!r}")
        raise InvalidInputError(f"Total distance must be finite and non-negative, got {total_distance_km!r}")


def regular_control_points(
    total_distance_km: float, interval_km: float = DEFAULT_CONTROL_INTERVAL_KM
) -> list[float]:
    """Controls every ``interval_km`` from the start, plus the finish."""
    _check_total(total_distance_km)
    if not math.isfinite(interval_km) or interval_km <= 0:
        logger.warning(f"Invalid control interval: {interval_km!r}")
        raise InvalidInputError(f"Control interval must be positive, got {interval_km!r}")

    points = [0.0]
    current = interval_km
    while current < total_distance_km:
        points.append(current)
        current += interval_km

    if points[-1] != total_distance_km:
        points.append(total_distance_km)
    return points


def control_points_from_checkpoints(
    checkpoints: Iterable[Checkpoint], total_distance_km: float
) -> list[float]:
    """Start, every checkpoint distance past the start, and the finish, ascending."""
    _check_total(total_distance_km)
    points = [0.0]
    for cp in checkpoints:
        # The finish is appended below; nothing may sit beyond it
        if 0 < cp.distance_km < total_distance_km and cp.distance_km not in points:
            points.append(cp.distance_km)

    points.sort()
    if points[-1] != total_distance_km:
        points.append(total_distance_km)
    return points
