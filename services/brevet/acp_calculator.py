"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

ACP brevet control time calculator.

Opening times integrate the route distance over the speed bands at their
maximum speed, closing times at their minimum speed. Standard brevets
(200, 300, 400, 600, 1000, 1200 km) use the official overall limits for
the finish control.

Example:
    calc = AcpBrevetCalculator(600, dt.datetime(2025, 3, 15, 8, 0))
    limits = calc.brevet_time_limits()
    controls = calc.calculate_controls([0, 150, 300, 600])
"""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, field, replace
from typing import Iterable

from streamlit.logger import get_logger

from services.brevet.models import (
    DEFAULT_ACP_RULES,
    AcpRules,
    BrevetIdentity,
    BrevetTimeLimits,
    ControlTime,
)
from utils.errors import InvalidInputError

logger = get_logger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _check_distance(distance_km: float, what: str) -> None:
    if distance_km is None or not math.isfinite(distance_km) or distance_km < 0:
        logger.warning(f"Rejected {what}: {distance_km!r}")
        raise InvalidInputError(f"{what} must be a finite, non-negative number, got {distance_km!r}")


def official_distance(brevet_distance_km: int, rules: AcpRules = DEFAULT_ACP_RULES) -> int:
    """Smallest standard distance the route fits within, tolerance included."""
    for distance in rules.standard_distances:
        if brevet_distance_km <= distance * rules.official_distance_tolerance:
            return distance
    # Longer than any standard brevet
    return brevet_distance_km


def brevet_identity(distance_km: float, rules: AcpRules = DEFAULT_ACP_RULES) -> BrevetIdentity:
    """Floor the route distance and resolve its official brevet distance."""
    _check_distance(distance_km, "Brevet distance")
    brevet_km = int(math.floor(distance_km))
    return BrevetIdentity(
        brevet_distance_km=brevet_km,
        official_distance_km=official_distance(brevet_km, rules),
    )


def _integrate(distance_km: int, rules: AcpRules, use_max_speed: bool) -> float:
    hours = 0.0
    remaining = distance_km
    for segment in rules.speed_limits:
        if remaining <= 0:
            break
        covered = min(remaining, segment.width_km)
        if covered > 0:
            speed = segment.max_speed_kmh if use_max_speed else segment.min_speed_kmh
            hours += covered / speed
            remaining -= covered
    return hours


def calculate_opening_time(
    identity: BrevetIdentity, control_distance_km: float, rules: AcpRules = DEFAULT_ACP_RULES
) -> float:
    """Earliest arrival at a control, in hours after the start."""
    _check_distance(control_distance_km, "Control distance")
    distance = min(int(math.floor(control_distance_km)), identity.official_distance_km)
    return _integrate(distance, rules, use_max_speed=True)


def calculate_closing_time(
    identity: BrevetIdentity, control_distance_km: float, rules: AcpRules = DEFAULT_ACP_RULES
) -> float:
    """Latest arrival at a control, in hours after the start."""
    _check_distance(control_distance_km, "Control distance")
    distance = int(math.floor(control_distance_km))

    if distance < rules.relaxed_closing_limit_km:
        return distance / rules.relaxed_closing_speed_kmh

    distance = min(distance, identity.official_distance_km)
    closing = _integrate(distance, rules, use_max_speed=False)

    official_limit = rules.official_time_limits.get(identity.official_distance_km)
    if distance >= identity.official_distance_km and official_limit is not None:
        return official_limit
    return closing


def minimum_completion_time(identity: BrevetIdentity, rules: AcpRules = DEFAULT_ACP_RULES) -> float:
    return calculate_opening_time(identity, identity.brevet_distance_km, rules)


def maximum_completion_time(identity: BrevetIdentity, rules: AcpRules = DEFAULT_ACP_RULES) -> float:
    official_limit = rules.official_time_limits.get(identity.official_distance_km)
    if official_limit is not None:
        return official_limit
    return calculate_closing_time(identity, identity.brevet_distance_km, rules)


def hours_to_clock(start_time: dt.datetime, hours: float) -> dt.datetime:
    """Add whole hours plus the rounded remainder in minutes to the start time."""
    whole = math.floor(hours)
    minutes = _round_half_up((hours - whole) * 60)
    return start_time + dt.timedelta(hours=whole, minutes=minutes)


def format_time(hours: float) -> str:
    """Render an hour offset as e.g. ``13H30``."""
    total_minutes = _round_half_up(hours * 60)
    h, m = divmod(total_minutes, 60)
    return f"{h}H{m:02d}"


def control_time(
    identity: BrevetIdentity,
    start_time: dt.datetime,
    control_distance_km: float,
    rules: AcpRules = DEFAULT_ACP_RULES,
) -> ControlTime:
    opening = calculate_opening_time(identity, control_distance_km, rules)
    closing = calculate_closing_time(identity, control_distance_km, rules)
    return ControlTime(
        distance_km=control_distance_km,
        opening_hours=opening,
        opening_time=format_time(opening),
        opening_clock=hours_to_clock(start_time, opening),
        closing_hours=closing,
        closing_time=format_time(closing),
        closing_clock=hours_to_clock(start_time, closing),
    )


def calculate_controls(
    identity: BrevetIdentity,
    start_time: dt.datetime,
    control_distances: Iterable[float],
    rules: AcpRules = DEFAULT_ACP_RULES,
) -> list[ControlTime]:
    """Compute control times for every distance, sorted ascending.

    The start control (0 km) stays open for exactly one hour after opening,
    whatever the general closing formula gives.
    """
    results = []
    for distance in sorted(control_distances):
        control = control_time(identity, start_time, distance, rules)
        if distance == 0:
            closing_hours = control.opening_hours + rules.start_control_open_hours
            control = replace(
                control,
                closing_hours=closing_hours,
                closing_time=format_time(closing_hours),
                closing_clock=control.opening_clock
                + dt.timedelta(hours=rules.start_control_open_hours),
            )
        results.append(control)
    return results


def brevet_time_limits(
    identity: BrevetIdentity, start_time: dt.datetime, rules: AcpRules = DEFAULT_ACP_RULES
) -> BrevetTimeLimits:
    min_hours = minimum_completion_time(identity, rules)
    max_hours = maximum_completion_time(identity, rules)
    return BrevetTimeLimits(
        brevet_distance_km=identity.brevet_distance_km,
        official_distance_km=identity.official_distance_km,
        min_hours=min_hours,
        min_time=format_time(min_hours),
        min_clock=hours_to_clock(start_time, min_hours),
        max_hours=max_hours,
        max_time=format_time(max_hours),
        max_clock=hours_to_clock(start_time, max_hours),
    )


@dataclass(frozen=True)
class AcpBrevetCalculator:
    """Calculator bound to one brevet distance and start time."""

    distance_km: float
    start_time: dt.datetime
    rules: AcpRules = DEFAULT_ACP_RULES
    identity: BrevetIdentity = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "identity", brevet_identity(self.distance_km, self.rules))

    @property
    def brevet_distance_km(self) -> int:
        return self.identity.brevet_distance_km

    @property
    def official_distance_km(self) -> int:
        return self.identity.official_distance_km

    def calculate_opening_time(self, control_distance_km: float) -> float:
        return calculate_opening_time(self.identity, control_distance_km, self.rules)

    def calculate_closing_time(self, control_distance_km: float) -> float:
        return calculate_closing_time(self.identity, control_distance_km, self.rules)

    def minimum_completion_time(self) -> float:
        return minimum_completion_time(self.identity, self.rules)

    def maximum_completion_time(self) -> float:
        return maximum_completion_time(self.identity, self.rules)

    def opening_clock(self, control_distance_km: float) -> dt.datetime:
        return hours_to_clock(self.start_time, self.calculate_opening_time(control_distance_km))

    def closing_clock(self, control_distance_km: float) -> dt.datetime:
        return hours_to_clock(self.start_time, self.calculate_closing_time(control_distance_km))

    def control_time(self, control_distance_km: float) -> ControlTime:
        return control_time(self.identity, self.start_time, control_distance_km, self.rules)

    def calculate_controls(self, control_distances: Iterable[float]) -> list[ControlTime]:
        return calculate_controls(self.identity, self.start_time, control_distances, self.rules)

    def brevet_time_limits(self) -> BrevetTimeLimits:
        return brevet_time_limits(self.identity, self.start_time, self.rules)

    @staticmethod
    def format_time(hours: float) -> str:
        return format_time(hours)
