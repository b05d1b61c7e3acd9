"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Value objects for brevet rules, checkpoints and control schedules.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

import config as rules_config
from utils.gpx_parser import TrackPoint


@dataclass(frozen=True)
class SpeedLimitSegment:
    start_km: float
    end_km: float
    min_speed_kmh: float
    max_speed_kmh: float

    @property
    def width_km(self) -> float:
        return self.end_km - self.start_km


@dataclass(frozen=True)
class AcpRules:
    """Rule tables injected into the calculator."""

    speed_limits: tuple[SpeedLimitSegment, ...]
    official_time_limits: Mapping[int, float]
    standard_distances: tuple[int, ...]
    official_distance_tolerance: float = rules_config.OFFICIAL_DISTANCE_TOLERANCE
    relaxed_closing_limit_km: float = rules_config.RELAXED_CLOSING_LIMIT_KM
    relaxed_closing_speed_kmh: float = rules_config.RELAXED_CLOSING_SPEED_KMH
    start_control_open_hours: float = rules_config.START_CONTROL_OPEN_HOURS

    def __post_init__(self) -> None:
        # Tables are stored as immutable containers
        object.__setattr__(self, "speed_limits", tuple(self.speed_limits))
        object.__setattr__(self, "standard_distances", tuple(sorted(self.standard_distances)))
        object.__setattr__(
            self, "official_time_limits", MappingProxyType(dict(self.official_time_limits))
        )


DEFAULT_ACP_RULES = AcpRules(
    speed_limits=tuple(SpeedLimitSegment(*row) for row in rules_config.SPEED_LIMITS),
    official_time_limits=rules_config.OFFICIAL_TIME_LIMITS,
    standard_distances=rules_config.STANDARD_DISTANCES,
)


@dataclass(frozen=True)
class BrevetIdentity:
    brevet_distance_km: int
    official_distance_km: int


@dataclass(frozen=True)
class ControlTime:
    distance_km: float
    opening_hours: float
    opening_time: str
    opening_clock: dt.datetime
    closing_hours: float
    closing_time: str
    closing_clock: dt.datetime


@dataclass(frozen=True)
class BrevetTimeLimits:
    brevet_distance_km: int
    official_distance_km: int
    min_hours: float
    min_time: str
    min_clock: dt.datetime
    max_hours: float
    max_time: str
    max_clock: dt.datetime


@dataclass(frozen=True)
class Checkpoint:
    lat: float
    lng: float
    name: str
    distance_km: float
    description: Optional[str] = None


@dataclass(frozen=True)
class GpxTrack:
    """Parsed route: cumulative track plus mapped checkpoints (None when absent)."""

    total_distance_km: float
    track_points: tuple[TrackPoint, ...]
    checkpoints: Optional[tuple[Checkpoint, ...]] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class ControlScheduleEntry:
    control: ControlTime
    name: Optional[str] = None


@dataclass(frozen=True)
class ControlSchedule:
    total_distance_km: float
    start_time: dt.datetime
    entries: tuple[ControlScheduleEntry, ...]
    limits: BrevetTimeLimits
    route_name: Optional[str] = None
    uses_checkpoints: bool = False
    checkpoints: tuple[Checkpoint, ...] = field(default_factory=tuple)

    @property
    def controls(self) -> list[ControlTime]:
        return [entry.control for entry in self.entries]

    @property
    def names(self) -> list[str]:
        return [entry.name or "" for entry in self.entries]

    @property
    def has_names(self) -> bool:
        return any(entry.name for entry in self.entries)

    @property
    def time_range(self) -> tuple[dt.datetime, dt.datetime]:
        """First control opening to last control closing."""
        return self.entries[0].control.opening_clock, self.entries[-1].control.closing_clock

    @property
    def total_time_window(self) -> tuple[int, int]:
        """Whole hours and minutes between the first opening and the last closing."""
        start, end = self.time_range
        total_sec = int((end - start).total_seconds())
        hours, remainder = divmod(total_sec, 3600)
        return hours, remainder // 60
