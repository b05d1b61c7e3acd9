"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Brevet service: builds ACP control schedules from a GPX route or a distance.

Pipeline: GPX parsing -> checkpoint classification -> placement on the
route -> control point list -> ACP opening/closing times -> named schedule.
"""

from __future__ import annotations

import datetime as dt
from typing import Optional, Sequence, Union

import pandas as pd
from streamlit.logger import get_logger

from services.brevet import acp_calculator as acp
from services.brevet.checkpoints import find_checkpoint_near
from services.brevet.control_points import (
    control_points_from_checkpoints,
    regular_control_points,
)
from services.brevet.export import render_control_times_text
from services.brevet.gpx_track import parse_gpx_track
from services.brevet.models import (
    DEFAULT_ACP_RULES,
    AcpRules,
    Checkpoint,
    ControlSchedule,
    ControlScheduleEntry,
    ControlTime,
    GpxTrack,
)
from utils.config import Config, load_config
from utils.errors import InvalidInputError
from utils.formatting import fmt_clock
from utils.gpx_parser import route_name_from_filename

logger = get_logger(__name__)


class BrevetService:
    """Service for brevet control schedules."""

    def __init__(self, config: Optional[Config] = None, rules: AcpRules = DEFAULT_ACP_RULES):
        self.config = config or load_config()
        self.rules = rules

    def parse_track(self, gpx: Union[str, bytes]) -> GpxTrack:
        return parse_gpx_track(gpx, self.config.checkpoint_match_tolerance_km)

    def calculate_control_times(
        self,
        total_distance_km: float,
        start_time: dt.datetime,
        control_points: Sequence[float],
    ) -> list[ControlTime]:
        """Run the ACP calculator for a brevet of ``total_distance_km``."""
        if not control_points:
            raise InvalidInputError("At least one control point is required")
        identity = acp.brevet_identity(total_distance_km, self.rules)
        return acp.calculate_controls(identity, start_time, control_points, self.rules)

    def control_names(
        self, controls: Sequence[ControlTime], checkpoints: Sequence[Checkpoint]
    ) -> list[str]:
        """Checkpoint name for each control, else Start / Finish / Control N by position."""
        names = []
        last = len(controls) - 1
        for index, control in enumerate(controls):
            checkpoint = find_checkpoint_near(
                checkpoints, control.distance_km, self.config.checkpoint_match_tolerance_km
            )
            if checkpoint is not None:
                names.append(checkpoint.name)
            elif index == 0:
                names.append("Start")
            elif index == last:
                names.append("Finish")
            else:
                names.append(f"Control {index}")
        return names

    def _build_schedule(
        self,
        total_distance_km: float,
        start_time: dt.datetime,
        control_points: Sequence[float],
        route_name: Optional[str],
        checkpoints: Optional[Sequence[Checkpoint]] = None,
    ) -> ControlSchedule:
        controls = self.calculate_control_times(total_distance_km, start_time, control_points)
        uses_checkpoints = checkpoints is not None
        if uses_checkpoints:
            names: list[Optional[str]] = list(self.control_names(controls, checkpoints))
        else:
            names = [None] * len(controls)

        identity = acp.brevet_identity(total_distance_km, self.rules)
        schedule = ControlSchedule(
            total_distance_km=total_distance_km,
            start_time=start_time,
            entries=tuple(
                ControlScheduleEntry(control=control, name=name)
                for control, name in zip(controls, names)
            ),
            limits=acp.brevet_time_limits(identity, start_time, self.rules),
            route_name=route_name,
            uses_checkpoints=uses_checkpoints,
            checkpoints=tuple(checkpoints or ()),
        )
        hours, minutes = schedule.total_time_window
        logger.info(
            f"Control schedule: {len(controls)} controls over {total_distance_km:.1f} km "
            f"(official {identity.official_distance_km} km), window {hours}h {minutes}m"
        )
        return schedule

    def schedule_from_gpx(
        self,
        gpx: Union[str, bytes],
        start_time: dt.datetime,
        use_checkpoints: bool = True,
        interval_km: Optional[float] = None,
        route_name: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> ControlSchedule:
        """Build the control schedule of a GPX route.

        Args:
            gpx: GPX file content
            start_time: Brevet start
            use_checkpoints: Use the route's checkpoint waypoints as controls when it has any
            interval_km: Spacing of regular controls (defaults to the configured interval)
            route_name: Name shown in exports; falls back to the name stored in the GPX
            filename: Uploaded file name, used for the route name when the GPX has none

        Returns:
            ControlSchedule with named entries in checkpoint mode
        """
        track = self.parse_track(gpx)
        name = route_name or track.name
        if not name and filename:
            name = route_name_from_filename(filename)

        if use_checkpoints and track.checkpoints:
            logger.info(f"Using {len(track.checkpoints)} checkpoints from GPX file")
            control_points = control_points_from_checkpoints(
                track.checkpoints, track.total_distance_km
            )
            return self._build_schedule(
                track.total_distance_km, start_time, control_points, name, track.checkpoints
            )

        control_points = regular_control_points(
            track.total_distance_km, self._interval(interval_km)
        )
        return self._build_schedule(track.total_distance_km, start_time, control_points, name)

    def schedule_for_distance(
        self,
        distance_km: float,
        start_time: dt.datetime,
        interval_km: Optional[float] = None,
        route_name: Optional[str] = None,
    ) -> ControlSchedule:
        """Build a regular-interval schedule for a brevet without a GPX route."""
        if distance_km is None or not distance_km > 0:
            raise InvalidInputError(f"Brevet distance must be positive, got {distance_km!r}")
        control_points = regular_control_points(
            distance_km, self._interval(interval_km)
        )
        return self._build_schedule(distance_km, start_time, control_points, route_name)

    def to_dataframe(
        self, schedule: ControlSchedule, use_24_hour_format: Optional[bool] = None
    ) -> pd.DataFrame:
        """Tabular view of the schedule for display."""
        use_24h = self._use_24h(use_24_hour_format)
        rows = []
        for entry in schedule.entries:
            control = entry.control
            row = {
                "distanceKm": round(control.distance_km, 1),
                "opening": fmt_clock(control.opening_clock, use_24h),
                "closing": fmt_clock(control.closing_clock, use_24h),
                "openingTime": control.opening_time,
                "closingTime": control.closing_time,
            }
            if schedule.has_names:
                row["name"] = entry.name or ""
            rows.append(row)
        return pd.DataFrame(rows)

    def export_text(
        self, schedule: ControlSchedule, use_24_hour_format: Optional[bool] = None
    ) -> str:
        return render_control_times_text(schedule, self._use_24h(use_24_hour_format))

    def _interval(self, interval_km: Optional[float]) -> float:
        if interval_km is None:
            return self.config.control_interval_km
        return interval_km

    def _use_24h(self, use_24_hour_format: Optional[bool]) -> bool:
        if use_24_hour_format is None:
            return self.config.use_24_hour_format
        return use_24_hour_format
