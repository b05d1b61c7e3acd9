"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Plain-text control card export.
"""

from __future__ import annotations

from services.brevet.models import ControlSchedule
from utils.formatting import fmt_clock, fmt_distance, fmt_time_range, fmt_time_window

RULE = "-" * 80
DISTANCE_WIDTH = 13
CLOCK_WIDTH = 22


def render_control_times_text(schedule: ControlSchedule, use_24_hour_format: bool = False) -> str:
    """Render the schedule as a fixed-column text file.

    The name column is only present when at least one control has a name.
    """
    lines = []
    if schedule.route_name:
        lines.append(f"Route: {schedule.route_name}")

    lines.append(f"Total Distance: {fmt_distance(schedule.entries[-1].control.distance_km)} km")

    if len(schedule.entries) >= 2:
        hours, minutes = schedule.total_time_window
        lines.append(f"Total Time Window: {fmt_time_window(hours, minutes)}")
        start, end = schedule.time_range
        lines.append(f"Time Range: {fmt_time_range(start, end, use_24_hour_format)}")

    with_names = schedule.has_names
    header = (
        f"{'Distance (km)':<{DISTANCE_WIDTH}} | "
        f"{'Opening Time':<{CLOCK_WIDTH}} | "
        f"{'Closing Time':<{CLOCK_WIDTH}}"
    )
    if with_names:
        header += " | Name"

    lines.extend(["", "Control Points:", RULE, header, RULE])

    for entry in schedule.entries:
        control = entry.control
        line = (
            f"{fmt_distance(control.distance_km):<{DISTANCE_WIDTH}} | "
            f"{fmt_clock(control.opening_clock, use_24_hour_format):<{CLOCK_WIDTH}} | "
            f"{fmt_clock(control.closing_clock, use_24_hour_format):<{CLOCK_WIDTH}}"
        )
        if with_names and entry.name:
            line += f" | {entry.name}"
        lines.append(line)

    return "\n".join(lines) + "\n"
