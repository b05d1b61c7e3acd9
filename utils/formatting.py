"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

Display helpers for control schedules: distances, clock times and time windows.

Clock times follow the participant-facing convention of the control cards:
24-hour clocks use the Swedish locale (day first), 12-hour clocks the US
locale (month first, AM/PM).
"""

from __future__ import annotations

import datetime as dt

from babel import dates

LOCALE_24H = "sv_SE"
LOCALE_12H = "en_US"

PATTERN_24H = "d MMM y HH:mm:ss"
PATTERN_12H = "MMM d, y, hh:mm:ss a"


def fmt_distance(km: float) -> str:
    """Fixed one-decimal distance used in exports (locale independent)."""
    return f"{km:.1f}"


def fmt_clock(value: dt.datetime, use_24_hour_format: bool = False) -> str:
    if use_24_hour_format:
        return dates.format_datetime(value, PATTERN_24H, locale=LOCALE_24H)
    return dates.format_datetime(value, PATTERN_12H, locale=LOCALE_12H)


def fmt_time_window(hours: int, minutes: int) -> str:
    return f"{hours}h {minutes}m"


def fmt_time_range(start: dt.datetime, end: dt.datetime, use_24_hour_format: bool = False) -> str:
    return f"{fmt_clock(start, use_24_hour_format)} → {fmt_clock(end, use_24_hour_format)}"
