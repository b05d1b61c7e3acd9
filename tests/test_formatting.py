import datetime as dt

from utils.formatting import fmt_clock, fmt_distance, fmt_time_range, fmt_time_window


def test_clock_formats():
    value = dt.datetime(2025, 3, 15, 20, 5, 0)
    twelve = fmt_clock(value)
    assert twelve.startswith("Mar 15, 2025")
    assert twelve.endswith("08:05:00 PM")
    twenty_four = fmt_clock(value, use_24_hour_format=True)
    assert twenty_four.startswith("15 ")
    assert twenty_four.endswith("2025 20:05:00")


def test_time_window_and_range():
    assert fmt_time_window(13, 30) == "13h 30m"
    start = dt.datetime(2025, 3, 15, 8, 0)
    end = dt.datetime(2025, 3, 15, 21, 30)
    assert fmt_time_range(start, end, True) == f"{fmt_clock(start, True)} → {fmt_clock(end, True)}"


def test_distance_formats():
    assert fmt_distance(111.19493) == "111.2"
    assert fmt_distance(0) == "0.0"
