"""
Active-window evaluation for reminder scheduling.

Pure functions with no I/O and no shared state. All times are local
wall-clock (naive) values.

A window whose start is later than its end wraps past midnight, e.g.
22:00-06:00 covers 22:00..23:59 today and 00:00..06:00 tomorrow. Phase
arithmetic anchors such a window to the evening it began so the whole
night is one contiguous interval.
"""

from datetime import datetime, time, timedelta

import config


def parse_time(value: str) -> time:
    """
    Parse an "HH:MM" 24-hour time string.

    Args:
        value: Time string such as "09:00" or "22:30".

    Returns:
        The parsed time of day.

    Raises:
        ValueError: If value is not a string or not a valid 24-hour time.
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected an HH:MM string, got {type(value).__name__}")
    return datetime.strptime(value.strip(), config.TIME_FORMAT).time()


def is_wraparound(start: time, end: time) -> bool:
    """True when the window spans midnight."""
    return start > end


def is_within_window(current: time, start: time, end: time) -> bool:
    """
    Check whether a time of day lies inside the active window.

    Both bounds are inclusive.

    Args:
        current: Time of day to test.
        start: Window start.
        end: Window end (may be earlier than start for overnight windows).

    Returns:
        True if current is inside the window.
    """
    if start <= end:
        return start <= current <= end
    # Overnight: only the open interval (end, start) is excluded
    return current >= start or current <= end


def anchor_time(now: datetime, start: time, end: time) -> datetime:
    """
    Get the most recent instant at which the active window began.

    For a same-day window this is today at start. For an overnight window
    seen after midnight (now earlier than start) the window began
    yesterday evening. In either case a time of day before start resolves
    to yesterday, so the anchor is never later than now.

    Args:
        now: Current local time.
        start: Window start.
        end: Window end. Only start decides the anchor; end is accepted so
            callers can pass the window as a pair.

    Returns:
        Naive datetime of the window's most recent start, within the last 24h.
    """
    anchor = datetime.combine(now.date(), start)
    if now.time() < start:
        # Overnight tail segment, or a same-day window not yet open today
        anchor -= timedelta(days=1)
    return anchor


def minutes_between(anchor: datetime, now: datetime) -> int:
    """Whole minutes elapsed from anchor to now (floored)."""
    return int((now - anchor).total_seconds() // 60)


def cycle_phase(now: datetime, anchor: datetime, total_cycle_minutes: int) -> int:
    """
    Get the position of now within the work/break cycle.

    Args:
        now: Current local time.
        anchor: Start of the active window (see anchor_time).
        total_cycle_minutes: work_duration + break_duration.

    Returns:
        Minutes into the current cycle, in [0, total_cycle_minutes).

    Raises:
        ValueError: If total_cycle_minutes is not positive.
    """
    if total_cycle_minutes <= 0:
        raise ValueError("Cycle length must be positive")
    return minutes_between(anchor, now) % total_cycle_minutes
