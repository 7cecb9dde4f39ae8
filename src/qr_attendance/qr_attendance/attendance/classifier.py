from __future__ import annotations

from datetime import datetime, time

from ..core.enums import AttendanceStatus


def scheduled_start(arrival: datetime, start_time: time) -> datetime:
    """Start instant on the arrival's own calendar date (seconds zeroed).

    A scan at 00:05 is compared with that same new day's start; overnight
    sessions must pass an adjusted arrival date.
    """
    return datetime.combine(
        arrival.date(),
        time(hour=start_time.hour, minute=start_time.minute),
        tzinfo=arrival.tzinfo,
    )


def minutes_after_start(arrival: datetime, start_time: time) -> float:
    return (arrival - scheduled_start(arrival, start_time)).total_seconds() / 60


def classify(arrival: datetime, start_time: time, grace_period_minutes: int) -> AttendanceStatus:
    """PRESENT up to and including the grace edge, LATE after. Never ABSENT."""
    if minutes_after_start(arrival, start_time) <= grace_period_minutes:
        return AttendanceStatus.PRESENT
    return AttendanceStatus.LATE
