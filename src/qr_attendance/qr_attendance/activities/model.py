from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional


@dataclass(frozen=True)
class ActivitySchedule:
    """Timing rules used to classify one scan."""

    start_time: time
    grace_period_minutes: int
    allows_departure_scan: bool = False


@dataclass(frozen=True)
class Activity:
    """Domain entity: a class/course/event that participants attend."""

    activity_id: int
    owner_id: int
    title: str
    start_time: time
    end_time: time
    grace_period_minutes: int
    allows_departure_scan: bool = False
    description: Optional[str] = None
    room: Optional[str] = None

    @property
    def schedule(self) -> ActivitySchedule:
        return ActivitySchedule(
            start_time=self.start_time,
            grace_period_minutes=self.grace_period_minutes,
            allows_departure_scan=self.allows_departure_scan,
        )
