from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one participant's attendance for one activity on one day."""

    record_id: int
    activity_id: int
    participant_id: int
    calendar_day: date
    status: AttendanceStatus
    arrival_instant: datetime
    departure_instant: Optional[datetime] = None

    @property
    def has_departed(self) -> bool:
        return self.departure_instant is not None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for listings and statistics (joined with participant/activity)."""

    record_id: int
    activity_id: int
    activity_title: str
    participant_id: int
    participant_external_id: str
    participant_name: str
    section: str
    calendar_day: date
    status: AttendanceStatus
    arrival_instant: datetime
    departure_instant: Optional[datetime] = None
