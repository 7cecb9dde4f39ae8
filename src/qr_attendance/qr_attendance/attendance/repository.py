from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    """Record store used by the scan resolver.

    Implementations must make `create_record` and `set_departure` conditional
    writes: the store, not the caller, decides the winner of a race on the
    (activity_id, participant_id, calendar_day) key.
    """

    def find_record(self, *, activity_id: int, participant_id: int, calendar_day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_record(
        self,
        *,
        activity_id: int,
        participant_id: int,
        calendar_day: date,
        arrival_instant: datetime,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        """Insert the day's record; raises ConflictError when one already exists."""

        raise NotImplementedError

    def set_departure(self, *, record_id: int, departure_instant: datetime) -> AttendanceRecord:
        """Record the departure; raises ConflictError when one is already set."""

        raise NotImplementedError

    def get_record(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def delete_record(self, record_id: int) -> None:
        raise NotImplementedError

    def list_report_rows(
        self,
        *,
        owner_id: int,
        start_day: date,
        end_day: date,
        activity_id: Optional[int] = None,
        participant_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
