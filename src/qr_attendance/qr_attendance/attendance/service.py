from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..activities.repository import ActivityRepository
from ..common.datetime_utils import day_range, month_range, now_local, week_range
from ..core.constants import DEFAULT_QR_MAX_AGE_DAYS
from ..core.enums import AttendanceStatus, StatsPeriod
from ..core.exceptions import NotFoundError, ValidationError
from ..participants.repository import ParticipantRepository
from ..qr import codec
from .model import AttendanceReportRow
from .outcomes import (
    ActivityNotFound,
    InvalidQRFormat,
    InvalidSignature,
    ParticipantNotFound,
    QRExpired,
    ScanOutcome,
    describe,
)
from .repository import AttendanceRepository
from .resolver import SessionResolver

logger = logging.getLogger(__name__)

_PERIOD_RANGES = {
    StatsPeriod.DAY: day_range,
    StatsPeriod.WEEK: week_range,
    StatsPeriod.MONTH: month_range,
}


@dataclass(frozen=True)
class AttendanceStats:
    total: int
    present: int
    late: int
    absent: int
    percentage: float

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "percentage": self.percentage,
        }


def calculate_attendance_stats(present: int, late: int, absent: int) -> AttendanceStats:
    """Attendance rate counts late arrivals as attended."""
    total = present + late + absent
    percentage = (present + late) / total * 100 if total > 0 else 0.0
    return AttendanceStats(
        total=total,
        present=present,
        late=late,
        absent=absent,
        percentage=round(percentage, 1),
    )


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        participants: ParticipantRepository,
        activities: ActivityRepository,
        *,
        resolver: SessionResolver | None = None,
        enforce_qr_expiry: bool = False,
        qr_max_age_days: int = DEFAULT_QR_MAX_AGE_DAYS,
    ):
        self._attendance = attendance
        self._participants = participants
        self._activities = activities
        self._resolver = resolver or SessionResolver(attendance)
        self._enforce_qr_expiry = bool(enforce_qr_expiry)
        self._qr_max_age_days = int(qr_max_age_days)

    def submit_scan(self, raw_payload: str, activity_id: int, *, now: datetime | None = None) -> ScanOutcome:
        now = now or now_local()
        outcome = self._submit(raw_payload, activity_id, now)
        if isinstance(outcome, (InvalidQRFormat, InvalidSignature, QRExpired, ParticipantNotFound, ActivityNotFound)):
            logger.warning("scan rejected for activity %s: %s", activity_id, outcome.kind)
        else:
            logger.info("scan for activity %s: %s (record %s)", activity_id, outcome.kind, outcome.record.record_id)
        return outcome

    def _submit(self, raw_payload: str, activity_id: int, now: datetime) -> ScanOutcome:
        payload = codec.deserialize(raw_payload)
        if payload is None:
            return InvalidQRFormat()

        participant = self._participants.get_by_external_id(payload.participant_external_id)
        if not participant:
            return ParticipantNotFound(participant_external_id=payload.participant_external_id)

        if not codec.verify(payload, participant.qr_secret):
            return InvalidSignature(participant_external_id=payload.participant_external_id)

        if self._enforce_qr_expiry and codec.is_expired(payload, self._qr_max_age_days, now=int(now.timestamp())):
            return QRExpired(participant_external_id=payload.participant_external_id)

        activity = self._activities.get_by_id(activity_id)
        if not activity:
            return ActivityNotFound(activity_id=activity_id)

        outcome = self._resolver.resolve(
            activity_id=activity.activity_id,
            participant_id=participant.participant_id,
            schedule=activity.schedule,
            instant=now,
        )
        return replace(outcome, participant=participant)

    def list_records(
        self,
        *,
        owner_id: int,
        activity_id: Optional[int] = None,
        participant_id: Optional[int] = None,
        day: Optional[date] = None,
        start_day: Optional[date] = None,
        end_day: Optional[date] = None,
    ) -> list[dict]:
        if day is not None:
            start_day, end_day = day, day
        start_day = start_day or date.min
        end_day = end_day or date.max
        if start_day > end_day:
            raise ValidationError("start date must not be after end date")

        rows = self._attendance.list_report_rows(
            owner_id=int(owner_id),
            start_day=start_day,
            end_day=end_day,
            activity_id=activity_id,
            participant_id=participant_id,
        )
        return [self._to_ui(r) for r in rows]

    def delete_record(self, record_id: int, *, owner_id: int) -> None:
        """Administrative removal of one record, e.g. a scan taken by mistake.

        Records of activities the caller does not own are reported as missing.
        """
        record = self._attendance.get_record(int(record_id))
        activity = self._activities.get_by_id(record.activity_id) if record else None
        if not activity or activity.owner_id != int(owner_id):
            raise NotFoundError("Attendance record not found")

        self._attendance.delete_record(record.record_id)
        logger.info(
            "deleted attendance record %s (activity %s, participant %s, %s)",
            record.record_id,
            record.activity_id,
            record.participant_id,
            record.calendar_day,
        )

    def stats(
        self,
        *,
        owner_id: int,
        period: StatsPeriod | str = StatsPeriod.DAY,
        reference: Optional[date] = None,
        activity_id: Optional[int] = None,
    ) -> AttendanceStats:
        try:
            period = StatsPeriod(period)
        except ValueError:
            raise ValidationError(f"unknown period {period!r}") from None

        start_day, end_day = _PERIOD_RANGES[period](reference or now_local().date())
        rows = self._attendance.list_report_rows(
            owner_id=int(owner_id),
            start_day=start_day,
            end_day=end_day,
            activity_id=activity_id,
        )
        counts = {s: 0 for s in AttendanceStatus}
        for r in rows:
            counts[r.status] += 1
        return calculate_attendance_stats(
            counts[AttendanceStatus.PRESENT],
            counts[AttendanceStatus.LATE],
            counts[AttendanceStatus.ABSENT],
        )

    @staticmethod
    def outcome_to_dict(outcome: ScanOutcome) -> dict:
        data: dict = {"outcome": outcome.kind, "message": describe(outcome)}
        record = getattr(outcome, "record", None)
        if record is not None:
            data["record"] = {
                "record_id": record.record_id,
                "activity_id": record.activity_id,
                "participant_id": record.participant_id,
                "date": record.calendar_day.strftime("%Y-%m-%d"),
                "status": record.status.value,
                "time_in": record.arrival_instant.isoformat(),
                "time_out": record.departure_instant.isoformat() if record.departure_instant else None,
            }
        return data

    def _to_ui(self, r: AttendanceReportRow) -> dict:
        label = {
            AttendanceStatus.PRESENT: "Present",
            AttendanceStatus.LATE: "Late",
            AttendanceStatus.ABSENT: "Absent",
        }.get(r.status, r.status.value)

        return {
            "record_id": r.record_id,
            "activity_id": r.activity_id,
            "activity_title": r.activity_title,
            "participant_id": r.participant_id,
            "participant_external_id": r.participant_external_id,
            "participant_name": r.participant_name,
            "section": r.section,
            "date": r.calendar_day.strftime("%Y-%m-%d"),
            "time_in": r.arrival_instant.strftime("%H:%M:%S"),
            "time_out": r.departure_instant.strftime("%H:%M:%S") if r.departure_instant else "-",
            "status": r.status.value,
            "status_label": label,
        }
