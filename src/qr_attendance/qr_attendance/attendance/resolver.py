"""Per-day scan state machine.

For each (activity, participant, calendar day)::

    NO_RECORD --scan--> ARRIVED --scan, departure allowed--> DEPARTED

Any other scan leaves the record untouched and reports that the participant
has already arrived or departed. The store's conditional writes decide races;
a lost race is reported as the state the winner established.
"""

from __future__ import annotations

import logging
from datetime import datetime

from ..activities.model import ActivitySchedule
from ..core.exceptions import ConflictError
from .classifier import classify
from .model import AttendanceRecord
from .outcomes import AlreadyArrived, AlreadyDeparted, Arrived, Departed, RecordOutcome
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _already(record: AttendanceRecord) -> RecordOutcome:
    if record.has_departed:
        return AlreadyDeparted(record=record)
    return AlreadyArrived(record=record)


class SessionResolver:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def resolve(
        self,
        *,
        activity_id: int,
        participant_id: int,
        schedule: ActivitySchedule,
        instant: datetime,
    ) -> RecordOutcome:
        calendar_day = instant.date()
        record = self._attendance.find_record(
            activity_id=activity_id, participant_id=participant_id, calendar_day=calendar_day
        )

        if record is None:
            return self._arrive(
                activity_id=activity_id,
                participant_id=participant_id,
                schedule=schedule,
                instant=instant,
            )

        if record.has_departed:
            return AlreadyDeparted(record=record)

        if not schedule.allows_departure_scan:
            return AlreadyArrived(record=record)

        if instant < record.arrival_instant:
            logger.warning(
                "departure %s before arrival %s for record %s; ignored",
                instant.isoformat(),
                record.arrival_instant.isoformat(),
                record.record_id,
            )
            return AlreadyArrived(record=record)

        return self._depart(record, instant)

    def _arrive(
        self,
        *,
        activity_id: int,
        participant_id: int,
        schedule: ActivitySchedule,
        instant: datetime,
    ) -> RecordOutcome:
        calendar_day = instant.date()
        status = classify(instant, schedule.start_time, schedule.grace_period_minutes)
        try:
            created = self._attendance.create_record(
                activity_id=activity_id,
                participant_id=participant_id,
                calendar_day=calendar_day,
                arrival_instant=instant,
                status=status,
            )
        except ConflictError:
            winner = self._attendance.find_record(
                activity_id=activity_id, participant_id=participant_id, calendar_day=calendar_day
            )
            if winner is None:
                raise
            logger.info(
                "concurrent arrival for activity=%s participant=%s day=%s lost to record %s",
                activity_id,
                participant_id,
                calendar_day,
                winner.record_id,
            )
            return _already(winner)
        return Arrived(record=created)

    def _depart(self, record: AttendanceRecord, instant: datetime) -> RecordOutcome:
        try:
            updated = self._attendance.set_departure(record_id=record.record_id, departure_instant=instant)
        except ConflictError:
            current = self._attendance.find_record(
                activity_id=record.activity_id,
                participant_id=record.participant_id,
                calendar_day=record.calendar_day,
            )
            logger.info("concurrent departure for record %s already recorded", record.record_id)
            return AlreadyDeparted(record=current or record)
        return Departed(record=updated)
