from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .activities.mysql_activity_repository import MySQLActivityRepository
from .activities.repository import ActivityRepository
from .activities.service import ActivityService
from .attendance.debounce import ScanDebouncer
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.resolver import SessionResolver
from .attendance.service import AttendanceService
from .core.constants import (
    DEFAULT_GRACE_PERIOD_MINUTES,
    DEFAULT_QR_MAX_AGE_DAYS,
    DEFAULT_SCAN_COOLDOWN_SECONDS,
)
from .database.connection import DBConfig, DatabaseConnection
from .participants.mysql_participant_repository import MySQLParticipantRepository
from .participants.repository import ParticipantRepository
from .participants.service import ParticipantService


@dataclass(frozen=True)
class Container:
    participants_repo: ParticipantRepository
    activities_repo: ActivityRepository
    attendance_repo: AttendanceRepository

    participant_service: ParticipantService
    activity_service: ActivityService
    attendance_service: AttendanceService
    scan_debouncer: ScanDebouncer

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    participants_repo: ParticipantRepository,
    activities_repo: ActivityRepository,
    attendance_repo: AttendanceRepository,
    conn: Optional[DatabaseConnection] = None,
    enforce_qr_expiry: bool = False,
    qr_max_age_days: int = DEFAULT_QR_MAX_AGE_DAYS,
    scan_cooldown_seconds: float = DEFAULT_SCAN_COOLDOWN_SECONDS,
    default_grace_minutes: int = DEFAULT_GRACE_PERIOD_MINUTES,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""

    attendance_service = AttendanceService(
        attendance_repo,
        participants_repo,
        activities_repo,
        resolver=SessionResolver(attendance_repo),
        enforce_qr_expiry=enforce_qr_expiry,
        qr_max_age_days=qr_max_age_days,
    )

    return Container(
        conn=conn,
        participants_repo=participants_repo,
        activities_repo=activities_repo,
        attendance_repo=attendance_repo,
        participant_service=ParticipantService(participants_repo, activities_repo),
        activity_service=ActivityService(activities_repo, default_grace_minutes=default_grace_minutes),
        attendance_service=attendance_service,
        scan_debouncer=ScanDebouncer(scan_cooldown_seconds),
    )


def build_container(*, db_config: dict, **options) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        participants_repo=MySQLParticipantRepository(conn),
        activities_repo=MySQLActivityRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        conn=conn,
        **options,
    )
