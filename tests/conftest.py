from __future__ import annotations

from datetime import datetime, time

import pytest

from src.qr_attendance.qr_attendance.activities.model import Activity
from src.qr_attendance.qr_attendance.attendance.service import AttendanceService
from src.qr_attendance.qr_attendance.participants.model import Participant
from src.qr_attendance.qr_attendance.qr import codec

from fakes import SECRET, InMemoryActivities, InMemoryAttendance, InMemoryParticipants


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 10, 0)


@pytest.fixture
def participants_repo(activities_repo) -> InMemoryParticipants:
    repo = InMemoryParticipants(activities_repo)
    repo.add(
        Participant(
            participant_id=1,
            external_id="S-001",
            first_name="Ada",
            last_name="Lovelace",
            section="A",
            qr_secret=SECRET,
        )
    )
    repo.enroll(1, 1)
    return repo


@pytest.fixture
def activities_repo() -> InMemoryActivities:
    repo = InMemoryActivities()
    repo.add(
        Activity(
            activity_id=1,
            owner_id=7,
            title="Morning lecture",
            start_time=time(9, 0),
            end_time=time(11, 0),
            grace_period_minutes=15,
            allows_departure_scan=False,
        )
    )
    repo.add(
        Activity(
            activity_id=2,
            owner_id=7,
            title="Workshop",
            start_time=time(9, 0),
            end_time=time(17, 0),
            grace_period_minutes=15,
            allows_departure_scan=True,
        )
    )
    return repo


@pytest.fixture
def attendance_repo(participants_repo, activities_repo) -> InMemoryAttendance:
    return InMemoryAttendance(participants_repo, activities_repo)


@pytest.fixture
def attendance_service(attendance_repo, participants_repo, activities_repo) -> AttendanceService:
    return AttendanceService(attendance_repo, participants_repo, activities_repo)


@pytest.fixture
def qr_data(fixed_now) -> str:
    return codec.serialize(codec.issue("S-001", SECRET, now=int(fixed_now.timestamp())))
