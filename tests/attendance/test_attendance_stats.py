from __future__ import annotations

from datetime import date, datetime

import pytest

from src.qr_attendance.qr_attendance.attendance.service import calculate_attendance_stats
from src.qr_attendance.qr_attendance.common.datetime_utils import month_range, week_range
from src.qr_attendance.qr_attendance.core.exceptions import ValidationError


def test_calculate_attendance_stats():
    stats = calculate_attendance_stats(present=5, late=2, absent=1)

    assert stats.total == 8
    assert stats.percentage == 87.5


def test_calculate_attendance_stats_rounds_and_handles_empty():
    assert calculate_attendance_stats(1, 0, 2).percentage == 33.3
    assert calculate_attendance_stats(0, 0, 0).percentage == 0


def test_week_and_month_ranges():
    assert week_range(date(2026, 2, 4)) == (date(2026, 2, 2), date(2026, 2, 8))
    assert month_range(date(2026, 2, 14)) == (date(2026, 2, 1), date(2026, 2, 28))
    assert month_range(date(2026, 12, 31)) == (date(2026, 12, 1), date(2026, 12, 31))


def test_stats_by_period(attendance_service, attendance_repo, qr_data):
    attendance_service.submit_scan(qr_data, 1, now=datetime(2026, 2, 2, 9, 10))
    attendance_service.submit_scan(qr_data, 1, now=datetime(2026, 2, 3, 9, 30))
    attendance_repo.add_absent(activity_id=1, participant_id=1, calendar_day=date(2026, 2, 4))
    attendance_service.submit_scan(qr_data, 1, now=datetime(2026, 3, 2, 9, 0))

    day = attendance_service.stats(owner_id=7, period="day", reference=date(2026, 2, 3))
    week = attendance_service.stats(owner_id=7, period="week", reference=date(2026, 2, 3))
    month = attendance_service.stats(owner_id=7, period="month", reference=date(2026, 2, 3))

    assert (day.present, day.late, day.absent) == (0, 1, 0)
    assert (week.present, week.late, week.absent) == (1, 1, 1)
    assert week.percentage == 66.7
    assert month.total == 3


def test_stats_scoped_to_owner(attendance_service, qr_data):
    attendance_service.submit_scan(qr_data, 1, now=datetime(2026, 2, 2, 9, 10))

    assert attendance_service.stats(owner_id=99, reference=date(2026, 2, 2)).total == 0


def test_stats_rejects_unknown_period(attendance_service):
    with pytest.raises(ValidationError):
        attendance_service.stats(owner_id=7, period="year")


def test_list_records(attendance_service, qr_data):
    attendance_service.submit_scan(qr_data, 2, now=datetime(2026, 2, 2, 9, 10))
    attendance_service.submit_scan(qr_data, 2, now=datetime(2026, 2, 2, 17, 0))
    attendance_service.submit_scan(qr_data, 1, now=datetime(2026, 2, 3, 9, 20))

    rows = attendance_service.list_records(owner_id=7)
    assert [r["date"] for r in rows] == ["2026-02-03", "2026-02-02"]
    assert rows[0]["status_label"] == "Late"
    assert rows[0]["time_out"] == "-"
    assert rows[1]["time_out"] == "17:00:00"
    assert rows[1]["participant_name"] == "Ada Lovelace"

    assert len(attendance_service.list_records(owner_id=7, day=date(2026, 2, 2))) == 1
    assert len(attendance_service.list_records(owner_id=7, activity_id=1)) == 1
    assert attendance_service.list_records(owner_id=8) == []


def test_list_records_rejects_inverted_range(attendance_service):
    with pytest.raises(ValidationError):
        attendance_service.list_records(owner_id=7, start_day=date(2026, 2, 3), end_day=date(2026, 2, 2))
