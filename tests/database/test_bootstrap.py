from datetime import time, timedelta
from pathlib import Path

import pytest

from src.qr_attendance.qr_attendance.database.bootstrap import DEFAULT_SCHEMA_PATH, split_sql_statements
from src.qr_attendance.qr_attendance.database.mysql_base import normalize_mysql_time

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_default_schema_path_points_at_repo_schema():
    assert DEFAULT_SCHEMA_PATH == SCHEMA


def test_schema_splits_into_four_tables():
    statements = list(split_sql_statements(SCHEMA.read_text(encoding="utf-8")))

    assert len(statements) == 4
    assert all(s.startswith("CREATE TABLE IF NOT EXISTS") for s in statements)
    assert statements[2].startswith("CREATE TABLE IF NOT EXISTS enrollments")
    assert "UNIQUE KEY uq_attendance_day (activity_id, participant_id, calendar_day)" in statements[3]


def test_scan_instants_keep_microseconds():
    # Plain DATETIME rounds 23:59:59.6 into the next day while calendar_day stays put.
    attendance = list(split_sql_statements(SCHEMA.read_text(encoding="utf-8")))[3]

    assert "arrival_instant DATETIME(6) NOT NULL" in attendance
    assert "departure_instant DATETIME(6) NULL" in attendance


def test_split_ignores_semicolons_in_quotes():
    sql = "INSERT INTO t VALUES ('a;b');\n-- comment; here\nSELECT 1"
    assert list(split_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]


@pytest.mark.parametrize(
    "value, expected",
    [
        (time(9, 0), time(9, 0)),
        (timedelta(hours=9, minutes=30), time(9, 30)),
        ("08:15:05", time(8, 15, 5)),
        ("08:15", time(8, 15)),
        (None, None),
    ],
)
def test_normalize_mysql_time(value, expected):
    assert normalize_mysql_time(value) == expected
