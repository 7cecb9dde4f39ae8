from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_RECORD_COLUMNS = (
    "record_id, activity_id, participant_id, calendar_day, status, arrival_instant, departure_instant"
)


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        activity_id=int(r["activity_id"]),
        participant_id=int(r["participant_id"]),
        calendar_day=r["calendar_day"],
        status=AttendanceStatus(r["status"]),
        arrival_instant=r["arrival_instant"],
        departure_instant=r.get("departure_instant"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    """Attendance store on MySQL.

    The UNIQUE KEY on (activity_id, participant_id, calendar_day) makes the
    arrival insert a create-if-absent; the departure update only matches rows
    without a departure.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_record(self, *, activity_id: int, participant_id: int, calendar_day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE activity_id=%s AND participant_id=%s AND calendar_day=%s
                """,
                (int(activity_id), int(participant_id), calendar_day),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_record(
        self,
        *,
        activity_id: int,
        participant_id: int,
        calendar_day: date,
        arrival_instant: datetime,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(activity_id, participant_id, calendar_day, status, arrival_instant)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(activity_id), int(participant_id), calendar_day, status.value, arrival_instant),
                )
                record_id = int(cur.lastrowid)
        except IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ConflictError("attendance already recorded for this day") from e
            raise

        return AttendanceRecord(
            record_id=record_id,
            activity_id=int(activity_id),
            participant_id=int(participant_id),
            calendar_day=calendar_day,
            status=status,
            arrival_instant=arrival_instant,
        )

    def set_departure(self, *, record_id: int, departure_instant: datetime) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET departure_instant=%s
                WHERE record_id=%s AND departure_instant IS NULL
                """,
                (departure_instant, int(record_id)),
            )
            updated = cur.rowcount > 0

            cur.execute(f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)

        if not r:
            raise NotFoundError(f"attendance record {record_id} not found")
        if not updated:
            raise ConflictError(f"departure already recorded for record {record_id}")
        return _to_record(r)

    def get_record(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def delete_record(self, record_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE record_id=%s", (int(record_id),))

    def list_report_rows(
        self,
        *,
        owner_id: int,
        start_day: date,
        end_day: date,
        activity_id: Optional[int] = None,
        participant_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["a.owner_id=%s", "ar.calendar_day BETWEEN %s AND %s"]
        params: list[object] = [int(owner_id), start_day, end_day]

        if activity_id is not None:
            clauses.append("ar.activity_id=%s")
            params.append(int(activity_id))
        if participant_id is not None:
            clauses.append("ar.participant_id=%s")
            params.append(int(participant_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    ar.record_id, ar.activity_id, a.title AS activity_title,
                    p.participant_id, p.external_id, p.first_name, p.last_name, p.section,
                    ar.calendar_day, ar.status, ar.arrival_instant, ar.departure_instant
                FROM attendance_records ar
                JOIN activities a ON a.activity_id = ar.activity_id
                JOIN participants p ON p.participant_id = ar.participant_id
                WHERE {where}
                ORDER BY ar.calendar_day DESC, ar.arrival_instant DESC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AttendanceReportRow(
                    record_id=int(r["record_id"]),
                    activity_id=int(r["activity_id"]),
                    activity_title=r["activity_title"],
                    participant_id=int(r["participant_id"]),
                    participant_external_id=r["external_id"],
                    participant_name=f"{r['first_name']} {r['last_name']}",
                    section=r["section"],
                    calendar_day=r["calendar_day"],
                    status=AttendanceStatus(r["status"]),
                    arrival_instant=r["arrival_instant"],
                    departure_instant=r.get("departure_instant"),
                )
                for r in rows
            ]
