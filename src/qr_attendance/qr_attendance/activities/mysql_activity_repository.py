from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Activity
from .repository import ActivityRepository

_COLUMNS = (
    "activity_id, owner_id, title, description, room, start_time, end_time, "
    "grace_period_minutes, allows_departure_scan"
)


def _to_activity(r: dict) -> Activity:
    return Activity(
        activity_id=int(r["activity_id"]),
        owner_id=int(r["owner_id"]),
        title=r["title"],
        description=r.get("description"),
        room=r.get("room"),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        grace_period_minutes=int(r.get("grace_period_minutes") or 0),
        allows_departure_scan=bool(r.get("allows_departure_scan")),
    )


class MySQLActivityRepository(ActivityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, activity_id: int) -> Optional[Activity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM activities WHERE activity_id=%s", (int(activity_id),))
            r = fetchone(cur)
            return _to_activity(r) if r else None

    def list_for_owner(self, owner_id: int) -> Sequence[Activity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM activities WHERE owner_id=%s ORDER BY title",
                (int(owner_id),),
            )
            return [_to_activity(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        owner_id: int,
        title: str,
        start_time: time,
        end_time: time,
        grace_period_minutes: int,
        allows_departure_scan: bool,
        description: Optional[str] = None,
        room: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activities(owner_id, title, description, room, start_time, end_time,
                                       grace_period_minutes, allows_departure_scan)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(owner_id),
                    title,
                    description,
                    room,
                    start_time,
                    end_time,
                    int(grace_period_minutes),
                    1 if allows_departure_scan else 0,
                ),
            )
            return int(cur.lastrowid)

    def update(
        self,
        activity_id: int,
        *,
        title: str,
        start_time: time,
        end_time: time,
        grace_period_minutes: int,
        allows_departure_scan: bool,
        description: Optional[str] = None,
        room: Optional[str] = None,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE activities
                SET title=%s, description=%s, room=%s, start_time=%s, end_time=%s,
                    grace_period_minutes=%s, allows_departure_scan=%s
                WHERE activity_id=%s
                """,
                (
                    title,
                    description,
                    room,
                    start_time,
                    end_time,
                    int(grace_period_minutes),
                    1 if allows_departure_scan else 0,
                    int(activity_id),
                ),
            )

    def delete(self, activity_id: int) -> None:
        # enrollments and attendance_records go with it (ON DELETE CASCADE).
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM activities WHERE activity_id=%s", (int(activity_id),))
