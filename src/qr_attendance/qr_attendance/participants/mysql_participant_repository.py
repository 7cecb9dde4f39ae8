from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Participant
from .repository import ParticipantRepository

_COLUMNS = "participant_id, external_id, first_name, last_name, section, email, qr_secret"


def _to_participant(r: dict) -> Participant:
    return Participant(
        participant_id=int(r["participant_id"]),
        external_id=r["external_id"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        section=r["section"],
        email=r.get("email"),
        qr_secret=r["qr_secret"],
    )


class MySQLParticipantRepository(ParticipantRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, participant_id: int) -> Optional[Participant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM participants WHERE participant_id=%s", (int(participant_id),))
            r = fetchone(cur)
            return _to_participant(r) if r else None

    def get_by_external_id(self, external_id: str) -> Optional[Participant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM participants WHERE external_id=%s", (external_id,))
            r = fetchone(cur)
            return _to_participant(r) if r else None

    def create(
        self,
        *,
        external_id: str,
        first_name: str,
        last_name: str,
        section: str,
        qr_secret: str,
        email: Optional[str] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO participants(external_id, first_name, last_name, section, email, qr_secret)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (external_id, first_name, last_name, section, email, qr_secret),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ConflictError(f"participant {external_id!r} already exists") from e
            raise

    def list_for_owner(self, owner_id: int) -> Sequence[Participant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM participants
                WHERE participant_id IN (
                    SELECT e.participant_id
                    FROM enrollments e
                    JOIN activities a ON a.activity_id = e.activity_id
                    WHERE a.owner_id=%s
                )
                ORDER BY last_name, first_name
                """,
                (int(owner_id),),
            )
            return [_to_participant(r) for r in fetchall(cur)]

    def enroll(self, participant_id: int, activity_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO enrollments(participant_id, activity_id) VALUES(%s,%s)",
                (int(participant_id), int(activity_id)),
            )
