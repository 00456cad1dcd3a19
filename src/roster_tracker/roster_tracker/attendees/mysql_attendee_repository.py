from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_bool
from .model import Attendee
from .repository import AttendeeRepository

_COLUMNS = "attendee_id, full_name, course, batch, shift, contact_no, is_present, checked_in_at"
_DISTINCT_COLUMNS = {"course", "batch", "shift"}

# Byte-wise and NO PAD: "BCA", "bca " and "BCA " stay three distinct values.
_EXACT = "COLLATE utf8mb4_0900_bin"


def _to_attendee(r: dict) -> Attendee:
    return Attendee(
        attendee_id=int(r["attendee_id"]),
        full_name=r["full_name"],
        course=r["course"],
        batch=r["batch"],
        shift=r.get("shift"),
        contact_no=r.get("contact_no"),
        is_present=to_bool(r.get("is_present")),
        checked_in_at=r.get("checked_in_at"),
    )


class MySQLAttendeeRepository(AttendeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Attendee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendees ORDER BY attendee_id")
            return [_to_attendee(r) for r in fetchall(cur)]

    def list_filtered(
        self,
        *,
        course: Optional[str] = None,
        batch: Optional[str] = None,
        shift: Optional[str] = None,
        present_only: bool = False,
    ) -> Sequence[Attendee]:
        clauses: list[str] = []
        params: list[object] = []

        if course:
            clauses.append(f"course {_EXACT} = %s")
            params.append(course)
        if batch:
            clauses.append(f"batch {_EXACT} = %s")
            params.append(batch)
        if shift:
            clauses.append(f"shift {_EXACT} = %s")
            params.append(shift)
        if present_only:
            clauses.append("is_present=1")

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendees {where} ORDER BY attendee_id", tuple(params))
            return [_to_attendee(r) for r in fetchall(cur)]

    def get_by_id(self, attendee_id: int) -> Optional[Attendee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendees WHERE attendee_id=%s", (int(attendee_id),))
            r = fetchone(cur)
            return _to_attendee(r) if r else None

    def count_presence(self) -> tuple[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total, COALESCE(SUM(is_present), 0) AS present FROM attendees")
            r = fetchone(cur) or {}
            return int(r.get("total") or 0), int(r.get("present") or 0)

    def create(
        self,
        *,
        full_name: str,
        course: str,
        batch: str,
        shift: Optional[str],
        contact_no: Optional[str],
        is_present: bool,
        checked_in_at: Optional[datetime],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendees(full_name, course, batch, shift, contact_no, is_present, checked_in_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (full_name, course, batch, shift, contact_no, int(is_present), checked_in_at),
            )
            return int(cur.lastrowid)

    def update_presence(self, *, attendee_id: int, is_present: bool, checked_in_at: Optional[datetime]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendees
                SET is_present=%s, checked_in_at=%s
                WHERE attendee_id=%s
                """,
                (int(is_present), checked_in_at, int(attendee_id)),
            )
            # rowcount is 0 when the values did not change, so check existence instead.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM attendees WHERE attendee_id=%s", (int(attendee_id),))
            return fetchone(cur) is not None

    def delete(self, attendee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendees WHERE attendee_id=%s", (int(attendee_id),))
            return cur.rowcount > 0

    def distinct_values(self, column: str) -> Sequence[str]:
        if column not in _DISTINCT_COLUMNS:
            raise ValueError(f"Unsupported distinct column: {column!r}")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT DISTINCT {column} {_EXACT} AS value FROM attendees WHERE {column} IS NOT NULL")
            return sorted(r["value"] for r in fetchall(cur))
