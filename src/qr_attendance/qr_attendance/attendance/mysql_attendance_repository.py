from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.exceptions import DuplicateError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository

_COLUMNS = """
    record_id, session_id, student_name, student_email, student_id,
    marked_at, is_late, late_by_minutes, ip_address, user_agent
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        session_id=str(r["session_id"]),
        student_name=r["student_name"],
        student_email=r["student_email"],
        student_id=r.get("student_id"),
        marked_at=r["marked_at"],
        is_late=bool(r["is_late"]),
        late_by_minutes=int(r.get("late_by_minutes") or 0),
        ip_address=r.get("ip_address"),
        user_agent=r.get("user_agent"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, record: NewAttendance) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        session_id, student_name, student_email, student_id,
                        marked_at, is_late, late_by_minutes, ip_address, user_agent
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.session_id,
                        record.student_name,
                        record.student_email,
                        record.student_id,
                        record.marked_at,
                        int(record.is_late),
                        int(record.late_by_minutes),
                        record.ip_address,
                        record.user_agent,
                    ),
                )
            except mysql.connector.IntegrityError as e:
                if is_duplicate_key(e):
                    raise DuplicateError("You have already marked attendance for this session") from e
                raise

            return AttendanceRecord(
                record_id=int(cur.lastrowid),
                session_id=record.session_id,
                student_name=record.student_name,
                student_email=record.student_email,
                student_id=record.student_id,
                marked_at=record.marked_at,
                is_late=record.is_late,
                late_by_minutes=record.late_by_minutes,
                ip_address=record.ip_address,
                user_agent=record.user_agent,
            )

    def find_by_student_name(self, *, session_id: str, student_name: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            # BINARY keeps the name comparison case-sensitive under the default collation.
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE session_id=%s AND student_name = BINARY %s
                LIMIT 1
                """,
                (session_id, student_name),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_session(self, session_id: str, *, newest_first: bool = False) -> Sequence[AttendanceRecord]:
        order = "DESC" if newest_first else "ASC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE session_id=%s
                ORDER BY marked_at {order}, record_id {order}
                """,
                (session_id,),
            )
            return [_to_record(r) for r in fetchall(cur)]
