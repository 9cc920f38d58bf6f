from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import LectureSession, SessionDetails, SessionSummary
from .repository import SessionRepository

_COLUMNS = """
    s.session_id, s.lecturer_id, s.title, s.description, s.course_code,
    s.session_date, s.start_time, s.end_time, s.is_active, s.created_at
"""


def _to_session(r: Dict[str, Any]) -> LectureSession:
    return LectureSession(
        session_id=str(r["session_id"]),
        lecturer_id=int(r["lecturer_id"]),
        title=r["title"],
        description=r.get("description"),
        course_code=r["course_code"],
        session_date=r["session_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        is_active=bool(r["is_active"]),
        created_at=r.get("created_at"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, session_id: str) -> Optional[LectureSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions s
                WHERE s.session_id=%s
                """,
                (session_id,),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def create(self, session: LectureSession) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(
                    session_id, lecturer_id, title, description, course_code,
                    session_date, start_time, end_time, is_active, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    session.session_id,
                    int(session.lecturer_id),
                    session.title,
                    session.description,
                    session.course_code,
                    session.session_date,
                    session.start_time,
                    session.end_time,
                    int(session.is_active),
                    session.created_at,
                ),
            )

    def list_for_lecturer(self, lecturer_id: int) -> Sequence[SessionSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, COUNT(ar.record_id) AS attendance_count
                FROM attendance_sessions s
                LEFT JOIN attendance_records ar ON ar.session_id = s.session_id
                WHERE s.lecturer_id=%s
                GROUP BY s.session_id
                ORDER BY s.created_at DESC
                """,
                (int(lecturer_id),),
            )
            rows = fetchall(cur)
            return [SessionSummary(session=_to_session(r), attendance_count=int(r["attendance_count"] or 0)) for r in rows]

    def update_details(self, *, session_id: str, lecturer_id: int, details: SessionDetails) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET title=%s, description=%s, course_code=%s, session_date=%s, start_time=%s, end_time=%s
                WHERE session_id=%s AND lecturer_id=%s
                """,
                (
                    details.title,
                    details.description,
                    details.course_code,
                    details.session_date,
                    details.start_time,
                    details.end_time,
                    session_id,
                    int(lecturer_id),
                ),
            )

    def set_active(self, *, session_id: str, lecturer_id: int, is_active: bool) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_sessions SET is_active=%s WHERE session_id=%s AND lecturer_id=%s",
                (int(is_active), session_id, int(lecturer_id)),
            )

    def delete(self, *, session_id: str, lecturer_id: int) -> bool:
        # Records go first in the same transaction; the FK cascade covers them as well.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE ar FROM attendance_records ar
                JOIN attendance_sessions s ON s.session_id = ar.session_id
                WHERE s.session_id=%s AND s.lecturer_id=%s
                """,
                (session_id, int(lecturer_id)),
            )
            cur.execute(
                "DELETE FROM attendance_sessions WHERE session_id=%s AND lecturer_id=%s",
                (session_id, int(lecturer_id)),
            )
            return cur.rowcount > 0
