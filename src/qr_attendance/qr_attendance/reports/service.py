from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_date, format_datetime, format_time, now_local
from ..sessions.model import LectureSession
from ..sessions.service import SessionService


@dataclass(frozen=True)
class ReportSummary:
    total: int
    on_time: int
    late: int
    attendance_rate: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "on_time": self.on_time,
            "late": self.late,
            "attendance_rate": self.attendance_rate,
        }


@dataclass(frozen=True)
class SessionReport:
    session: LectureSession
    records: Sequence[AttendanceRecord]
    summary: ReportSummary
    generated_at: datetime

    @property
    def filename_stem(self) -> str:
        return f"attendance-{self.session.course_code}-{format_date(self.session.session_date)}"

    def to_dict(self) -> dict:
        s = self.session
        return {
            "session": {
                "id": s.session_id,
                "title": s.title,
                "description": s.description,
                "course_code": s.course_code,
                "session_date": format_date(s.session_date),
                "start_time": format_time(s.start_time),
                "end_time": format_time(s.end_time),
                "is_active": s.is_active,
            },
            "summary": self.summary.to_dict(),
            "records": [r.to_dict() for r in self.records],
            "generated_at": format_datetime(self.generated_at),
        }


def summarize(records: Sequence[AttendanceRecord]) -> ReportSummary:
    """Counts plus the share of on-time check-ins, as a whole percentage."""

    total = len(records)
    late = sum(1 for r in records if r.is_late)
    on_time = total - late
    rate = round(on_time / total * 100) if total else 0
    return ReportSummary(total=total, on_time=on_time, late=late, attendance_rate=int(rate))


class ReportService:
    def __init__(self, sessions: SessionService, attendance: AttendanceRepository):
        self._sessions = sessions
        self._attendance = attendance

    def build_session_report(self, *, session_id: str, lecturer_id: int, now: datetime | None = None) -> SessionReport:
        session = self._sessions.get_owned(session_id=session_id, lecturer_id=lecturer_id)
        records = list(self._attendance.list_for_session(session.session_id, newest_first=False))
        return SessionReport(
            session=session,
            records=records,
            summary=summarize(records),
            generated_at=(now or now_local()).replace(microsecond=0),
        )
