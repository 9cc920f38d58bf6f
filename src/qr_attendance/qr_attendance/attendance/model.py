from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_date, format_datetime
from ..core.constants import STATUS_ON_TIME
from ..sessions.model import LectureSession


def status_label(is_late: bool, late_by_minutes: int, *, short: bool = False) -> str:
    if not is_late:
        return STATUS_ON_TIME
    unit = "min" if short else "minutes"
    return f"Late ({late_by_minutes} {unit})"


@dataclass(frozen=True)
class NewAttendance:
    """Normalized submission ready to be written to the ledger."""

    session_id: str
    student_name: str
    student_email: str
    student_id: Optional[str]
    marked_at: datetime
    is_late: bool
    late_by_minutes: int
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student check-in. Never mutated after insert."""

    record_id: int
    session_id: str
    student_name: str
    student_email: str
    student_id: Optional[str]
    marked_at: datetime
    is_late: bool
    late_by_minutes: int
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    @property
    def status(self) -> str:
        return status_label(self.is_late, self.late_by_minutes)

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "session_id": self.session_id,
            "student_name": self.student_name,
            "student_email": self.student_email,
            "student_id": self.student_id,
            "marked_at": format_datetime(self.marked_at),
            "is_late": self.is_late,
            "late_by_minutes": self.late_by_minutes,
            "status": self.status,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
        }


@dataclass(frozen=True)
class MarkResult:
    record: AttendanceRecord
    session: LectureSession

    def to_dict(self) -> dict:
        return {
            "id": self.record.record_id,
            "session": {
                "title": self.session.title,
                "course_code": self.session.course_code,
                "session_date": format_date(self.session.session_date),
            },
            "marked_at": format_datetime(self.record.marked_at),
            "is_late": self.record.is_late,
            "late_by_minutes": self.record.late_by_minutes,
            "status": self.record.status,
        }
