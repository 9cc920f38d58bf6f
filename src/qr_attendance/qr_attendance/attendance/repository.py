from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, NewAttendance


class AttendanceRepository(Protocol):
    def insert(self, record: NewAttendance) -> AttendanceRecord:
        """Insert-if-not-exists on (session_id, student_email).

        Raises DuplicateError when the pair is already recorded.
        """

        raise NotImplementedError

    def find_by_student_name(self, *, session_id: str, student_name: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_session(self, session_id: str, *, newest_first: bool = False) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
