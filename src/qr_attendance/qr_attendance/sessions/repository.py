from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import LectureSession, SessionDetails, SessionSummary


class SessionRepository(Protocol):
    def get_by_id(self, session_id: str) -> Optional[LectureSession]:
        raise NotImplementedError

    def create(self, session: LectureSession) -> None:
        raise NotImplementedError

    def list_for_lecturer(self, lecturer_id: int) -> Sequence[SessionSummary]:
        """Owner's sessions, newest first, with attendance counts."""

        raise NotImplementedError

    def update_details(self, *, session_id: str, lecturer_id: int, details: SessionDetails) -> None:
        raise NotImplementedError

    def set_active(self, *, session_id: str, lecturer_id: int, is_active: bool) -> None:
        raise NotImplementedError

    def delete(self, *, session_id: str, lecturer_id: int) -> bool:
        """Delete the session and all of its attendance records."""

        raise NotImplementedError
