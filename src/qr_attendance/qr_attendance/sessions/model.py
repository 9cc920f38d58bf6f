from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import SessionState


@dataclass(frozen=True)
class LectureSession:
    """Domain entity: a lecturer-owned, time-boxed class event."""

    session_id: str
    lecturer_id: int
    title: str
    course_code: str
    session_date: date
    start_time: time
    end_time: time
    is_active: bool = True
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.session_date, self.start_time)

    @property
    def ends_at(self) -> datetime:
        return datetime.combine(self.session_date, self.end_time)

    def state_at(self, now: datetime, *, enforce_time_window: bool = True) -> SessionState:
        """SCHEDULED before start, OPEN inside [start, end] while active, CLOSED otherwise.

        With ``enforce_time_window=False`` only the active flag matters.
        """

        if not self.is_active:
            return SessionState.CLOSED
        if not enforce_time_window:
            return SessionState.OPEN
        if now < self.starts_at:
            return SessionState.SCHEDULED
        if now > self.ends_at:
            return SessionState.CLOSED
        return SessionState.OPEN


@dataclass(frozen=True)
class SessionSummary:
    """Read-model for the lecturer dashboard list."""

    session: LectureSession
    attendance_count: int


@dataclass(frozen=True)
class SessionDetails:
    """Validated, editable fields of a session."""

    title: str
    course_code: str
    session_date: date
    start_time: time
    end_time: time
    description: Optional[str] = None
