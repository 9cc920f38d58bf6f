from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_email, require_max_length, require_non_empty
from ..core.constants import (
    DEFAULT_LATE_THRESHOLD_MINUTES,
    MAX_STUDENT_EMAIL_LENGTH,
    MAX_STUDENT_ID_LENGTH,
    MAX_STUDENT_NAME_LENGTH,
)
from ..core.enums import SessionState
from ..core.exceptions import DuplicateError, InactiveSessionError, NotFoundError, ValidationError
from ..sessions.repository import SessionRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, MarkResult, NewAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Submission:
    """Normalized student identity: name trimmed, email trimmed and lowercased."""

    session_id: str
    student_name: str
    student_email: str
    student_id: Optional[str]


def validate_submission(*, session_id: Any, student_name: Any, student_email: Any, student_id: Any) -> Submission:
    errors: dict[str, str] = {}

    sid = optional_text(session_id)
    if not sid:
        errors["session_id"] = "required"

    name = email = None
    try:
        name = require_max_length(require_non_empty(student_name, "student_name"), "student_name", MAX_STUDENT_NAME_LENGTH)
    except ValidationError as e:
        errors.update(e.details or {})
    try:
        email = require_max_length(require_email(student_email, "student_email"), "student_email", MAX_STUDENT_EMAIL_LENGTH)
    except ValidationError as e:
        errors.update(e.details or {})

    sid_student = optional_text(student_id)
    if sid_student and len(sid_student) > MAX_STUDENT_ID_LENGTH:
        errors["student_id"] = f"max length {MAX_STUDENT_ID_LENGTH}"

    if errors:
        raise ValidationError("Student name and a valid email are required", details=errors)

    return Submission(session_id=sid, student_name=name, student_email=email, student_id=sid_student)


class AttendanceService:
    """Use case: decide whether a student's attendance claim is accepted and record it."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES,
        enforce_time_window: bool = True,
        match_duplicate_by_name: bool = False,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._late_threshold = int(late_threshold_minutes)
        self._enforce_time_window = bool(enforce_time_window)
        self._match_by_name = bool(match_duplicate_by_name)

    def mark(
        self,
        *,
        session_id: Any,
        student_name: Any,
        student_email: Any,
        student_id: Any = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        now: datetime | None = None,
    ) -> MarkResult:
        # DATETIME columns hold whole seconds; lateness is computed on the stored value.
        now = (now or now_local()).replace(microsecond=0)

        sub = validate_submission(
            session_id=session_id,
            student_name=student_name,
            student_email=student_email,
            student_id=student_id,
        )

        session = self._sessions.get_by_id(sub.session_id)
        if not session:
            raise NotFoundError("Session not found")

        state = session.state_at(now, enforce_time_window=self._enforce_time_window)
        if state == SessionState.SCHEDULED:
            raise InactiveSessionError("This attendance session has not started yet")
        if state == SessionState.CLOSED:
            raise InactiveSessionError("This attendance session is no longer active")

        if self._match_by_name and self._attendance.find_by_student_name(
            session_id=session.session_id, student_name=sub.student_name
        ):
            raise DuplicateError("You have already marked attendance for this session")

        strategy = self._factory.for_mark(now=now, starts_at=session.starts_at, threshold_minutes=self._late_threshold)
        decision = strategy.decide(now=now, starts_at=session.starts_at)

        record = self._attendance.insert(
            NewAttendance(
                session_id=session.session_id,
                student_name=sub.student_name,
                student_email=sub.student_email,
                student_id=sub.student_id,
                marked_at=now,
                is_late=decision.is_late,
                late_by_minutes=decision.late_by_minutes,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )
        logger.info(
            "attendance %s marked for session %s (late=%s, minutes=%s)",
            record.record_id,
            session.session_id,
            record.is_late,
            record.late_by_minutes,
        )
        return MarkResult(record=record, session=session)

    def records_for_session(self, session_id: str, *, newest_first: bool = False) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_session(session_id, newest_first=newest_first)
