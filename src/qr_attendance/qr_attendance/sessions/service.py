from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import format_date, format_datetime, format_time, now_local
from ..common.validators import (
    optional_text,
    require_bool,
    require_date,
    require_max_length,
    require_non_empty,
    require_time,
)
from ..core.constants import MAX_COURSE_CODE_LENGTH, MAX_DESCRIPTION_LENGTH, MAX_TITLE_LENGTH
from ..core.exceptions import NotFoundError, ValidationError
from .model import LectureSession, SessionDetails, SessionSummary
from .repository import SessionRepository

logger = logging.getLogger(__name__)


def validate_session_details(payload: dict) -> SessionDetails:
    """Validate create/update input, collecting every field error before raising."""

    errors: dict[str, str] = {}
    values: dict[str, Any] = {}

    def check(field: str, fn: Callable[[], Any]) -> None:
        try:
            values[field] = fn()
        except ValidationError as e:
            errors.update(e.details or {field: e.message})

    check("title", lambda: require_max_length(require_non_empty(payload.get("title"), "title"), "title", MAX_TITLE_LENGTH))
    check(
        "course_code",
        lambda: require_max_length(
            require_non_empty(payload.get("course_code"), "course_code"), "course_code", MAX_COURSE_CODE_LENGTH
        ),
    )
    check("session_date", lambda: require_date(payload.get("session_date"), "session_date"))
    check("start_time", lambda: require_time(payload.get("start_time"), "start_time"))
    check("end_time", lambda: require_time(payload.get("end_time"), "end_time"))
    check(
        "description",
        lambda: require_max_length(optional_text(payload.get("description")), "description", MAX_DESCRIPTION_LENGTH),
    )

    if "start_time" in values and "end_time" in values and values["start_time"] >= values["end_time"]:
        errors["end_time"] = "must be after start_time"

    if errors:
        raise ValidationError("Validation failed", details=errors)

    return SessionDetails(
        title=values["title"],
        course_code=values["course_code"],
        session_date=values["session_date"],
        start_time=values["start_time"],
        end_time=values["end_time"],
        description=values["description"],
    )


class SessionService:
    """Use cases: lecturer session lifecycle (create, read, edit, toggle, delete)."""

    def __init__(
        self,
        sessions: SessionRepository,
        *,
        public_base_url: str,
        enforce_time_window: bool = True,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._sessions = sessions
        self._public_base_url = public_base_url.rstrip("/")
        self._enforce_time_window = bool(enforce_time_window)
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def attendance_url(self, session_id: str) -> str:
        return f"{self._public_base_url}/attendance/{session_id}"

    def create(self, *, lecturer_id: int, payload: dict, now: datetime | None = None) -> LectureSession:
        details = validate_session_details(payload)
        session = LectureSession(
            session_id=self._id_factory(),
            lecturer_id=int(lecturer_id),
            title=details.title,
            description=details.description,
            course_code=details.course_code,
            session_date=details.session_date,
            start_time=details.start_time,
            end_time=details.end_time,
            is_active=True,
            created_at=(now or now_local()).replace(microsecond=0),
        )
        self._sessions.create(session)
        logger.info("lecturer %s created session %s (%s)", lecturer_id, session.session_id, session.course_code)
        return session

    def list_for_lecturer(self, lecturer_id: int) -> Sequence[SessionSummary]:
        return self._sessions.list_for_lecturer(int(lecturer_id))

    def get_owned(self, *, session_id: str, lecturer_id: int) -> LectureSession:
        session = self._sessions.get_by_id(session_id)
        if not session or session.lecturer_id != int(lecturer_id):
            raise NotFoundError("Session not found or unauthorized")
        return session

    def get_public(self, session_id: str) -> LectureSession:
        session = self._sessions.get_by_id(session_id)
        if not session or not session.is_active:
            raise NotFoundError("Session not found or inactive")
        return session

    def update(self, *, session_id: str, lecturer_id: int, payload: dict) -> LectureSession:
        details = validate_session_details(payload)
        self.get_owned(session_id=session_id, lecturer_id=lecturer_id)
        self._sessions.update_details(session_id=session_id, lecturer_id=int(lecturer_id), details=details)
        logger.info("session %s updated", session_id)
        return self.get_owned(session_id=session_id, lecturer_id=lecturer_id)

    def set_active(self, *, session_id: str, lecturer_id: int, is_active: Any) -> LectureSession:
        flag = require_bool(is_active, "is_active")
        self.get_owned(session_id=session_id, lecturer_id=lecturer_id)
        self._sessions.set_active(session_id=session_id, lecturer_id=int(lecturer_id), is_active=flag)
        logger.info("session %s is_active=%s", session_id, flag)
        return self.get_owned(session_id=session_id, lecturer_id=lecturer_id)

    def delete(self, *, session_id: str, lecturer_id: int) -> None:
        self.get_owned(session_id=session_id, lecturer_id=lecturer_id)
        if not self._sessions.delete(session_id=session_id, lecturer_id=int(lecturer_id)):
            raise NotFoundError("Session not found or unauthorized")
        logger.info("session %s deleted", session_id)

    def to_dict(self, session: LectureSession, *, now: datetime | None = None) -> dict:
        return {
            "id": session.session_id,
            "lecturer_id": session.lecturer_id,
            "title": session.title,
            "description": session.description,
            "course_code": session.course_code,
            "session_date": format_date(session.session_date),
            "start_time": format_time(session.start_time),
            "end_time": format_time(session.end_time),
            "is_active": session.is_active,
            "state": session.state_at(now or now_local(), enforce_time_window=self._enforce_time_window).value,
            "created_at": format_datetime(session.created_at) if session.created_at else None,
            "attendance_url": self.attendance_url(session.session_id),
        }

    def to_public_dict(self, session: LectureSession) -> dict:
        return {
            "id": session.session_id,
            "title": session.title,
            "description": session.description,
            "course_code": session.course_code,
            "session_date": format_date(session.session_date),
            "start_time": format_time(session.start_time),
            "end_time": format_time(session.end_time),
            "is_active": session.is_active,
        }
