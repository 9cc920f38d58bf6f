from __future__ import annotations

from datetime import datetime

import pytest

from src.qr_attendance.qr_attendance.attendance.service import AttendanceService, validate_submission
from src.qr_attendance.qr_attendance.core.exceptions import (
    DuplicateError,
    InactiveSessionError,
    NotFoundError,
    ValidationError,
)

from tests.fakes import make_session


@pytest.fixture
def svc(sessions_repo, attendance_repo):
    sessions_repo.add(make_session("sess-1"))
    return AttendanceService(attendance_repo, sessions_repo)


def _mark(svc, now, **overrides):
    kwargs = {
        "session_id": "sess-1",
        "student_name": "Ada Lovelace",
        "student_email": "ada@example.edu",
        "student_id": "S-001",
    }
    kwargs.update(overrides)
    return svc.mark(now=now, **kwargs)


def test_mark_within_threshold_is_on_time(svc, fixed_now):
    result = _mark(svc, fixed_now)

    assert result.record.is_late is False
    assert result.record.late_by_minutes == 0
    data = result.to_dict()
    assert data["status"] == "On Time"
    assert data["session"] == {"title": "Algorithms", "course_code": "CS201", "session_date": "2024-01-10"}
    assert data["marked_at"] == "2024-01-10 09:10:00"


def test_mark_after_threshold_is_late(svc):
    result = _mark(svc, datetime(2024, 1, 10, 9, 20, 0))

    assert result.record.is_late is True
    assert result.record.late_by_minutes == 20
    assert result.to_dict()["status"] == "Late (20 minutes)"


def test_marked_at_is_truncated_to_seconds(svc):
    result = _mark(svc, datetime(2024, 1, 10, 9, 5, 30, 123456))

    assert result.record.marked_at == datetime(2024, 1, 10, 9, 5, 30)


def test_submission_is_normalized(svc, fixed_now, attendance_repo):
    _mark(svc, fixed_now, student_name="  Ada Lovelace ", student_email=" Ada@Example.EDU ", student_id="   ")

    (rec,) = attendance_repo.list_for_session("sess-1")
    assert rec.student_name == "Ada Lovelace"
    assert rec.student_email == "ada@example.edu"
    assert rec.student_id is None


def test_duplicate_email_is_case_insensitive(svc, fixed_now, attendance_repo):
    _mark(svc, fixed_now)

    with pytest.raises(DuplicateError):
        _mark(svc, fixed_now, student_name="Someone Else", student_email="ADA@example.edu")

    assert attendance_repo.count_for_session("sess-1") == 1


def test_same_name_different_email_is_accepted_by_default(svc, fixed_now, attendance_repo):
    _mark(svc, fixed_now)
    _mark(svc, fixed_now, student_email="ada.l@example.edu")

    assert attendance_repo.count_for_session("sess-1") == 2


def test_name_matching_rejects_same_name(sessions_repo, attendance_repo, fixed_now):
    sessions_repo.add(make_session("sess-1"))
    svc = AttendanceService(attendance_repo, sessions_repo, match_duplicate_by_name=True)
    _mark(svc, fixed_now)

    with pytest.raises(DuplicateError):
        _mark(svc, fixed_now, student_email="ada.l@example.edu")


def test_unknown_session(svc, fixed_now, attendance_repo):
    with pytest.raises(NotFoundError):
        _mark(svc, fixed_now, session_id="missing")

    assert attendance_repo.records == {}


def test_inactive_session_creates_no_record(sessions_repo, attendance_repo, fixed_now):
    sessions_repo.add(make_session("sess-off", is_active=False))
    svc = AttendanceService(attendance_repo, sessions_repo)

    with pytest.raises(InactiveSessionError):
        _mark(svc, fixed_now, session_id="sess-off")

    assert attendance_repo.count_for_session("sess-off") == 0


def test_before_start_and_after_end_are_rejected(svc, attendance_repo):
    with pytest.raises(InactiveSessionError, match="not started"):
        _mark(svc, datetime(2024, 1, 10, 8, 59, 59))
    with pytest.raises(InactiveSessionError, match="no longer active"):
        _mark(svc, datetime(2024, 1, 10, 10, 30, 1))

    assert attendance_repo.count_for_session("sess-1") == 0


def test_end_boundary_is_inclusive(svc):
    result = _mark(svc, datetime(2024, 1, 10, 10, 30, 0))

    assert result.record.is_late is True
    assert result.record.late_by_minutes == 90


def test_window_not_enforced_only_checks_active_flag(sessions_repo, attendance_repo):
    sessions_repo.add(make_session("sess-1"))
    svc = AttendanceService(attendance_repo, sessions_repo, enforce_time_window=False)

    early = _mark(svc, datetime(2024, 1, 10, 8, 0, 0))

    assert early.record.is_late is False
    assert early.record.late_by_minutes == 0


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"student_name": "   "}, "student_name"),
        ({"student_name": None}, "student_name"),
        ({"student_email": ""}, "student_email"),
        ({"student_email": "not-an-email"}, "student_email"),
        ({"student_email": "a@b"}, "student_email"),
    ],
)
def test_invalid_submission_creates_no_record(svc, fixed_now, attendance_repo, overrides, field):
    with pytest.raises(ValidationError) as exc:
        _mark(svc, fixed_now, **overrides)

    assert field in exc.value.details
    assert attendance_repo.records == {}


def test_validation_runs_before_session_lookup():
    with pytest.raises(ValidationError) as exc:
        validate_submission(session_id="", student_name="", student_email="x", student_id=None)

    assert set(exc.value.details) == {"session_id", "student_name", "student_email"}
