from __future__ import annotations

from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from src.qr_attendance.qr_attendance.attendance.service import AttendanceService
from src.qr_attendance.qr_attendance.container import Container
from src.qr_attendance.qr_attendance.core.enums import Role
from src.qr_attendance.qr_attendance.profiles.service import AuthService, ProfileService
from src.qr_attendance.qr_attendance.reports.service import ReportService
from src.qr_attendance.qr_attendance.sessions.service import SessionService
from tests.fakes import FakeConnection, InMemoryAttendance, InMemoryProfiles, InMemorySessions


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 10, 9, 10, 0)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def sessions_repo(attendance_repo) -> InMemorySessions:
    return InMemorySessions(attendance_repo)


@pytest.fixture
def profiles_repo() -> InMemoryProfiles:
    repo = InMemoryProfiles()
    repo.create_profile(
        email="lecturer@example.edu",
        full_name="Dr. Rivera",
        password_hash=generate_password_hash("secret123"),
        role=Role.LECTURER,
    )
    repo.create_profile(
        email="other@example.edu",
        full_name="Dr. Okafor",
        password_hash=generate_password_hash("secret456"),
        role=Role.LECTURER,
    )
    return repo


@pytest.fixture
def container(profiles_repo, sessions_repo, attendance_repo) -> Container:
    ids = iter(f"sess-new-{n}" for n in range(1, 100))
    session_service = SessionService(
        sessions_repo,
        public_base_url="http://testserver",
        id_factory=lambda: next(ids),
    )
    return Container(
        conn=FakeConnection(),
        profiles_repo=profiles_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(profiles_repo),
        profile_service=ProfileService(profiles_repo),
        session_service=session_service,
        attendance_service=AttendanceService(attendance_repo, sessions_repo),
        report_service=ReportService(session_service, attendance_repo),
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.qr_attendance.qr_attendance.main import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(email: str = "lecturer@example.edu", password: str = "secret123"):
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200
        return resp

    return _login
