from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest
from werkzeug.http import parse_options_header

from src.qr_attendance.qr_attendance.attendance import service as attendance_service_module
from src.qr_attendance.qr_attendance.core.exceptions import StorageError
from tests.fakes import make_session

STUDENT = {"student_name": "Ada Lovelace", "student_email": "ada@example.edu", "student_id": "S-001"}

NEW_SESSION = {
    "title": "Databases",
    "course_code": "CS305",
    "session_date": "2024-01-10",
    "start_time": "13:00",
    "end_time": "14:00",
}


@pytest.fixture
def clock(monkeypatch):
    current = {"now": datetime(2024, 1, 10, 9, 10, 0)}
    monkeypatch.setattr(attendance_service_module, "now_local", lambda: current["now"])
    return current


@pytest.fixture
def open_session(sessions_repo):
    return sessions_repo.add(make_session("sess-1", lecturer_id=1))


def test_health(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "database": "ok"}


def test_health_reports_unreachable_database(client, container):
    container.conn.ok = False

    assert client.get("/api/health").status_code == 503


def test_mark_on_time(client, clock, open_session):
    resp = client.post("/api/attendance/sess-1/mark", json=STUDENT, headers={"X-Forwarded-For": "10.0.0.7, 10.0.0.1"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["message"] == "Attendance marked successfully"
    assert body["data"]["status"] == "On Time"
    assert body["data"]["late_by_minutes"] == 0
    assert body["data"]["session"]["course_code"] == "CS201"


def test_mark_records_client_address(client, clock, open_session, attendance_repo):
    client.post(
        "/api/attendance/mark",
        json={**STUDENT, "session_id": "sess-1"},
        headers={"X-Forwarded-For": "10.0.0.7, 10.0.0.1", "User-Agent": "pytest-agent"},
    )

    (rec,) = attendance_repo.list_for_session("sess-1")
    assert rec.ip_address == "10.0.0.7"
    assert rec.user_agent == "pytest-agent"


def test_mark_late(client, clock, open_session):
    clock["now"] = datetime(2024, 1, 10, 9, 20, 0)

    body = client.post("/api/attendance/sess-1/mark", json=STUDENT).get_json()

    assert body["data"]["is_late"] is True
    assert body["data"]["status"] == "Late (20 minutes)"


def test_mark_twice_is_conflict(client, clock, open_session):
    assert client.post("/api/attendance/sess-1/mark", json=STUDENT).status_code == 200

    resp = client.post(
        "/api/attendance/sess-1/mark", json={**STUDENT, "student_email": "ADA@example.edu"}
    )

    assert resp.status_code == 409
    assert resp.get_json()["code"] == "DUPLICATE_ATTENDANCE"


def test_mark_validation_error(client, clock, open_session):
    resp = client.post("/api/attendance/sess-1/mark", json={"student_name": "", "student_email": "nope"})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_ERROR"
    assert set(body["details"]) == {"student_name", "student_email"}


def test_mark_unknown_and_inactive_sessions_are_distinguished(client, clock, sessions_repo):
    sessions_repo.add(make_session("sess-off", is_active=False))

    missing = client.post("/api/attendance/nope/mark", json=STUDENT)
    inactive = client.post("/api/attendance/sess-off/mark", json=STUDENT)

    assert missing.status_code == 404 and missing.get_json()["code"] == "SESSION_NOT_FOUND"
    assert inactive.status_code == 404 and inactive.get_json()["code"] == "SESSION_INACTIVE"


def test_mark_storage_failure_is_generic_500(client, clock, open_session, attendance_repo, monkeypatch):
    def boom(record):
        raise StorageError("Database operation failed")

    monkeypatch.setattr(attendance_repo, "insert", boom)

    resp = client.post("/api/attendance/sess-1/mark", json=STUDENT)

    assert resp.status_code == 500
    assert resp.get_json() == {
        "success": False,
        "error": "Failed to mark attendance. Please try again.",
        "code": "STORAGE_ERROR",
    }


def test_owner_endpoints_require_login(client, open_session):
    assert client.get("/api/sessions").status_code == 401
    assert client.post("/api/sessions", json=NEW_SESSION).status_code == 401
    assert client.get("/api/attendance/report/sess-1?format=json").status_code == 401


def test_login_logout_me(client, login):
    login()

    me = client.get("/api/auth/me").get_json()
    assert me["data"]["email"] == "lecturer@example.edu"

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_login_with_bad_password(client):
    resp = client.post("/api/auth/login", json={"email": "lecturer@example.edu", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "UNAUTHORIZED"


def test_register(client):
    resp = client.post(
        "/api/auth/register", json={"email": "new@example.edu", "full_name": "Dr. New", "password": "hunter22"}
    )

    assert resp.status_code == 201
    assert client.post("/api/auth/login", json={"email": "new@example.edu", "password": "hunter22"}).status_code == 200


def test_session_crud_flow(client, login):
    login()

    created = client.post("/api/sessions", json=NEW_SESSION)
    assert created.status_code == 201
    data = created.get_json()["data"]
    session_id = data["id"]
    assert data["attendance_url"] == f"http://testserver/attendance/{session_id}"

    listed = client.get("/api/sessions").get_json()["data"]
    assert [(s["id"], s["attendance_count"]) for s in listed] == [(session_id, 0)]

    updated = client.put(f"/api/sessions/{session_id}", json={**NEW_SESSION, "title": "Databases II"})
    assert updated.get_json()["data"]["title"] == "Databases II"

    toggled = client.patch(f"/api/sessions/{session_id}", json={"is_active": False})
    assert toggled.get_json()["data"]["is_active"] is False

    assert client.delete(f"/api/sessions/{session_id}").status_code == 200
    assert client.get("/api/sessions").get_json()["data"] == []


def test_create_session_validation(client, login):
    login()

    resp = client.post("/api/sessions", json={**NEW_SESSION, "end_time": "12:00"})

    assert resp.status_code == 400
    assert resp.get_json()["details"] == {"end_time": "must be after start_time"}


def test_get_session_owner_and_public_views(client, clock, login, open_session):
    client.post("/api/attendance/sess-1/mark", json=STUDENT)

    public = client.get("/api/sessions/sess-1").get_json()["data"]
    assert "lecturer_id" not in public
    assert public["title"] == "Algorithms"

    login()
    owner = client.get("/api/sessions/sess-1").get_json()["data"]
    assert owner["session"]["lecturer_id"] == 1
    assert [r["student_email"] for r in owner["attendance_records"]] == ["ada@example.edu"]


def test_other_lecturer_cannot_modify_session(client, login, open_session):
    login("other@example.edu", "secret456")

    assert client.delete("/api/sessions/sess-1").status_code == 404
    assert client.patch("/api/sessions/sess-1", json={"is_active": False}).status_code == 404
    assert client.get("/api/attendance/report/sess-1?format=json").status_code == 404


def test_qr_endpoints(client, login, open_session):
    login()

    body = client.get("/api/sessions/sess-1/qr").get_json()
    assert body["qr_code"].startswith("data:image/png;base64,")
    assert body["attendance_url"] == "http://testserver/attendance/sess-1"

    png = client.get("/api/sessions/sess-1/qr.png")
    assert png.status_code == 200
    assert png.mimetype == "image/png"
    assert png.data.startswith(b"\x89PNG")


def test_report_formats(client, clock, login, open_session):
    client.post("/api/attendance/sess-1/mark", json=STUDENT)
    login()

    as_json = client.get("/api/attendance/report/sess-1?format=json").get_json()["data"]
    assert as_json["summary"] == {"total": 1, "on_time": 1, "late": 0, "attendance_rate": 100}

    as_csv = client.get("/api/attendance/report/sess-1?format=csv")
    assert as_csv.mimetype == "text/csv"
    assert parse_options_header(as_csv.headers["Content-Disposition"]) == (
        "attachment",
        {"filename": "attendance-CS201-2024-01-10.csv"},
    )

    as_pdf = client.get("/api/attendance/report/sess-1")
    assert as_pdf.mimetype == "application/pdf"
    assert as_pdf.data.startswith(b"%PDF")

    assert client.get("/api/attendance/report/sess-1?format=xml").status_code == 400


@pytest.mark.parametrize("course_code", ["TIẾNG101", 'CS"201'])
def test_report_download_name_survives_unusual_course_codes(client, login, sessions_repo, course_code):
    sessions_repo.add(replace(make_session("sess-1"), course_code=course_code))
    login()

    for fmt in ("csv", "pdf"):
        resp = client.get(f"/api/attendance/report/sess-1?format={fmt}")

        assert resp.status_code == 200
        disposition = resp.headers["Content-Disposition"]
        disposition.encode("latin-1")
        kind, options = parse_options_header(disposition)
        assert kind == "attachment"
        assert options["filename"] == f"attendance-{course_code}-2024-01-10.{fmt}"


@pytest.mark.parametrize(
    "headers, expected",
    [
        ({"X-Forwarded-For": "x" * 300}, "127.0.0.1"),
        ({"X-Forwarded-For": "not-an-ip, 10.0.0.1", "X-Real-IP": "10.0.0.9"}, "10.0.0.9"),
        ({"X-Forwarded-For": " 2001:db8::1 , 10.0.0.1"}, "2001:db8::1"),
    ],
)
def test_mark_ignores_unusable_forwarded_addresses(client, clock, open_session, attendance_repo, headers, expected):
    resp = client.post("/api/attendance/sess-1/mark", json=STUDENT, headers=headers)

    assert resp.status_code == 200
    (rec,) = attendance_repo.list_for_session("sess-1")
    assert rec.ip_address == expected


def test_auth_rejects_non_string_credentials(client):
    login = client.post("/api/auth/login", json={"email": ["lecturer@example.edu"], "password": 123456})
    register = client.post("/api/auth/register", json={"email": 42, "password": 1234567})

    assert login.status_code == 401
    assert register.status_code == 400
    assert register.get_json()["code"] == "VALIDATION_ERROR"
