from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_LATE_THRESHOLD_MINUTES, DEFAULT_PUBLIC_BASE_URL
from .database.connection import DBConfig, DatabaseConnection
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .profiles.service import AuthService, ProfileService
from .reports.service import ReportService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.service import SessionService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    profiles_repo: MySQLProfileRepository
    sessions_repo: MySQLSessionRepository
    attendance_repo: MySQLAttendanceRepository

    auth_service: AuthService
    profile_service: ProfileService
    session_service: SessionService
    attendance_service: AttendanceService
    report_service: ReportService


def build_container(
    *,
    db_config: dict,
    public_base_url: str = DEFAULT_PUBLIC_BASE_URL,
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES,
    enforce_time_window: bool = True,
    match_duplicate_by_name: bool = False,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    profiles_repo = MySQLProfileRepository(conn)
    sessions_repo = MySQLSessionRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    session_service = SessionService(
        sessions_repo,
        public_base_url=public_base_url,
        enforce_time_window=enforce_time_window,
    )
    attendance_service = AttendanceService(
        attendance_repo,
        sessions_repo,
        strategy_factory=AttendanceStrategyFactory(),
        late_threshold_minutes=late_threshold_minutes,
        enforce_time_window=enforce_time_window,
        match_duplicate_by_name=match_duplicate_by_name,
    )

    return Container(
        conn=conn,
        profiles_repo=profiles_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(profiles_repo),
        profile_service=ProfileService(profiles_repo),
        session_service=session_service,
        attendance_service=attendance_service,
        report_service=ReportService(session_service, attendance_repo),
    )
