"""Example: drive the service layer directly, without Flask.

Controllers stay thin; the attendance rules live in the services.
"""

import importlib

from config import get_settings_module

from src.qr_attendance.qr_attendance.container import build_container
from src.qr_attendance.qr_attendance.database.bootstrap import DEMO_LECTURER_EMAIL


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        public_base_url=settings.PUBLIC_BASE_URL,
        enforce_time_window=False,
    )

    lecturer = container.profiles_repo.get_by_email(DEMO_LECTURER_EMAIL)
    for summary in container.session_service.list_for_lecturer(lecturer.profile_id):
        s = summary.session
        print(f"{s.course_code} {s.title}: {summary.attendance_count} marked -> {container.session_service.attendance_url(s.session_id)}")

    report = container.report_service.build_session_report(
        session_id="00000000-0000-4000-8000-000000000001",
        lecturer_id=lecturer.profile_id,
    )
    print(report.summary.to_dict())


if __name__ == "__main__":
    main()
