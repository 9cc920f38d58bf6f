from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.http import client_ip, error_response, json_body, server_error_response, user_agent
from ..core.exceptions import DomainError, StorageError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _mark(session_id, body: dict):
        logger.debug(
            "mark request session=%s name=%s email=%s student_id=%s",
            session_id,
            "provided" if body.get("student_name") else "missing",
            "provided" if body.get("student_email") else "missing",
            "provided" if body.get("student_id") else "missing",
        )
        try:
            result = container.attendance_service.mark(
                session_id=session_id,
                student_name=body.get("student_name"),
                student_email=body.get("student_email"),
                student_id=body.get("student_id"),
                ip_address=client_ip(),
                user_agent=user_agent(),
            )
            return jsonify({"success": True, "message": "Attendance marked successfully", "data": result.to_dict()}), 200
        except StorageError:
            return error_response(StorageError("Failed to mark attendance. Please try again."))
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("unexpected error while marking attendance")
            return server_error_response()

    @app.route("/api/attendance/<session_id>/mark", methods=["POST"], endpoint="attendance_mark_session")
    def attendance_mark_session(session_id: str):
        """Mark attendance for the session in the path (QR link target)."""
        return _mark(session_id, json_body())

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    def attendance_mark():
        """Mark attendance with ``session_id`` in the JSON body."""
        body = json_body()
        return _mark(body.get("session_id"), body)
