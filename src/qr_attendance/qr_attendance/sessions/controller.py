from __future__ import annotations

import io
import logging

from flask import Flask, jsonify, send_file

from ..common.http import current_profile_id, error_response, json_body, login_required, server_error_response
from ..core.exceptions import DomainError, NotFoundError
from ..container import Container
from .qr import build_qr_png, qr_data_url

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    svc = container.session_service

    def _qr_echo(session) -> dict:
        return {
            "id": session.session_id,
            "title": session.title,
            "course_code": session.course_code,
            "session_date": session.session_date.strftime("%Y-%m-%d"),
            "start_time": session.start_time.strftime("%H:%M"),
            "end_time": session.end_time.strftime("%H:%M"),
        }

    @app.route("/api/sessions", methods=["POST"], endpoint="sessions_create")
    @login_required
    def sessions_create():
        try:
            session = svc.create(lecturer_id=current_profile_id(), payload=json_body())
            return jsonify({"success": True, "data": svc.to_dict(session)}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("session creation failed")
            return server_error_response("Failed to create session")

    @app.route("/api/sessions", methods=["GET"], endpoint="sessions_list")
    @login_required
    def sessions_list():
        try:
            items = []
            for summary in svc.list_for_lecturer(current_profile_id()):
                item = svc.to_dict(summary.session)
                item["attendance_count"] = summary.attendance_count
                items.append(item)
            return jsonify({"success": True, "data": items})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("listing sessions failed")
            return server_error_response("Failed to fetch sessions")

    @app.route("/api/sessions/<session_id>", methods=["GET"], endpoint="sessions_get")
    def sessions_get(session_id: str):
        """Owner gets full detail with records; everyone else a reduced view of active sessions."""
        try:
            profile_id = current_profile_id()
            if profile_id is not None:
                try:
                    session = svc.get_owned(session_id=session_id, lecturer_id=profile_id)
                except NotFoundError:
                    session = None
                if session:
                    records = container.attendance_service.records_for_session(session_id, newest_first=True)
                    return jsonify(
                        {
                            "success": True,
                            "data": {
                                "session": svc.to_dict(session),
                                "attendance_records": [r.to_dict() for r in records],
                            },
                        }
                    )

            session = svc.get_public(session_id)
            return jsonify({"success": True, "data": svc.to_public_dict(session)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("fetching session %s failed", session_id)
            return server_error_response()

    @app.route("/api/sessions/<session_id>", methods=["PUT"], endpoint="sessions_update")
    @login_required
    def sessions_update(session_id: str):
        try:
            session = svc.update(session_id=session_id, lecturer_id=current_profile_id(), payload=json_body())
            return jsonify({"success": True, "message": "Session updated successfully", "data": svc.to_dict(session)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("updating session %s failed", session_id)
            return server_error_response("Failed to update session")

    @app.route("/api/sessions/<session_id>", methods=["PATCH"], endpoint="sessions_toggle")
    @login_required
    def sessions_toggle(session_id: str):
        try:
            session = svc.set_active(
                session_id=session_id,
                lecturer_id=current_profile_id(),
                is_active=json_body().get("is_active"),
            )
            return jsonify({"success": True, "message": "Session updated successfully", "data": svc.to_dict(session)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("toggling session %s failed", session_id)
            return server_error_response("Failed to update session")

    @app.route("/api/sessions/<session_id>", methods=["DELETE"], endpoint="sessions_delete")
    @login_required
    def sessions_delete(session_id: str):
        try:
            svc.delete(session_id=session_id, lecturer_id=current_profile_id())
            return jsonify({"success": True, "message": "Session deleted successfully"})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("deleting session %s failed", session_id)
            return server_error_response("Failed to delete session")

    # ===== QR CODE ENDPOINTS =====

    @app.route("/api/sessions/<session_id>/qr", methods=["GET"], endpoint="sessions_qr")
    @login_required
    def sessions_qr(session_id: str):
        """QR code as a data URL plus the attendance link it encodes."""
        try:
            session = svc.get_owned(session_id=session_id, lecturer_id=current_profile_id())
            url = svc.attendance_url(session.session_id)
            return jsonify(
                {
                    "success": True,
                    "qr_code": qr_data_url(url),
                    "attendance_url": url,
                    "session": _qr_echo(session),
                }
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("QR generation failed for session %s", session_id)
            return server_error_response("Failed to generate QR code")

    @app.route("/api/sessions/<session_id>/qr.png", methods=["GET"], endpoint="sessions_qr_image")
    @login_required
    def sessions_qr_image(session_id: str):
        try:
            session = svc.get_owned(session_id=session_id, lecturer_id=current_profile_id())
            png = build_qr_png(svc.attendance_url(session.session_id))
            return send_file(
                io.BytesIO(png),
                mimetype="image/png",
                download_name=f"qr-{session.course_code}-{session.session_date:%Y-%m-%d}.png",
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("QR generation failed for session %s", session_id)
            return server_error_response("Failed to generate QR code")
