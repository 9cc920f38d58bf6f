from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.http import current_profile_id, error_response, json_body, login_required, server_error_response
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        body = json_body()
        try:
            profile_id = container.profile_service.register(
                email=body.get("email", ""),
                full_name=body.get("full_name"),
                password=body.get("password", ""),
            )
            return jsonify({"success": True, "data": {"id": profile_id}}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("registration failed")
            return server_error_response()

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        body = json_body()
        try:
            s_user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))

            session.clear()
            session.permanent = bool(body.get("remember_me"))
            app.permanent_session_lifetime = timedelta(days=7)
            session["profile_id"] = s_user.profile_id
            session["email"] = s_user.email
            session["role"] = s_user.role.value

            return jsonify({"success": True, "data": s_user.to_dict()})
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("login failed")
            return server_error_response()

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def auth_logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def auth_me():
        try:
            s_user = container.auth_service.get_session_user(current_profile_id())
            return jsonify({"success": True, "data": s_user.to_dict()})
        except DomainError as e:
            session.clear()
            return error_response(e)
        except Exception:
            logger.exception("profile lookup failed")
            return server_error_response()
