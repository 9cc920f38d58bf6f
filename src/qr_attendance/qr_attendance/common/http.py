from __future__ import annotations

import ipaddress
import logging
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def login_required(view):
    """Owner-only endpoints: answer 401 JSON instead of redirecting."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "profile_id" not in session:
            return jsonify({"success": False, "error": "Unauthorized", "code": "UNAUTHORIZED"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_profile_id() -> Optional[int]:
    value = session.get("profile_id")
    return int(value) if value is not None else None


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def error_response(err: DomainError):
    payload = {"success": False, "error": err.message or err.code, "code": err.code}
    if err.details:
        payload["details"] = err.details
    return jsonify(payload), err.status


def server_error_response(message: str = "Internal server error"):
    return jsonify({"success": False, "error": message, "code": "INTERNAL_ERROR"}), 500


def _valid_ip(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        ip = str(ipaddress.ip_address(value))
    except ValueError:
        return None
    # ip_address column is VARCHAR(64); IPv6 scope ids are unbounded
    return ip if len(ip) <= 64 else None


def client_ip() -> Optional[str]:
    """Best-effort originating address: first X-Forwarded-For hop, X-Real-IP, then the peer.

    Values that are not IP addresses are skipped.
    """
    try:
        candidates = [
            request.headers.get("X-Forwarded-For", "").split(",")[0],
            request.headers.get("X-Real-IP"),
            request.remote_addr,
        ]
    except RuntimeError:
        logger.debug("client address unavailable outside request context")
        return None
    for candidate in candidates:
        ip = _valid_ip(candidate)
        if ip:
            return ip
    return None


def user_agent() -> Optional[str]:
    value = request.headers.get("User-Agent")
    return value[:512] if value else None
