from __future__ import annotations

import re
from datetime import date, time
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_clock_time, parse_iso_date

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required", details={field_name: "required"})
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(
            f"{field_name} must be at least {min_len} characters",
            details={field_name: f"min length {min_len}"},
        )
    return value


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if value is not None and len(value) > max_len:
        raise ValidationError(
            f"{field_name} must be at most {max_len} characters",
            details={field_name: f"max length {max_len}"},
        )
    return value


def require_email(value: str, field_name: str = "email") -> str:
    """Return the trimmed, lowercased address or raise."""
    email = require_non_empty(value, field_name)
    if not EMAIL_RE.match(email):
        raise ValidationError(f"{field_name} is not a valid email address", details={field_name: "invalid email"})
    return email.lower()


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None


def require_date(value: Any, field_name: str) -> date:
    raw = require_non_empty(value, field_name)
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD", details={field_name: "invalid date"})


def require_time(value: Any, field_name: str) -> time:
    raw = require_non_empty(value, field_name)
    try:
        return parse_clock_time(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be HH:MM", details={field_name: "invalid time"})


def require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be true or false", details={field_name: "invalid boolean"})
    return value
