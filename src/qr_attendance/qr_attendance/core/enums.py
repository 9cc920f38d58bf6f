from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role of an account that owns sessions."""

    LECTURER = "lecturer"


class SessionState(str, Enum):
    """Logical state of a session, derived from wall-clock time and the active flag."""

    SCHEDULED = "SCHEDULED"
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class ReportFormat(str, Enum):
    PDF = "pdf"
    JSON = "json"
    CSV = "csv"
