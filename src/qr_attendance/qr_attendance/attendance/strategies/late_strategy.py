from __future__ import annotations

from datetime import datetime

from .base import AttendanceStrategy, LatenessDecision, minutes_since_start


class LateStrategy(AttendanceStrategy):
    """Late check-in: minutes are counted from the session start, not from the threshold."""

    def decide(self, *, now: datetime, starts_at: datetime) -> LatenessDecision:
        return LatenessDecision(is_late=True, late_by_minutes=minutes_since_start(now, starts_at))
