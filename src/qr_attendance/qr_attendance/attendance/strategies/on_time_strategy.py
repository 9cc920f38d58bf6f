from __future__ import annotations

from datetime import datetime

from .base import AttendanceStrategy, LatenessDecision


class OnTimeStrategy(AttendanceStrategy):
    """Check-in within the late threshold."""

    def decide(self, *, now: datetime, starts_at: datetime) -> LatenessDecision:
        return LatenessDecision(is_late=False, late_by_minutes=0)
