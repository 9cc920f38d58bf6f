from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .strategies.base import AttendanceStrategy, minutes_since_start
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_mark(self, *, now: datetime, starts_at: datetime, threshold_minutes: int) -> AttendanceStrategy:
        if minutes_since_start(now, starts_at) > threshold_minutes:
            return LateStrategy()
        return OnTimeStrategy()
