from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


def minutes_since_start(now: datetime, starts_at: datetime) -> int:
    """Whole minutes elapsed since ``starts_at``, never negative."""
    return max(0, math.floor((now - starts_at).total_seconds() / 60))


@dataclass(frozen=True)
class LatenessDecision:
    is_late: bool
    late_by_minutes: int = 0


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide the lateness of a check-in."""

    @abstractmethod
    def decide(self, *, now: datetime, starts_at: datetime) -> LatenessDecision:
        raise NotImplementedError
