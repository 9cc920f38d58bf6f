from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    """Lecturer account that owns attendance sessions.

    Plain data object; no database access here.
    """

    profile_id: int
    email: str
    full_name: Optional[str]
    password_hash: str
    role: Role
    created_at: Optional[datetime] = None
