from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import Profile


class ProfileRepository(Protocol):
    """Services depend on this interface, not on a concrete database."""

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Profile]:
        raise NotImplementedError

    def create_profile(self, *, email: str, full_name: Optional[str], password_hash: str, role: Role) -> int:
        raise NotImplementedError
