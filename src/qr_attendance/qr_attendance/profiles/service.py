from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_email, require_max_length, require_min_length
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    profile_id: int
    email: str
    full_name: Optional[str]
    role: Role

    def to_dict(self) -> dict:
        return {
            "id": self.profile_id,
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role.value,
        }


class AuthService:
    """Use case: authenticate a lecturer (login)."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def authenticate(self, email: str, password: str) -> SessionUser:
        if not isinstance(email, str) or not isinstance(password, str):
            raise AuthenticationError("Invalid email or password")
        email = email.strip().lower()
        profile = self._profiles.get_by_email(email) if email else None
        if not profile:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(profile.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' from seed data
            ok = False

        if not ok:
            logger.info("failed login for profile %s", profile.profile_id)
            raise AuthenticationError("Invalid email or password")

        return SessionUser(
            profile_id=profile.profile_id,
            email=profile.email,
            full_name=profile.full_name,
            role=profile.role,
        )

    def get_session_user(self, profile_id: int) -> SessionUser:
        profile = self._profiles.get_by_id(profile_id)
        if not profile:
            raise AuthenticationError("Unauthorized")
        return SessionUser(
            profile_id=profile.profile_id,
            email=profile.email,
            full_name=profile.full_name,
            role=profile.role,
        )


class ProfileService:
    """Use case: register lecturer accounts."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def register(self, *, email: str, full_name: Optional[str], password: str) -> int:
        email = require_email(email, "email")
        full_name = optional_text(full_name)
        if full_name:
            require_max_length(full_name, "full_name", 255)
        if not isinstance(password, str):
            raise ValidationError("password is required", details={"password": "required"})
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)

        if self._profiles.get_by_email(email):
            raise ValidationError("Email is already registered", details={"email": "taken"})

        profile_id = self._profiles.create_profile(
            email=email,
            full_name=full_name,
            password_hash=generate_password_hash(password),
            role=Role.LECTURER,
        )
        logger.info("registered lecturer profile %s", profile_id)
        return profile_id
