from __future__ import annotations

import pytest

from src.qr_attendance.qr_attendance.core.enums import Role
from src.qr_attendance.qr_attendance.core.exceptions import AuthenticationError, ValidationError
from src.qr_attendance.qr_attendance.profiles.service import AuthService, ProfileService


def test_authenticate_success_ignores_email_case(profiles_repo):
    user = AuthService(profiles_repo).authenticate(" Lecturer@Example.edu ", "secret123")

    assert user.profile_id == 1
    assert user.role == Role.LECTURER
    assert user.to_dict()["role"] == "lecturer"


def test_authenticate_wrong_password(profiles_repo):
    with pytest.raises(AuthenticationError):
        AuthService(profiles_repo).authenticate("lecturer@example.edu", "wrong")


def test_authenticate_unknown_email(profiles_repo):
    with pytest.raises(AuthenticationError):
        AuthService(profiles_repo).authenticate("nobody@example.edu", "secret123")


def test_placeholder_hash_never_authenticates(profiles_repo):
    profiles_repo.create_profile(
        email="seed@example.edu", full_name=None, password_hash="CHANGE_ME", role=Role.LECTURER
    )

    with pytest.raises(AuthenticationError):
        AuthService(profiles_repo).authenticate("seed@example.edu", "CHANGE_ME")


def test_register_then_login(profiles_repo):
    profile_id = ProfileService(profiles_repo).register(
        email="New@Example.edu", full_name=" Dr. New ", password="hunter22"
    )

    profile = profiles_repo.get_by_id(profile_id)
    assert profile.email == "new@example.edu"
    assert profile.full_name == "Dr. New"
    assert AuthService(profiles_repo).authenticate("new@example.edu", "hunter22").profile_id == profile_id


def test_register_rejects_taken_email(profiles_repo):
    with pytest.raises(ValidationError) as exc:
        ProfileService(profiles_repo).register(email="lecturer@example.edu", full_name=None, password="hunter22")

    assert exc.value.details == {"email": "taken"}


def test_register_rejects_short_password(profiles_repo):
    with pytest.raises(ValidationError):
        ProfileService(profiles_repo).register(email="x@example.edu", full_name=None, password="123")


@pytest.mark.parametrize("email, password", [(None, "secret123"), (["lecturer@example.edu"], "secret123"), ("lecturer@example.edu", 123456)])
def test_authenticate_non_string_credentials(profiles_repo, email, password):
    with pytest.raises(AuthenticationError):
        AuthService(profiles_repo).authenticate(email, password)


def test_register_non_string_input_is_validation_error(profiles_repo):
    with pytest.raises(ValidationError) as exc:
        ProfileService(profiles_repo).register(email=42, full_name=None, password="hunter22")
    assert "email" in exc.value.details

    with pytest.raises(ValidationError) as exc:
        ProfileService(profiles_repo).register(email="x@example.edu", full_name=None, password=12345678)
    assert exc.value.details == {"password": "required"}
