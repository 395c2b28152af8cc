from __future__ import annotations

import pytest

from src.absence_portal.absence_portal.core.enums import Role
from src.absence_portal.absence_portal.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    EmailAlreadyInUse,
    InvalidEmail,
    ValidationError,
)


@pytest.fixture
def auth(container):
    return container.auth_service


def _student_signup(auth, **overrides):
    fields = dict(
        first_name="Asha",
        last_name="Patil",
        email="Asha@Example.com",
        password="secret1",
        confirm_password="secret1",
        role=Role.STUDENT,
        course="BCA",
        semester="3",
        prn="PRN001",
        faculty_id="ignored",
    )
    fields.update(overrides)
    return auth.sign_up(**fields)


def test_student_signup_creates_account_and_profile(auth, users):
    profile = _student_signup(auth)

    assert users.get_by_uid(profile.uid) == profile
    assert profile.email == "asha@example.com"
    assert profile.display_name == "Asha Patil"
    assert (profile.course, profile.semester, profile.prn) == ("BCA", "3", "PRN001")
    assert profile.faculty_id is None


def test_faculty_signup_keeps_only_faculty_fields(auth):
    profile = auth.sign_up(
        first_name="Kiran",
        last_name="Rao",
        email="rao@example.com",
        password="secret1",
        confirm_password="secret1",
        role=Role.FACULTY,
        course="BCA",
        faculty_id=" F001 ",
    )

    assert profile.faculty_id == "F001"
    assert profile.course is None
    assert profile.approver_id == "F001"


@pytest.mark.parametrize(
    "overrides, message",
    [
        (dict(first_name=" "), "First name is required"),
        (dict(password="abc", confirm_password="abc"), "Password must be at least 6 characters long"),
        (dict(confirm_password="secret2"), "Passwords do not match"),
        (dict(prn=""), "PRN is required"),
        (dict(course=None), "Course is required"),
    ],
)
def test_signup_validation(auth, users, overrides, message):
    with pytest.raises(ValidationError) as exc:
        _student_signup(auth, **overrides)
    assert str(exc.value) == message
    assert users.by_uid == {}


def test_faculty_signup_requires_faculty_id(auth):
    with pytest.raises(ValidationError, match="Faculty ID is required"):
        _student_signup(auth, role=Role.FACULTY, faculty_id=None)


def test_admin_cannot_self_register(auth):
    with pytest.raises(AuthorizationError):
        _student_signup(auth, role=Role.ADMIN)


def test_identity_errors_surface(auth):
    _student_signup(auth)

    with pytest.raises(EmailAlreadyInUse) as exc:
        _student_signup(auth, email="asha@example.com")
    assert str(exc.value) == "An account with this email already exists."

    with pytest.raises(InvalidEmail):
        _student_signup(auth, email="not-an-email")


def test_sign_in_and_out(auth, identity):
    created = _student_signup(auth)

    profile = auth.sign_in("asha@example.com", "secret1")
    assert profile == created

    auth.sign_out(profile.uid)
    assert identity.signed_out == [profile.uid]


def test_sign_in_with_wrong_password(auth):
    _student_signup(auth)

    with pytest.raises(AuthenticationError):
        auth.sign_in("asha@example.com", "nope")


def test_sign_in_without_profile(auth, identity):
    identity.create_account("ghost@example.com", "secret1")

    with pytest.raises(AuthenticationError, match="No profile found"):
        auth.sign_in("ghost@example.com", "secret1")
