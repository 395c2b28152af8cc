from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..identity.provider import IdentityProvider
from .model import UserProfile
from .repository import UserRepository

log = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def _build_profile(
    *,
    uid: str,
    email: str,
    display_name: str,
    role: Role,
    course: Optional[str],
    semester: Optional[str],
    prn: Optional[str],
    faculty_id: Optional[str],
) -> UserProfile:
    # Only the fields that belong to the role are kept.
    is_student = role == Role.STUDENT
    return UserProfile(
        uid=uid,
        email=email,
        display_name=display_name,
        role=role,
        course=_clean(course) if is_student else None,
        semester=_clean(semester) if is_student else None,
        prn=_clean(prn) if is_student else None,
        faculty_id=_clean(faculty_id) if role == Role.FACULTY else None,
    )


def _require_role_fields(role: Role, *, course, semester, prn, faculty_id) -> None:
    if role == Role.STUDENT:
        require_non_empty(prn, "PRN")
        require_non_empty(course, "Course")
        require_non_empty(semester, "Semester")
    elif role == Role.FACULTY:
        require_non_empty(faculty_id, "Faculty ID")


class AuthService:
    """Use cases: sign up, sign in, sign out."""

    def __init__(self, identity: IdentityProvider, users: UserRepository):
        self._identity = identity
        self._users = users

    def sign_up(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        confirm_password: str,
        role: Role,
        course: Optional[str] = None,
        semester: Optional[str] = None,
        prn: Optional[str] = None,
        faculty_id: Optional[str] = None,
    ) -> UserProfile:
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        require_non_empty(email, "Email")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        if password != confirm_password:
            raise ValidationError("Passwords do not match")
        if role == Role.ADMIN:
            raise AuthorizationError("Admin accounts cannot be self-registered")
        _require_role_fields(role, course=course, semester=semester, prn=prn, faculty_id=faculty_id)

        uid = self._identity.create_account(email, password)
        profile = _build_profile(
            uid=uid,
            email=require_email(email),
            display_name=f"{first_name} {last_name}",
            role=role,
            course=course,
            semester=semester,
            prn=prn,
            faculty_id=faculty_id,
        )
        self._users.save(profile)
        log.info("signed up uid=%s role=%s", uid, role.value)
        return profile

    def sign_in(self, email: str, password: str) -> UserProfile:
        session = self._identity.sign_in(email, password)
        profile = self._users.get_by_uid(session.uid)
        if not profile:
            raise AuthenticationError("No profile found for this account")
        return profile

    def sign_out(self, uid: str) -> None:
        self._identity.sign_out(uid)


class UserService:
    """Use cases: manage users (admin)."""

    def __init__(self, identity: IdentityProvider, users: UserRepository):
        self._identity = identity
        self._users = users

    def create_user(
        self,
        *,
        current_role: Role,
        email: str,
        password: str,
        display_name: str,
        role: Role,
        course: Optional[str] = None,
        semester: Optional[str] = None,
        prn: Optional[str] = None,
        faculty_id: Optional[str] = None,
    ) -> UserProfile:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        if not (email or "").strip() or not password or not (display_name or "").strip():
            raise ValidationError("Please fill in all required fields.")
        if self._users.get_by_email(email):
            raise ValidationError("A user with this email already exists.")

        uid = self._identity.create_account(email, password)
        profile = _build_profile(
            uid=uid,
            email=require_email(email),
            display_name=display_name.strip(),
            role=role,
            course=course,
            semester=semester,
            prn=prn,
            faculty_id=faculty_id,
        )
        self._users.save(profile)
        log.info("admin created user uid=%s role=%s", uid, role.value)
        return profile

    def list_users(self, *, current_role: Role):
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        return self._users.list_all()

    def list_faculty(self):
        return self._users.list_all(role=Role.FACULTY)

    def update_faculty(self, *, current_role: Role, uid: str, display_name: str, faculty_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        display_name = require_non_empty(display_name, "Display name")
        profile = self._users.get_by_uid(uid)
        if not profile or profile.role != Role.FACULTY:
            raise ValidationError("Faculty member not found")

        if not self._users.update_faculty(uid, display_name=display_name, faculty_id=(faculty_id or "").strip()):
            raise ValidationError("Failed to update faculty")

    def delete_profile(self, *, current_role: Role, uid: str) -> None:
        """Removes only the profile document; the identity account is kept."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        profile = self._users.get_by_uid(uid)
        if not profile:
            raise ValidationError("User not found")
        if profile.role == Role.ADMIN:
            raise ValidationError("Admin profiles cannot be deleted")

        if not self._users.delete(uid):
            raise ValidationError("Failed to delete user profile")
        log.info("profile deleted uid=%s", uid)

    def stats(self) -> dict:
        users = self._users.list_all()
        return {
            "total_users": len(users),
            "students": sum(1 for u in users if u.role == Role.STUDENT),
            "faculty": sum(1 for u in users if u.role == Role.FACULTY),
            "admins": sum(1 for u in users if u.role == Role.ADMIN),
        }
