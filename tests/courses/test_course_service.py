from __future__ import annotations

import pytest

from src.absence_portal.absence_portal.core.enums import Role
from src.absence_portal.absence_portal.core.exceptions import AuthorizationError, ValidationError


@pytest.fixture
def svc(container):
    return container.course_service


def test_add_course_defaults_to_eight_semesters(svc):
    course_id = svc.add_course(current_role=Role.ADMIN, name="  BCA ")

    (course,) = svc.list_courses()
    assert course.course_id == course_id
    assert course.name == "BCA"
    assert course.semesters == ("1", "2", "3", "4", "5", "6", "7", "8")


def test_explicit_semesters_are_trimmed(svc):
    svc.add_course(current_role=Role.ADMIN, name="MBA", semesters=[" 1", "2 ", " "])

    assert svc.list_courses()[0].semesters == ("1", "2")


def test_course_names_are_unique_ignoring_case(svc):
    svc.add_course(current_role=Role.ADMIN, name="BCA")

    with pytest.raises(ValidationError, match="A course with this name already exists."):
        svc.add_course(current_role=Role.ADMIN, name="bca")


def test_course_name_required(svc):
    with pytest.raises(ValidationError, match="Course name is required"):
        svc.add_course(current_role=Role.ADMIN, name=" ")


def test_only_admin_edits_courses(svc):
    with pytest.raises(AuthorizationError):
        svc.add_course(current_role=Role.FACULTY, name="BCA")
    with pytest.raises(AuthorizationError):
        svc.delete_course(current_role=Role.STUDENT, course_id=1)


def test_delete_course(svc):
    course_id = svc.add_course(current_role=Role.ADMIN, name="BCA")

    svc.delete_course(current_role=Role.ADMIN, course_id=course_id)
    assert svc.list_courses() == []

    with pytest.raises(ValidationError, match="Failed to delete course."):
        svc.delete_course(current_role=Role.ADMIN, course_id=course_id)
