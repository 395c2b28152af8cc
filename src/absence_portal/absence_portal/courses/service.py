from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_SEMESTERS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .repository import CourseRepository

log = logging.getLogger(__name__)


class CourseService:
    def __init__(self, courses: CourseRepository):
        self._courses = courses

    def list_courses(self):
        return self._courses.list_all()

    def add_course(self, *, current_role: Role, name: str, semesters: Optional[Sequence[str]] = None) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        name = require_non_empty(name, "Course name")
        labels = [s.strip() for s in (semesters or DEFAULT_SEMESTERS) if s and s.strip()]
        if not labels:
            raise ValidationError("At least one semester is required")

        if any(c.name.lower() == name.lower() for c in self._courses.list_all()):
            raise ValidationError("A course with this name already exists.")

        course_id = self._courses.create(name=name, semesters=labels)
        log.info("course added id=%s name=%s", course_id, name)
        return course_id

    def delete_course(self, *, current_role: Role, course_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        if not self._courses.delete(course_id=int(course_id)):
            raise ValidationError("Failed to delete course.")
