from __future__ import annotations

from typing import Protocol, Sequence

from .model import Course


class CourseRepository(Protocol):
    def list_all(self) -> Sequence[Course]:
        raise NotImplementedError

    def create(self, *, name: str, semesters: Sequence[str]) -> int:
        raise NotImplementedError

    def delete(self, *, course_id: int) -> bool:
        raise NotImplementedError
