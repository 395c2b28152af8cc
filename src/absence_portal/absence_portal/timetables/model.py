from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from typing import Optional

from ..core.enums import WeekDay


@dataclass(frozen=True)
class NewTimetableEntry:
    course: str
    semester: str
    day: WeekDay
    time: str
    subject: str
    faculty_id: str
    faculty_name: str
    date: Optional[date] = None


@dataclass(frozen=True)
class TimetableEntry(NewTimetableEntry):
    entry_id: int = 0

    @classmethod
    def from_new(cls, entry: NewTimetableEntry, entry_id: int) -> "TimetableEntry":
        return cls(entry_id=entry_id, **{f.name: getattr(entry, f.name) for f in fields(entry)})


@dataclass(frozen=True)
class SlotInput:
    """One cell of a timetable being replaced in bulk."""

    day: WeekDay
    time: str
    subject: str
    faculty_id: str
    faculty_name: str = ""


@dataclass(frozen=True)
class TimetableScope:
    """Which entries form one timetable: a course+semester, or one faculty member."""

    course: Optional[str] = None
    semester: Optional[str] = None
    faculty_id: Optional[str] = None

    @classmethod
    def for_course(cls, course: str, semester: str) -> "TimetableScope":
        return cls(course=course, semester=semester)

    @classmethod
    def for_faculty(cls, faculty_id: str) -> "TimetableScope":
        return cls(faculty_id=faculty_id)

    @property
    def is_faculty(self) -> bool:
        return self.faculty_id is not None

    def contains(self, entry: NewTimetableEntry) -> bool:
        if self.is_faculty:
            return entry.faculty_id == self.faculty_id
        return entry.course == self.course and entry.semester == self.semester


@dataclass(frozen=True)
class ImportSummary:
    imported: int
    skipped: int
