from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..core.enums import RequestStatus, WeekDay
from .state import StatusUndo


@dataclass(frozen=True)
class ClassDetail:
    """One class occurrence covered by a request."""

    subject: str
    date: Optional[date]
    time: str
    day: WeekDay
    timetable_entry_id: Optional[int] = None

    @property
    def day_name(self) -> str:
        return self.day.label

    def to_document(self) -> dict[str, Any]:
        return {
            "subject": self.subject,
            "date": format_iso_date(self.date) if self.date else "",
            "time": self.time,
            "day": str(int(self.day)),
            "dayName": self.day_name,
            "timetableEntryId": self.timetable_entry_id,
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "ClassDetail":
        entry_id = doc.get("timetableEntryId")
        return cls(
            subject=doc.get("subject") or "",
            date=parse_iso_date(doc["date"]) if doc.get("date") else None,
            time=doc.get("time") or "",
            day=WeekDay.parse(doc.get("day", "")),
            timetable_entry_id=int(entry_id) if entry_id not in (None, "") else None,
        )


@dataclass(frozen=True)
class NewAbsenceRequest:
    student_id: str
    student_name: str
    prn: str
    course: str
    semester: str
    faculty_id: str
    faculty_name: str
    class_details: tuple[ClassDetail, ...]
    reason: str
    submitted_at: datetime


@dataclass(frozen=True)
class AbsenceRequest:
    request_id: int
    student_id: str
    student_name: str
    prn: str
    course: str
    semester: str
    faculty_id: str
    faculty_name: str
    class_details: tuple[ClassDetail, ...]
    reason: str
    status: RequestStatus
    submitted_at: datetime
    processed_at: Optional[datetime] = None
    undo: Optional[StatusUndo] = None
