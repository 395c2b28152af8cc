from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import Role, WeekDay
from ..core.exceptions import AuthorizationError, ConflictError, ValidationError
from ..timeslots.classifier import ensure_no_conflict, find_conflict
from ..timeslots.ranges import TimeRange, make_time_range, validate_time_encoding
from ..timeslots.week import WeekDate, current_week, week_date_for
from .csv_import import parse_timetable_csv
from .model import ImportSummary, NewTimetableEntry, SlotInput, TimetableEntry, TimetableScope
from .repository import TimetableRepository

log = logging.getLogger(__name__)


def _start_key(entry: TimetableEntry) -> int:
    return TimeRange.parse(entry.time).start


class TimetableService:
    def __init__(self, timetables: TimetableRepository):
        self._timetables = timetables

    def list_entries(self, scope: TimetableScope) -> Sequence[TimetableEntry]:
        return sorted(self._timetables.list_entries(scope), key=lambda e: (int(e.day), _start_key(e)))

    def list_all(self, *, current_role: Role) -> Sequence[TimetableEntry]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        return self._timetables.list_all()

    def weekly_timetable(self, scope: TimetableScope) -> dict[WeekDay, dict[str, TimetableEntry]]:
        """Entries grouped day -> time -> entry, each day ordered by start time."""
        weekly: dict[WeekDay, dict[str, TimetableEntry]] = {day: {} for day in WeekDay}
        for entry in self.list_entries(scope):
            weekly[entry.day][entry.time] = entry
        return weekly

    def week_view(
        self, scope: TimetableScope, *, now: Optional[datetime] = None
    ) -> list[tuple[WeekDate, list[TimetableEntry]]]:
        weekly = self.weekly_timetable(scope)
        return [(wd, list(weekly[wd.day].values())) for wd in current_week(now or now_local())]

    def _check_conflicts(self, scopes: Iterable[TimetableScope], *, day: WeekDay, time: str) -> None:
        for scope in scopes:
            try:
                ensure_no_conflict(time, self._timetables.list_entries(scope, day=day))
            except ConflictError as e:
                log.warning("timetable conflict day=%s time=%s with %s (%s)", day.label, time, e.subject, e.time)
                raise

    def add_entry(
        self,
        *,
        current_role: Role,
        scope: TimetableScope,
        day: WeekDay,
        start_time: str,
        end_time: str,
        subject: str,
        course: str,
        semester: str,
        faculty_id: str,
        faculty_name: str = "",
        now: Optional[datetime] = None,
    ) -> int:
        if current_role not in {Role.ADMIN, Role.FACULTY}:
            raise AuthorizationError("You do not have permission")
        if current_role == Role.FACULTY and (not scope.is_faculty or faculty_id != scope.faculty_id):
            raise AuthorizationError("Faculty can only edit their own timetable")

        required = [start_time, end_time, subject, faculty_id, course, semester]
        if any(not (v or "").strip() for v in required):
            raise ValidationError("Please fill in all required fields.")

        day = WeekDay.parse(day)
        time = make_time_range(start_time, end_time)

        # Also the course timetable, where another faculty member may already hold the slot.
        scopes = [scope]
        course_scope = TimetableScope.for_course(course.strip(), semester.strip())
        if course_scope != scope:
            scopes.append(course_scope)
        self._check_conflicts(scopes, day=day, time=time)

        entry = NewTimetableEntry(
            course=course.strip(),
            semester=semester.strip(),
            day=day,
            time=time,
            subject=subject.strip(),
            faculty_id=faculty_id.strip(),
            faculty_name=(faculty_name or "").strip(),
            date=week_date_for(day, now or now_local()).date,
        )
        entry_id = self._timetables.upsert(entry)
        log.info("timetable entry %s added: %s %s %s", entry_id, entry.subject, day.label, time)
        return entry_id

    def remove_slot(self, *, current_role: Role, scope: TimetableScope, day: WeekDay, time: str) -> None:
        if current_role not in {Role.ADMIN, Role.FACULTY}:
            raise AuthorizationError("You do not have permission")
        if current_role == Role.FACULTY and not scope.is_faculty:
            raise AuthorizationError("Faculty can only edit their own timetable")

        if not self._timetables.delete_slot(scope, day=WeekDay.parse(day), time=time):
            raise ValidationError("Class not found")

    def delete_entry(self, *, current_role: Role, entry_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        if not self._timetables.delete(entry_id=int(entry_id)):
            raise ValidationError("Failed to delete timetable entry.")

    def replace_timetable(
        self,
        *,
        current_role: Role,
        course: str,
        semester: str,
        slots: Iterable[SlotInput],
        now: Optional[datetime] = None,
    ) -> int:
        """Swap the whole course timetable in one transaction.

        Cells without a subject or faculty are dropped; the remaining cells must not overlap.
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        if not (course or "").strip() or not (semester or "").strip():
            raise ValidationError("Please select course and semester")
        course, semester = course.strip(), semester.strip()

        week = current_week(now or now_local())
        entries: list[NewTimetableEntry] = []
        for slot in slots:
            if not (slot.subject or "").strip() or not (slot.faculty_id or "").strip():
                continue
            day = WeekDay.parse(slot.day)
            validate_time_encoding(slot.time)

            same_day = [e for e in entries if e.day == day]
            hit = find_conflict(slot.time, same_day)
            if hit is not None:
                raise ConflictError(
                    f'"{slot.subject}" ({slot.time}) overlaps "{hit.subject}" ({hit.time}) on {day.label}',
                    subject=hit.subject,
                    time=hit.time,
                )

            entries.append(
                NewTimetableEntry(
                    course=course,
                    semester=semester,
                    day=day,
                    time=slot.time.strip(),
                    subject=slot.subject.strip(),
                    faculty_id=slot.faculty_id.strip(),
                    faculty_name=(slot.faculty_name or "").strip(),
                    date=week[int(day)].date,
                )
            )

        count = self._timetables.replace_course(course=course, semester=semester, entries=entries)
        log.info("timetable replaced for %s/%s: %d entries", course, semester, count)
        return count

    def import_csv(self, *, current_role: Role, text: str) -> ImportSummary:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        parsed, skipped = parse_timetable_csv(text)

        # Rows are checked against the stored course timetable and the rows accepted before them.
        accepted: list[NewTimetableEntry] = []
        stored: dict[tuple[str, str, WeekDay], list[TimetableEntry]] = {}
        for entry in parsed:
            key = (entry.course, entry.semester, entry.day)
            if key not in stored:
                scope = TimetableScope.for_course(entry.course, entry.semester)
                stored[key] = list(self._timetables.list_entries(scope, day=entry.day))
            same_day = stored[key] + [e for e in accepted if (e.course, e.semester, e.day) == key]
            hit = find_conflict(entry.time, same_day)
            if hit is not None:
                log.warning(
                    "csv row %s %s %s skipped: overlaps %s (%s)",
                    entry.subject,
                    entry.day.label,
                    entry.time,
                    hit.subject,
                    hit.time,
                )
                skipped += 1
                continue
            accepted.append(entry)

        imported = self._timetables.upsert_many(accepted)
        log.info("csv import: %d imported, %d skipped", imported, skipped)
        return ImportSummary(imported=imported, skipped=skipped)
