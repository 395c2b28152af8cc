from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import RequestStatus, Role, WeekDay
from ..core.exceptions import AuthorizationError, ConflictError, ValidationError
from ..timeslots.classifier import SlotState, classify_slot
from ..timeslots.week import WeekDate, current_week
from ..timetables.model import TimetableEntry, TimetableScope
from ..timetables.repository import TimetableRepository
from ..users.model import UserProfile
from ..users.repository import UserRepository
from .model import AbsenceRequest, ClassDetail, NewAbsenceRequest
from .repository import RequestRepository
from .state import decide, revert

log = logging.getLogger(__name__)

SlotKey = tuple[WeekDay, str]


class RequestService:
    def __init__(self, requests: RequestRepository, timetables: TimetableRepository, users: UserRepository):
        self._requests = requests
        self._timetables = timetables
        self._users = users

    def _student(self, student_id: str) -> UserProfile:
        student = self._users.get_by_uid(student_id)
        if not student or student.role != Role.STUDENT:
            raise AuthorizationError("Only students can submit absence requests")
        if not student.course or not student.semester:
            raise ValidationError("Course or semester information missing from your profile.")
        return student

    def _weekly(self, student: UserProfile) -> dict[SlotKey, TimetableEntry]:
        scope = TimetableScope.for_course(student.course, student.semester)
        return {(e.day, e.time): e for e in self._timetables.list_entries(scope)}

    def slot_grid(
        self, *, student_id: str, now: Optional[datetime] = None
    ) -> list[tuple[WeekDate, list[tuple[TimetableEntry, SlotState]]]]:
        """The student's week with every class marked selectable, past or already requested."""
        now = now or now_local()
        student = self._student(student_id)
        existing = self._requests.list_requests(student_id=student.uid, limit=None)

        by_day: dict[WeekDay, list[TimetableEntry]] = {d: [] for d in WeekDay}
        for entry in self._weekly(student).values():
            by_day[entry.day].append(entry)

        grid = []
        for wd in current_week(now):
            cells = [(e, classify_slot(wd, e, existing, now)) for e in by_day[wd.day]]
            grid.append((wd, cells))
        return grid

    def submit(
        self,
        *,
        current_role: Role,
        student_id: str,
        slots: Iterable[SlotKey],
        faculty_id: str,
        reason: str,
        now: Optional[datetime] = None,
    ) -> int:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can submit absence requests")

        now = now or now_local()
        student = self._student(student_id)

        keys = list(dict.fromkeys((WeekDay.parse(day), time) for day, time in slots))
        if not keys:
            raise ValidationError("Please select at least one class slot")
        if not (faculty_id or "").strip():
            raise ValidationError("Please select a faculty member")
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Please provide a reason for your absence")

        faculty_id = faculty_id.strip()
        faculty = next((f for f in self._users.list_all(role=Role.FACULTY) if f.approver_id == faculty_id), None)
        if faculty is None:
            raise ValidationError("Selected faculty member not found")

        weekly = self._weekly(student)
        week = current_week(now)
        existing = self._requests.list_requests(student_id=student.uid, limit=None)

        details: list[ClassDetail] = []
        for day, time in keys:
            entry = weekly.get((day, time))
            if entry is None:
                raise ValidationError("Selected class is not in your timetable")

            wd = week[int(day)]
            state = classify_slot(wd, entry, existing, now)
            if state is SlotState.PAST:
                raise ValidationError("Cannot select past time slots")
            if state is SlotState.REQUESTED:
                raise ConflictError(
                    f"You already have a pending request for {entry.subject} on {wd.name}",
                    subject=entry.subject,
                    time=entry.time,
                )

            details.append(
                ClassDetail(
                    subject=entry.subject,
                    date=wd.date,
                    time=entry.time,
                    day=day,
                    timetable_entry_id=entry.entry_id or None,
                )
            )

        request_id = self._requests.create(
            NewAbsenceRequest(
                student_id=student.uid,
                student_name=student.display_name,
                prn=student.prn or "",
                course=student.course,
                semester=student.semester,
                faculty_id=faculty.approver_id,
                faculty_name=faculty.display_name,
                class_details=tuple(details),
                reason=reason,
                submitted_at=now,
            )
        )
        log.info("absence request %s submitted by %s for %d class(es)", request_id, student.uid, len(details))
        return request_id

    def list_for_student(self, *, student_id: str) -> Sequence[AbsenceRequest]:
        return self._requests.list_requests(student_id=student_id)

    def list_for_faculty(
        self, *, current_role: Role, faculty_id: str, status: Optional[RequestStatus] = None
    ) -> Sequence[AbsenceRequest]:
        if current_role != Role.FACULTY:
            raise AuthorizationError("You do not have permission")
        return self._requests.list_requests(faculty_id=faculty_id, status=status)

    def list_all(self, *, current_role: Role) -> Sequence[AbsenceRequest]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        return self._requests.list_requests()

    def _load_for_approver(self, *, current_role: Role, approver_id: str, request_id: int) -> AbsenceRequest:
        if current_role not in {Role.FACULTY, Role.ADMIN}:
            raise AuthorizationError("You do not have permission")

        req = self._requests.get(request_id=int(request_id))
        if not req:
            raise ValidationError("Request not found")
        if current_role == Role.FACULTY and req.faculty_id != approver_id:
            raise AuthorizationError("This request is addressed to another faculty member")
        return req

    def _process(
        self,
        *,
        current_role: Role,
        approver_id: str,
        request_id: int,
        target: RequestStatus,
        now: Optional[datetime],
    ) -> None:
        req = self._load_for_approver(current_role=current_role, approver_id=approver_id, request_id=request_id)
        change = decide(req.status, target)

        ok = self._requests.update_status(
            request_id=req.request_id,
            expected=req.status,
            status=change.status,
            processed_at=now or now_local(),
            undo=change.undo,
        )
        if not ok:
            raise ValidationError("Failed to process request. Please try again.")
        log.info("absence request %s %s by %s", req.request_id, change.status.value, approver_id)

    def approve(self, *, current_role: Role, approver_id: str, request_id: int, now: Optional[datetime] = None) -> None:
        self._process(
            current_role=current_role,
            approver_id=approver_id,
            request_id=request_id,
            target=RequestStatus.APPROVED,
            now=now,
        )

    def reject(self, *, current_role: Role, approver_id: str, request_id: int, now: Optional[datetime] = None) -> None:
        self._process(
            current_role=current_role,
            approver_id=approver_id,
            request_id=request_id,
            target=RequestStatus.REJECTED,
            now=now,
        )

    def undo(self, *, current_role: Role, approver_id: str, request_id: int) -> RequestStatus:
        req = self._load_for_approver(current_role=current_role, approver_id=approver_id, request_id=request_id)
        change = revert(req.status, req.undo)

        ok = self._requests.update_status(
            request_id=req.request_id,
            expected=req.status,
            status=change.status,
            processed_at=None,
            undo=None,
        )
        if not ok:
            raise ValidationError("Failed to undo action. Please try again.")
        log.info("absence request %s reverted to %s", req.request_id, change.status.value)
        return change.status

    def stats(self) -> dict:
        requests = self._requests.list_requests(limit=None)
        counts = {s: 0 for s in RequestStatus}
        for r in requests:
            counts[r.status] += 1
        return {
            "total_requests": len(requests),
            "pending_requests": counts[RequestStatus.PENDING],
            "approved_requests": counts[RequestStatus.APPROVED],
            "rejected_requests": counts[RequestStatus.REJECTED],
        }
