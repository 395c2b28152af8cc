from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional
from uuid import uuid4

import pytest

from src.absence_portal.absence_portal.container import Container, wire
from src.absence_portal.absence_portal.core.enums import RequestStatus, Role, WeekDay
from src.absence_portal.absence_portal.core.exceptions import AuthenticationError, EmailAlreadyInUse
from src.absence_portal.absence_portal.courses.model import Course
from src.absence_portal.absence_portal.identity.provider import IdentitySession, check_new_account
from src.absence_portal.absence_portal.requests.model import AbsenceRequest, NewAbsenceRequest
from src.absence_portal.absence_portal.timetables.model import NewTimetableEntry, TimetableEntry, TimetableScope
from src.absence_portal.absence_portal.users.model import UserProfile


class InMemoryIdentity:
    def __init__(self):
        self._accounts: dict[str, tuple[str, str]] = {}
        self.signed_out: list[str] = []

    def create_account(self, email: str, password: str) -> str:
        email = check_new_account(email, password)
        if email in self._accounts:
            raise EmailAlreadyInUse()
        uid = uuid4().hex
        self._accounts[email] = (uid, password)
        return uid

    def sign_in(self, email: str, password: str) -> IdentitySession:
        account = self._accounts.get((email or "").strip().lower())
        if not account or account[1] != password:
            raise AuthenticationError("Invalid email or password")
        return IdentitySession(uid=account[0], email=email, signed_in_at=datetime(2025, 1, 15, 10, 30))

    def sign_out(self, uid: str) -> None:
        self.signed_out.append(uid)

    def get_uid(self, email: str) -> str:
        return self._accounts[email.strip().lower()][0]


class InMemoryUsers:
    def __init__(self):
        self.by_uid: dict[str, UserProfile] = {}

    def get_by_uid(self, uid: str) -> Optional[UserProfile]:
        return self.by_uid.get(uid)

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        email = (email or "").strip().lower()
        return next((p for p in self.by_uid.values() if p.email == email), None)

    def save(self, profile: UserProfile) -> None:
        self.by_uid[profile.uid] = profile

    def update_faculty(self, uid: str, *, display_name: str, faculty_id: str) -> bool:
        profile = self.by_uid.get(uid)
        if not profile:
            return False
        self.by_uid[uid] = replace(profile, display_name=display_name, faculty_id=faculty_id or None)
        return True

    def delete(self, uid: str) -> bool:
        return self.by_uid.pop(uid, None) is not None

    def list_all(self, *, role: Optional[Role] = None):
        return [p for p in self.by_uid.values() if role is None or p.role == role]


class InMemoryCourses:
    def __init__(self):
        self.by_id: dict[int, Course] = {}
        self._id = 0

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda c: c.name.lower())

    def create(self, *, name: str, semesters) -> int:
        self._id += 1
        self.by_id[self._id] = Course(course_id=self._id, name=name, semesters=tuple(semesters))
        return self._id

    def delete(self, *, course_id: int) -> bool:
        return self.by_id.pop(course_id, None) is not None


class InMemoryTimetables:
    def __init__(self):
        self.by_key: dict[tuple[str, str, WeekDay, str], TimetableEntry] = {}
        self._id = 0

    @staticmethod
    def _key(entry: NewTimetableEntry):
        return (entry.course, entry.semester, WeekDay(entry.day), entry.time)

    def list_entries(self, scope: TimetableScope, *, day: Optional[WeekDay] = None):
        return [e for e in self.by_key.values() if scope.contains(e) and (day is None or e.day == day)]

    def list_all(self):
        return list(self.by_key.values())

    def upsert(self, entry: NewTimetableEntry) -> int:
        key = self._key(entry)
        existing = self.by_key.get(key)
        if existing:
            entry_id = existing.entry_id
        else:
            self._id += 1
            entry_id = self._id
        self.by_key[key] = TimetableEntry.from_new(entry, entry_id)
        return entry_id

    def upsert_many(self, entries) -> int:
        for entry in entries:
            self.upsert(entry)
        return len(entries)

    def delete(self, *, entry_id: int) -> bool:
        for key, e in list(self.by_key.items()):
            if e.entry_id == entry_id:
                del self.by_key[key]
                return True
        return False

    def delete_slot(self, scope: TimetableScope, *, day: WeekDay, time: str) -> int:
        keys = [k for k, e in self.by_key.items() if scope.contains(e) and e.day == day and e.time == time]
        for key in keys:
            del self.by_key[key]
        return len(keys)

    def replace_course(self, *, course: str, semester: str, entries) -> int:
        for key in [k for k in self.by_key if k[0] == course and k[1] == semester]:
            del self.by_key[key]
        return self.upsert_many(entries)


class InMemoryRequests:
    def __init__(self):
        self.by_id: dict[int, AbsenceRequest] = {}
        self._id = 0

    def create(self, request: NewAbsenceRequest) -> int:
        self._id += 1
        self.by_id[self._id] = AbsenceRequest(
            request_id=self._id,
            student_id=request.student_id,
            student_name=request.student_name,
            prn=request.prn,
            course=request.course,
            semester=request.semester,
            faculty_id=request.faculty_id,
            faculty_name=request.faculty_name,
            class_details=request.class_details,
            reason=request.reason,
            status=RequestStatus.PENDING,
            submitted_at=request.submitted_at,
        )
        return self._id

    def get(self, *, request_id: int) -> Optional[AbsenceRequest]:
        return self.by_id.get(request_id)

    def list_requests(self, *, student_id=None, faculty_id=None, status=None, limit=200):
        items = [
            r
            for r in self.by_id.values()
            if (student_id is None or r.student_id == student_id)
            and (faculty_id is None or r.faculty_id == faculty_id)
            and (status is None or r.status == status)
        ]
        items.sort(key=lambda r: (r.submitted_at, r.request_id), reverse=True)
        return items[:limit]

    def update_status(self, *, request_id, expected, status, processed_at, undo) -> bool:
        req = self.by_id.get(request_id)
        if not req or req.status != expected:
            return False
        self.by_id[request_id] = replace(req, status=status, processed_at=processed_at, undo=undo)
        return True


# Wednesday, so the week runs Sunday 2025-01-12 .. Saturday 2025-01-18
FIXED_NOW = datetime(2025, 1, 15, 10, 30)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def identity() -> InMemoryIdentity:
    return InMemoryIdentity()


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def courses() -> InMemoryCourses:
    return InMemoryCourses()


@pytest.fixture
def timetables() -> InMemoryTimetables:
    return InMemoryTimetables()


@pytest.fixture
def requests_repo() -> InMemoryRequests:
    return InMemoryRequests()


@pytest.fixture
def container(identity, users, courses, timetables, requests_repo) -> Container:
    return wire(
        identity=identity,
        users_repo=users,
        courses_repo=courses,
        timetables_repo=timetables,
        requests_repo=requests_repo,
    )


@pytest.fixture
def student(users) -> UserProfile:
    profile = UserProfile(
        uid="stu-1",
        email="asha@example.com",
        display_name="Asha Patil",
        role=Role.STUDENT,
        course="BCA",
        semester="3",
        prn="PRN001",
    )
    users.save(profile)
    return profile


@pytest.fixture
def faculty(users) -> UserProfile:
    profile = UserProfile(
        uid="fac-1",
        email="rao@example.com",
        display_name="Dr. Rao",
        role=Role.FACULTY,
        faculty_id="F001",
    )
    users.save(profile)
    return profile


@pytest.fixture
def other_faculty(users) -> UserProfile:
    profile = UserProfile(
        uid="fac-2",
        email="mehta@example.com",
        display_name="Prof. Mehta",
        role=Role.FACULTY,
        faculty_id="F002",
    )
    users.save(profile)
    return profile


def _add_class(timetables: InMemoryTimetables, *, day: WeekDay, time: str, subject: str, **overrides) -> int:
    fields = dict(
        course="BCA",
        semester="3",
        day=day,
        time=time,
        subject=subject,
        faculty_id="F001",
        faculty_name="Dr. Rao",
    )
    fields.update(overrides)
    return timetables.upsert(NewTimetableEntry(**fields))


@pytest.fixture
def bca_week(timetables):
    """A BCA semester 3 timetable spread around the fixed Wednesday morning."""
    return {
        "monday": _add_class(timetables, day=WeekDay.MONDAY, time="09:00 - 10:00", subject="Databases"),
        "wednesday_early": _add_class(timetables, day=WeekDay.WEDNESDAY, time="09:00 - 11:00", subject="Networks"),
        "wednesday_late": _add_class(timetables, day=WeekDay.WEDNESDAY, time="11:00 - 12:00", subject="Statistics"),
        "thursday": _add_class(timetables, day=WeekDay.THURSDAY, time="14:00 - 15:00", subject="Algorithms"),
    }


@pytest.fixture
def add_class(timetables):
    def _add(*, day: WeekDay, time: str, subject: str, **overrides) -> int:
        return _add_class(timetables, day=day, time=time, subject=subject, **overrides)

    return _add
