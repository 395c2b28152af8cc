from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import WeekDay
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import NewTimetableEntry, TimetableEntry, TimetableScope
from .repository import TimetableRepository

_COLUMNS = "entry_id, course, semester, day, entry_date, time_range, subject, faculty_id, faculty_name"

_UPSERT = """
    INSERT INTO timetables(course, semester, day, entry_date, time_range, subject, faculty_id, faculty_name)
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
    ON DUPLICATE KEY UPDATE
        entry_date=VALUES(entry_date), subject=VALUES(subject),
        faculty_id=VALUES(faculty_id), faculty_name=VALUES(faculty_name)
"""


def _params(e: NewTimetableEntry) -> tuple:
    return (e.course, e.semester, int(e.day), e.date, e.time, e.subject, e.faculty_id, e.faculty_name)


def _row_to_entry(r: dict) -> TimetableEntry:
    return TimetableEntry(
        entry_id=int(r["entry_id"]),
        course=r["course"],
        semester=r["semester"],
        day=WeekDay(int(r["day"])),
        time=r["time_range"],
        subject=r["subject"],
        faculty_id=r.get("faculty_id") or "",
        faculty_name=r.get("faculty_name") or "",
        date=r.get("entry_date"),
    )


def _scope_where(scope: TimetableScope) -> tuple[list[str], list[object]]:
    if scope.is_faculty:
        return ["faculty_id=%s"], [scope.faculty_id]
    return ["course=%s", "semester=%s"], [scope.course, scope.semester]


class MySQLTimetableRepository(TimetableRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_entries(self, scope: TimetableScope, *, day: Optional[WeekDay] = None) -> Sequence[TimetableEntry]:
        clauses, params = _scope_where(scope)
        if day is not None:
            clauses.append("day=%s")
            params.append(int(day))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM timetables WHERE {' AND '.join(clauses)} ORDER BY day ASC, time_range ASC",
                tuple(params),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[TimetableEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM timetables ORDER BY course ASC, semester ASC, day ASC, time_range ASC")
            return [_row_to_entry(r) for r in fetchall(cur)]

    def upsert(self, entry: NewTimetableEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_UPSERT, _params(entry))

            # If it was an update, lastrowid can be 0; fetch entry_id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT entry_id FROM timetables WHERE course=%s AND semester=%s AND day=%s AND time_range=%s",
                (entry.course, entry.semester, int(entry.day), entry.time),
            )
            r = fetchone(cur)
            return int(r["entry_id"]) if r else 0

    def upsert_many(self, entries: Sequence[NewTimetableEntry]) -> int:
        if not entries:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(_UPSERT, [_params(e) for e in entries])
        return len(entries)

    def delete(self, *, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM timetables WHERE entry_id=%s", (int(entry_id),))
            return cur.rowcount > 0

    def delete_slot(self, scope: TimetableScope, *, day: WeekDay, time: str) -> int:
        clauses, params = _scope_where(scope)
        clauses += ["day=%s", "time_range=%s"]
        params += [int(day), time]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM timetables WHERE {' AND '.join(clauses)}", tuple(params))
            return int(cur.rowcount)

    def replace_course(self, *, course: str, semester: str, entries: Sequence[NewTimetableEntry]) -> int:
        # One db_cursor block is one transaction: the delete is rolled back if an insert fails.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM timetables WHERE course=%s AND semester=%s", (course, semester))
            if entries:
                cur.executemany(_UPSERT, [_params(e) for e in entries])
        return len(entries)
