from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, load_json
from .model import Course
from .repository import CourseRepository


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT course_id, name, semesters FROM courses ORDER BY name ASC")
            return [
                Course(
                    course_id=int(r["course_id"]),
                    name=r["name"],
                    semesters=tuple(str(s) for s in (load_json(r["semesters"]) or [])),
                )
                for r in fetchall(cur)
            ]

    def create(self, *, name: str, semesters: Sequence[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO courses(name, semesters) VALUES(%s,%s)",
                (name, dump_json(list(semesters))),
            )
            return int(cur.lastrowid)

    def delete(self, *, course_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM courses WHERE course_id=%s", (int(course_id),))
            return cur.rowcount > 0
