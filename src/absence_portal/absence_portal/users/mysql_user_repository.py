from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import UserProfile
from .repository import UserRepository

_COLUMNS = "uid, email, display_name, role, course, semester, prn, faculty_id"


def _row_to_profile(row: dict) -> UserProfile:
    return UserProfile(
        uid=row["uid"],
        email=row["email"],
        display_name=row["display_name"],
        role=Role(row["role"]),
        course=row.get("course"),
        semester=row.get("semester"),
        prn=row.get("prn"),
        faculty_id=row.get("faculty_id"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_uid(self, uid: str) -> Optional[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE uid=%s", (uid,))
            row = fetchone(cur)
            return _row_to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email.strip().lower(),))
            row = fetchone(cur)
            return _row_to_profile(row) if row else None

    def save(self, profile: UserProfile) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO users({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    email=VALUES(email), display_name=VALUES(display_name), role=VALUES(role),
                    course=VALUES(course), semester=VALUES(semester), prn=VALUES(prn),
                    faculty_id=VALUES(faculty_id)
                """,
                (
                    profile.uid,
                    profile.email,
                    profile.display_name,
                    profile.role.value,
                    profile.course,
                    profile.semester,
                    profile.prn,
                    profile.faculty_id,
                ),
            )

    def update_faculty(self, uid: str, *, display_name: str, faculty_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET display_name=%s, faculty_id=%s WHERE uid=%s AND role=%s",
                (display_name, faculty_id, uid, Role.FACULTY.value),
            )
            return cur.rowcount > 0

    def delete(self, uid: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE uid=%s", (uid,))
            return cur.rowcount > 0

    def list_all(self, *, role: Optional[Role] = None) -> Sequence[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            if role is None:
                cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY display_name ASC")
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY display_name ASC",
                    (role.value,),
                )
            return [_row_to_profile(r) for r in fetchall(cur)]
