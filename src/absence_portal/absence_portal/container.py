from __future__ import annotations

from dataclasses import dataclass

from .courses.mysql_course_repository import MySQLCourseRepository
from .courses.repository import CourseRepository
from .courses.service import CourseService
from .database.connection import DBConfig, DatabaseConnection
from .identity.mysql_identity_provider import MySQLIdentityProvider
from .identity.provider import IdentityProvider
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .timetables.mysql_timetable_repository import MySQLTimetableRepository
from .timetables.repository import TimetableRepository
from .timetables.service import TimetableService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    identity: IdentityProvider

    users_repo: UserRepository
    courses_repo: CourseRepository
    timetables_repo: TimetableRepository
    requests_repo: RequestRepository

    auth_service: AuthService
    user_service: UserService
    course_service: CourseService
    timetable_service: TimetableService
    request_service: RequestService


def wire(
    *,
    identity: IdentityProvider,
    users_repo: UserRepository,
    courses_repo: CourseRepository,
    timetables_repo: TimetableRepository,
    requests_repo: RequestRepository,
) -> Container:
    return Container(
        identity=identity,
        users_repo=users_repo,
        courses_repo=courses_repo,
        timetables_repo=timetables_repo,
        requests_repo=requests_repo,
        auth_service=AuthService(identity, users_repo),
        user_service=UserService(identity, users_repo),
        course_service=CourseService(courses_repo),
        timetable_service=TimetableService(timetables_repo),
        request_service=RequestService(requests_repo, timetables_repo, users_repo),
    )


def build_container(*, conn: DatabaseConnection) -> Container:
    return wire(
        identity=MySQLIdentityProvider(conn),
        users_repo=MySQLUserRepository(conn),
        courses_repo=MySQLCourseRepository(conn),
        timetables_repo=MySQLTimetableRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
    )


def connect(db_config: dict) -> DatabaseConnection:
    return DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
