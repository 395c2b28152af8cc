from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import AbsenceRequest, ClassDetail, NewAbsenceRequest
from .repository import RequestRepository
from .state import StatusUndo

_COLUMNS = """
    request_id, student_id, student_name, prn, course, semester, faculty_id, faculty_name,
    class_details, reason, status, submitted_at, processed_at, previous_status
"""


def _row_to_request(r: dict) -> AbsenceRequest:
    details = load_json(r["class_details"]) or []
    previous = r.get("previous_status")
    return AbsenceRequest(
        request_id=int(r["request_id"]),
        student_id=r["student_id"],
        student_name=r["student_name"],
        prn=r.get("prn") or "",
        course=r.get("course") or "",
        semester=r.get("semester") or "",
        faculty_id=r["faculty_id"],
        faculty_name=r["faculty_name"],
        class_details=tuple(ClassDetail.from_document(d) for d in details),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        submitted_at=r["submitted_at"],
        processed_at=r.get("processed_at"),
        undo=StatusUndo(previous=RequestStatus(previous)) if previous else None,
    )


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, request: NewAbsenceRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_requests(
                    student_id, student_name, prn, course, semester, faculty_id, faculty_name,
                    class_details, reason, status, submitted_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request.student_id,
                    request.student_name,
                    request.prn,
                    request.course,
                    request.semester,
                    request.faculty_id,
                    request.faculty_name,
                    dump_json([d.to_document() for d in request.class_details]),
                    request.reason,
                    RequestStatus.PENDING.value,
                    request.submitted_at,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[AbsenceRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def list_requests(
        self,
        *,
        student_id: Optional[str] = None,
        faculty_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
    ) -> Sequence[AbsenceRequest]:
        clauses: list[str] = []
        params: list[object] = []
        if student_id is not None:
            clauses.append("student_id=%s")
            params.append(student_id)
        if faculty_id is not None:
            clauses.append("faculty_id=%s")
            params.append(faculty_id)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_requests {where} ORDER BY submitted_at DESC {limit_sql}",
                tuple(params),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def update_status(
        self,
        *,
        request_id: int,
        expected: RequestStatus,
        status: RequestStatus,
        processed_at: Optional[datetime],
        undo: Optional[StatusUndo],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_requests
                SET status=%s, processed_at=%s, previous_status=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    processed_at,
                    undo.previous.value if undo else None,
                    int(request_id),
                    expected.value,
                ),
            )
            return cur.rowcount > 0
