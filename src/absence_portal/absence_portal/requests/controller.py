from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import format_timestamp
from ..common.web import current_role, object_list, payload, roles_required
from ..container import Container
from ..core.enums import RequestStatus, Role, WeekDay
from ..core.exceptions import ValidationError
from ..timetables.controller import entry_to_json, week_date_to_json
from .model import AbsenceRequest


def request_to_json(r: AbsenceRequest) -> dict:
    return {
        "id": r.request_id,
        "studentId": r.student_id,
        "studentName": r.student_name,
        "prn": r.prn,
        "course": r.course,
        "semester": r.semester,
        "facultyId": r.faculty_id,
        "facultyName": r.faculty_name,
        "classDetails": [d.to_document() for d in r.class_details],
        "reason": r.reason,
        "status": r.status.value,
        "submittedAt": format_timestamp(r.submitted_at),
        "processedAt": format_timestamp(r.processed_at),
        "previousStatus": r.undo.previous.value if r.undo else None,
        "canUndo": r.undo is not None,
    }


def _status_filter(value) -> RequestStatus | None:
    value = (value or "pending").strip().lower()
    if value == "all":
        return None
    try:
        return RequestStatus(value)
    except ValueError:
        raise ValidationError("Invalid status filter")


def register(app: Flask, container: Container) -> None:
    @app.route("/requests", methods=["GET"], endpoint="my_requests")
    @roles_required(Role.STUDENT)
    def my_requests():
        items = container.request_service.list_for_student(student_id=session["uid"])
        return jsonify({"requests": [request_to_json(r) for r in items]})

    @app.route("/requests/slots", methods=["GET"], endpoint="request_slots")
    @roles_required(Role.STUDENT)
    def request_slots():
        grid = container.request_service.slot_grid(student_id=session["uid"])
        return jsonify(
            {
                "week": [
                    {
                        **week_date_to_json(wd),
                        "classes": [{**entry_to_json(e), "state": state.value} for e, state in cells],
                    }
                    for wd, cells in grid
                ]
            }
        )

    @app.route("/requests", methods=["POST"], endpoint="submit_request")
    @roles_required(Role.STUDENT)
    def submit_request():
        data = payload()
        slots = [(WeekDay.parse(s.get("day", "")), s.get("time", "")) for s in object_list(data, "slots")]
        request_id = container.request_service.submit(
            current_role=current_role(),
            student_id=session["uid"],
            slots=slots,
            faculty_id=data.get("facultyId", ""),
            reason=data.get("reason", ""),
        )
        return jsonify({"message": "Request submitted successfully!", "id": request_id}), 201

    @app.route("/faculty/requests", methods=["GET"], endpoint="faculty_requests")
    @roles_required(Role.FACULTY)
    def faculty_requests():
        items = container.request_service.list_for_faculty(
            current_role=current_role(),
            faculty_id=session["approver_id"],
            status=_status_filter(request.args.get("status")),
        )
        return jsonify({"requests": [request_to_json(r) for r in items]})

    @app.route("/faculty/requests/<int:request_id>/<action>", methods=["POST"], endpoint="process_request")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def process_request(request_id: int, action: str):
        svc = container.request_service
        kwargs = dict(current_role=current_role(), approver_id=session["approver_id"], request_id=request_id)
        if action == "approve":
            svc.approve(**kwargs)
            message = "Request approved successfully!"
        elif action == "reject":
            svc.reject(**kwargs)
            message = "Request rejected successfully!"
        elif action == "undo":
            svc.undo(**kwargs)
            message = "Action undone successfully!"
        else:
            raise ValidationError(f"Unknown action: {action}")
        return jsonify({"message": message})

    @app.route("/admin/requests", methods=["GET"], endpoint="admin_requests")
    @roles_required(Role.ADMIN)
    def admin_requests():
        items = container.request_service.list_all(current_role=current_role())
        return jsonify({"requests": [request_to_json(r) for r in items]})
