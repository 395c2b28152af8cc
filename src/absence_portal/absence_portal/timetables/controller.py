from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import format_iso_date
from ..common.web import current_role, error, login_required, object_list, payload, roles_required
from ..container import Container
from ..core.enums import Role, WeekDay
from ..core.exceptions import ValidationError
from ..timeslots.clock import format_range_for_display, time_options
from ..timeslots.week import WeekDate
from .model import SlotInput, TimetableEntry, TimetableScope


def entry_to_json(e: TimetableEntry) -> dict:
    return {
        "id": e.entry_id,
        "course": e.course,
        "semester": e.semester,
        "day": str(int(e.day)),
        "dayName": e.day.label,
        "date": format_iso_date(e.date) if e.date else "",
        "time": e.time,
        "timeLabel": format_range_for_display(e.time),
        "subject": e.subject,
        "facultyId": e.faculty_id,
        "facultyName": e.faculty_name,
    }


def week_date_to_json(wd: WeekDate) -> dict:
    return {
        "date": format_iso_date(wd.date),
        "dayOfWeek": int(wd.day),
        "dayName": wd.name,
        "isToday": wd.is_today,
        "isPast": wd.is_past,
    }


def register(app: Flask, container: Container) -> None:
    def _own_scope() -> TimetableScope:
        role = current_role()
        if role == Role.FACULTY:
            return TimetableScope.for_faculty(session["approver_id"])
        profile = container.users_repo.get_by_uid(session["uid"])
        if not profile or not profile.course or not profile.semester:
            raise ValidationError("Course or semester information missing from your profile.")
        return TimetableScope.for_course(profile.course, profile.semester)

    @app.route("/timetable/time-options", methods=["GET"], endpoint="time_options")
    @login_required
    def get_time_options():
        return jsonify({"options": [{"value": v, "label": label} for v, label in time_options()]})

    @app.route("/timetable/week", methods=["GET"], endpoint="timetable_week")
    @roles_required(Role.STUDENT, Role.FACULTY)
    def timetable_week():
        view = container.timetable_service.week_view(_own_scope())
        if not any(entries for _, entries in view):
            return error("No timetable available for your course and semester.", 404)
        return jsonify(
            {"week": [{**week_date_to_json(wd), "classes": [entry_to_json(e) for e in entries]} for wd, entries in view]}
        )

    @app.route("/faculty/timetable", methods=["POST"], endpoint="faculty_add_class")
    @roles_required(Role.FACULTY)
    def faculty_add_class():
        data = payload()
        entry_id = container.timetable_service.add_entry(
            current_role=current_role(),
            scope=_own_scope(),
            day=WeekDay.parse(data.get("day", "")),
            start_time=data.get("startTime", ""),
            end_time=data.get("endTime", ""),
            subject=data.get("subject", ""),
            course=data.get("course", ""),
            semester=data.get("semester", ""),
            faculty_id=session["approver_id"],
            faculty_name=session.get("name", ""),
        )
        return jsonify({"message": "Class added successfully!", "id": entry_id}), 201

    @app.route("/faculty/timetable", methods=["DELETE"], endpoint="faculty_remove_class")
    @roles_required(Role.FACULTY)
    def faculty_remove_class():
        data = payload()
        container.timetable_service.remove_slot(
            current_role=current_role(),
            scope=_own_scope(),
            day=WeekDay.parse(data.get("day", "")),
            time=data.get("time", ""),
        )
        return jsonify({"message": "Class removed"})

    @app.route("/admin/timetables", methods=["GET"], endpoint="admin_timetables")
    @roles_required(Role.ADMIN)
    def admin_timetables():
        course, semester = request.args.get("course"), request.args.get("semester")
        if course and semester:
            entries = container.timetable_service.list_entries(TimetableScope.for_course(course, semester))
        else:
            entries = container.timetable_service.list_all(current_role=current_role())
        return jsonify({"entries": [entry_to_json(e) for e in entries]})

    @app.route("/admin/timetables", methods=["POST"], endpoint="admin_add_entry")
    @roles_required(Role.ADMIN)
    def admin_add_entry():
        data = payload()
        course, semester = data.get("course", ""), data.get("semester", "")
        entry_id = container.timetable_service.add_entry(
            current_role=current_role(),
            scope=TimetableScope.for_course(course.strip(), semester.strip()),
            day=WeekDay.parse(data.get("day", "")),
            start_time=data.get("startTime", ""),
            end_time=data.get("endTime", ""),
            subject=data.get("subject", ""),
            course=course,
            semester=semester,
            faculty_id=data.get("facultyId", ""),
            faculty_name=data.get("facultyName", ""),
        )
        return jsonify({"message": "Timetable entry added successfully!", "id": entry_id}), 201

    @app.route("/admin/timetables", methods=["PUT"], endpoint="admin_replace_timetable")
    @roles_required(Role.ADMIN)
    def admin_replace_timetable():
        data = payload()
        slots = [
            SlotInput(
                day=WeekDay.parse(s.get("day", "")),
                time=s.get("time", ""),
                subject=s.get("subject", ""),
                faculty_id=s.get("facultyId", ""),
                faculty_name=s.get("facultyName", ""),
            )
            for s in object_list(data, "entries")
        ]
        count = container.timetable_service.replace_timetable(
            current_role=current_role(),
            course=data.get("course", ""),
            semester=data.get("semester", ""),
            slots=slots,
        )
        return jsonify({"message": f"Timetable saved successfully! {count} entries added.", "count": count})

    @app.route("/admin/timetables/<int:entry_id>", methods=["DELETE"], endpoint="admin_delete_entry")
    @roles_required(Role.ADMIN)
    def admin_delete_entry(entry_id: int):
        container.timetable_service.delete_entry(current_role=current_role(), entry_id=entry_id)
        return jsonify({"message": "Timetable entry deleted successfully!"})

    @app.route("/admin/timetables/import", methods=["POST"], endpoint="admin_import_csv")
    @roles_required(Role.ADMIN)
    def admin_import_csv():
        upload = request.files.get("file")
        if upload is not None:
            try:
                text = upload.read().decode("utf-8-sig")
            except UnicodeDecodeError:
                raise ValidationError("Failed to process CSV.")
        else:
            text = request.get_data(as_text=True)
        summary = container.timetable_service.import_csv(current_role=current_role(), text=text)
        return jsonify(
            {
                "message": f"Uploaded {summary.imported} timetable entries.",
                "imported": summary.imported,
                "skipped": summary.skipped,
            }
        )
