from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_role, login_required, payload, roles_required
from ..container import Container
from ..core.enums import Role
from .model import Course


def course_to_json(c: Course) -> dict:
    return {"id": c.course_id, "name": c.name, "semesters": list(c.semesters)}


def register(app: Flask, container: Container) -> None:
    @app.route("/courses", methods=["GET"], endpoint="courses")
    @login_required
    def courses():
        return jsonify({"courses": [course_to_json(c) for c in container.course_service.list_courses()]})

    @app.route("/signup/courses", methods=["GET"], endpoint="signup_courses")
    def signup_courses():
        # The signup form needs the course list before anyone is signed in.
        return jsonify({"courses": [course_to_json(c) for c in container.course_service.list_courses()]})

    @app.route("/admin/courses", methods=["POST"], endpoint="add_course")
    @roles_required(Role.ADMIN)
    def add_course():
        data = payload()
        semesters = data.get("semesters")
        if isinstance(semesters, str):
            semesters = semesters.split(",")
        course_id = container.course_service.add_course(
            current_role=current_role(),
            name=data.get("name", ""),
            semesters=semesters,
        )
        return jsonify({"message": "Course added successfully!", "id": course_id}), 201

    @app.route("/admin/courses/<int:course_id>", methods=["DELETE"], endpoint="delete_course")
    @roles_required(Role.ADMIN)
    def delete_course(course_id: int):
        container.course_service.delete_course(current_role=current_role(), course_id=course_id)
        return jsonify({"message": "Course deleted successfully!"})
