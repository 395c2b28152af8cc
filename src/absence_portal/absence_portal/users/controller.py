from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import current_role, error, login_required, payload, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import UserProfile


def profile_to_json(p: UserProfile) -> dict:
    return {
        "uid": p.uid,
        "email": p.email,
        "displayName": p.display_name,
        "role": p.role.value,
        "course": p.course,
        "semester": p.semester,
        "prn": p.prn,
        "facultyId": p.faculty_id,
    }


def _parse_role(value) -> Role:
    try:
        return Role((value or "").strip().lower())
    except ValueError:
        raise ValidationError("Invalid role")


def register(app: Flask, container: Container) -> None:
    def _start_session(profile: UserProfile, *, remember: bool) -> None:
        session.clear()
        session.permanent = remember

        session["uid"] = profile.uid
        session["name"] = profile.display_name
        session["role"] = profile.role.value
        session["approver_id"] = profile.approver_id

    @app.route("/signup", methods=["POST"], endpoint="signup")
    def signup():
        data = payload()
        profile = container.auth_service.sign_up(
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            confirm_password=data.get("confirmPassword", ""),
            role=_parse_role(data.get("role", "student")),
            course=data.get("course"),
            semester=data.get("semester"),
            prn=data.get("prn"),
            faculty_id=data.get("facultyId"),
        )
        return jsonify({"user": profile_to_json(profile)}), 201

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = payload()
        profile = container.auth_service.sign_in(data.get("email", ""), data.get("password", ""))
        _start_session(profile, remember=bool(data.get("rememberMe")))
        return jsonify({"user": profile_to_json(profile)})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        uid = session.get("uid")
        if uid:
            container.auth_service.sign_out(uid)
        session.clear()
        return jsonify({"message": "Signed out"})

    @app.route("/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        profile = container.users_repo.get_by_uid(session["uid"])
        if not profile:
            session.clear()
            return error("No profile found for this account", 401)
        return jsonify({"user": profile_to_json(profile)})

    @app.route("/faculty", methods=["GET"], endpoint="faculty_list")
    @login_required
    def faculty_list():
        return jsonify({"faculty": [profile_to_json(p) for p in container.user_service.list_faculty()]})

    @app.route("/admin/users", methods=["GET"], endpoint="admin_users")
    @roles_required(Role.ADMIN)
    def admin_users():
        users = container.user_service.list_users(current_role=current_role())
        return jsonify({"users": [profile_to_json(p) for p in users]})

    @app.route("/admin/users", methods=["POST"], endpoint="add_user")
    @roles_required(Role.ADMIN)
    def add_user():
        data = payload()
        profile = container.user_service.create_user(
            current_role=current_role(),
            email=data.get("email", ""),
            password=data.get("password", ""),
            display_name=data.get("displayName", ""),
            role=_parse_role(data.get("role", "student")),
            course=data.get("course"),
            semester=data.get("semester"),
            prn=data.get("prn"),
            faculty_id=data.get("facultyId"),
        )
        return jsonify({"message": "User created successfully!", "user": profile_to_json(profile)}), 201

    @app.route("/admin/users/<uid>", methods=["PATCH"], endpoint="update_faculty")
    @roles_required(Role.ADMIN)
    def update_faculty(uid: str):
        data = payload()
        container.user_service.update_faculty(
            current_role=current_role(),
            uid=uid,
            display_name=data.get("displayName", ""),
            faculty_id=data.get("facultyId", ""),
        )
        return jsonify({"message": "Faculty updated"})

    @app.route("/admin/users/<uid>", methods=["DELETE"], endpoint="delete_user")
    @roles_required(Role.ADMIN)
    def delete_user(uid: str):
        container.user_service.delete_profile(current_role=current_role(), uid=uid)
        return jsonify({"message": "User profile deleted"})

    @app.route("/admin/stats", methods=["GET"], endpoint="admin_stats")
    @roles_required(Role.ADMIN)
    def admin_stats():
        return jsonify(
            {
                **container.user_service.stats(),
                **container.request_service.stats(),
                "courses": len(container.course_service.list_courses()),
                "timetable_entries": len(container.timetable_service.list_all(current_role=current_role())),
            }
        )
