from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.decorators import (
    admin_required,
    current_user_id,
    json_body,
    json_endpoint,
    student_required,
)
from ..container import Container
from .model import SessionUser


def register(app: Flask, container: Container) -> None:
    def _start_session(user: SessionUser) -> None:
        session.clear()
        session["user_id"] = user.user_id
        session["name"] = user.name
        session["role"] = user.role.value

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    @json_endpoint("Failed to create admin")
    def auth_register():
        data = json_body()
        user = container.auth_service.register_admin(
            name=data.get("name"), email=data.get("email"), password=data.get("password")
        )
        _start_session(user)
        return jsonify({"success": True, "admin": user.to_dict()}), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    @json_endpoint("Login failed")
    def auth_login():
        data = json_body()
        user = container.auth_service.authenticate_admin(data.get("email"), data.get("password"))
        _start_session(user)
        return jsonify({"success": True, "admin": user.to_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def auth_logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @admin_required
    @json_endpoint("Failed to load profile")
    def auth_me():
        return jsonify({"success": True, "admin": container.auth_service.current_admin(current_user_id()).to_dict()})

    @app.route("/api/student/auth/login", methods=["POST"], endpoint="student_login")
    @json_endpoint("Login failed")
    def student_login():
        data = json_body()
        login = data.get("email") or data.get("studentId")
        user = container.auth_service.authenticate_student(login, data.get("password"))
        _start_session(user)
        return jsonify({"success": True, "student": user.to_dict()})

    @app.route("/api/student/auth/me", methods=["GET"], endpoint="student_me")
    @student_required
    @json_endpoint("Failed to load profile")
    def student_me():
        return jsonify({"success": True, "student": container.student_service.get_student(current_user_id()).to_dict()})
