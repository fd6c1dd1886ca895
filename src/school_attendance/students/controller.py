from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.decorators import admin_required, json_body, json_endpoint
from ..common.validators import optional_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @admin_required
    @json_endpoint("Failed to fetch students")
    def students_list():
        args = request.args
        page = container.student_service.list_students(
            course=args.get("course"),
            year=optional_int(args.get("year"), "year"),
            section=args.get("section"),
            search=args.get("search"),
            page=args.get("page", 1),
            limit=args.get("limit", 50),
        )
        return jsonify(
            {
                "success": True,
                "students": [s.to_dict() for s in page.items],
                "pagination": page.meta(),
            }
        )

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    @admin_required
    @json_endpoint("Failed to create student")
    def students_create():
        data = json_body()
        student = container.student_service.create_student(
            student_code=data.get("studentId"),
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password"),
            course=data.get("course"),
            year=data.get("year"),
            section=data.get("section"),
        )
        return jsonify({"success": True, "student": student.to_dict()}), 201

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="students_get")
    @admin_required
    @json_endpoint("Failed to fetch student")
    def students_get(student_id: int):
        return jsonify({"success": True, "student": container.student_service.get_student(student_id).to_dict()})

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="students_update")
    @admin_required
    @json_endpoint("Failed to update student")
    def students_update(student_id: int):
        student = container.student_service.update_student(student_id, json_body())
        return jsonify({"success": True, "student": student.to_dict()})

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="students_delete")
    @admin_required
    @json_endpoint("Failed to delete student")
    def students_delete(student_id: int):
        container.student_service.delete_student(student_id)
        return jsonify({"success": True, "message": "Student deleted"})
