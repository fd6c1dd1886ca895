from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.decorators import (
    admin_required,
    current_user_id,
    json_body,
    json_endpoint,
    student_required,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes", methods=["GET"], endpoint="classes_list")
    @admin_required
    @json_endpoint("Failed to fetch classes")
    def classes_list():
        active_only = request.args.get("active") == "true"
        classes = container.class_service.list_classes(active_only=active_only)
        return jsonify({"success": True, "classes": [c.to_dict() for c in classes]})

    @app.route("/api/classes", methods=["POST"], endpoint="classes_create")
    @admin_required
    @json_endpoint("Failed to create class")
    def classes_create():
        data = json_body()
        school_class = container.class_service.create_class(
            name=data.get("name"),
            description=data.get("description"),
            subject=data.get("subject"),
            schedule=data.get("schedule"),
            created_by=current_user_id(),
        )
        return jsonify({"success": True, "class": school_class.to_dict()}), 201

    @app.route("/api/classes/<int:class_id>", methods=["GET"], endpoint="classes_get")
    @admin_required
    @json_endpoint("Failed to fetch class")
    def classes_get(class_id: int):
        return jsonify({"success": True, "class": container.class_service.get_class(class_id).to_dict()})

    @app.route("/api/classes/<int:class_id>", methods=["PUT"], endpoint="classes_update")
    @admin_required
    @json_endpoint("Failed to update class")
    def classes_update(class_id: int):
        data = dict(json_body())
        if "isActive" in data:
            data["is_active"] = data.pop("isActive")
        school_class = container.class_service.update_class(class_id, data)
        return jsonify({"success": True, "class": school_class.to_dict()})

    @app.route("/api/classes/<int:class_id>", methods=["DELETE"], endpoint="classes_delete")
    @admin_required
    @json_endpoint("Failed to delete class")
    def classes_delete(class_id: int):
        container.class_service.delete_class(class_id)
        return jsonify({"success": True, "message": "Class deleted"})

    @app.route("/api/classes/<int:class_id>/students", methods=["GET"], endpoint="class_students")
    @admin_required
    @json_endpoint("Failed to fetch students")
    def class_students(class_id: int):
        students = container.class_service.list_students(class_id)
        return jsonify({"success": True, "students": [s.to_dict() for s in students]})

    @app.route("/api/classes/<int:class_id>/students", methods=["POST"], endpoint="class_enroll")
    @admin_required
    @json_endpoint("Failed to enroll student")
    def class_enroll(class_id: int):
        enrollment = container.class_service.enroll_student(
            class_id=class_id, student_id=json_body().get("studentId")
        )
        return jsonify({"success": True, "enrollment": enrollment.to_dict()}), 201

    @app.route("/api/classes/<int:class_id>/students", methods=["DELETE"], endpoint="class_unenroll")
    @admin_required
    @json_endpoint("Failed to remove student")
    def class_unenroll(class_id: int):
        container.class_service.remove_student(class_id=class_id, student_id=request.args.get("studentId"))
        return jsonify({"success": True, "message": "Student removed from class"})

    @app.route("/api/student/classes", methods=["GET"], endpoint="student_classes")
    @student_required
    @json_endpoint("Failed to fetch classes")
    def student_classes():
        classes = container.class_service.list_for_student(current_user_id())
        return jsonify({"success": True, "classes": [c.to_dict() for c in classes]})

    @app.route("/api/student/classes/join", methods=["POST"], endpoint="student_join_class")
    @student_required
    @json_endpoint("Failed to join class")
    def student_join_class():
        school_class, enrollment = container.class_service.join_by_code(
            student_id=current_user_id(), code=json_body().get("code")
        )
        return (
            jsonify(
                {
                    "success": True,
                    "message": f"Successfully joined {school_class.name}",
                    "enrollment": enrollment.to_dict(),
                    "class": school_class.to_dict(),
                }
            ),
            201,
        )
