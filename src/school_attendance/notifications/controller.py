from __future__ import annotations

from flask import Flask, jsonify

from ..common.decorators import current_user_id, json_endpoint, student_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/student/notifications", methods=["GET"], endpoint="student_notifications")
    @student_required
    @json_endpoint("Failed to fetch notifications")
    def student_notifications():
        items = container.notification_service.list_for_student(current_user_id())
        return jsonify({"success": True, "notifications": [n.to_dict() for n in items]})

    @app.route(
        "/api/student/notifications/<int:notification_id>/read",
        methods=["PUT"],
        endpoint="student_notification_read",
    )
    @student_required
    @json_endpoint("Failed to update notification")
    def student_notification_read(notification_id: int):
        container.notification_service.mark_read(notification_id=notification_id, student_id=current_user_id())
        return jsonify({"success": True})
