from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.decorators import admin_required, current_user_id, json_body, json_endpoint, student_required
from ..common.validators import optional_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _optional_date(value):
        return parse_iso_date(value) if value else None

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @admin_required
    @json_endpoint("Failed to fetch attendance")
    def attendance_list():
        args = request.args
        page = container.attendance_service.list_records(
            on_date=_optional_date(args.get("date")),
            student_id=optional_int(args.get("studentId"), "studentId"),
            class_id=optional_int(args.get("classId"), "classId"),
            status=args.get("status") or None,
            page=args.get("page", 1),
            limit=args.get("limit", 50),
        )
        return jsonify(
            {
                "success": True,
                "records": [row.to_dict() for row in page.items],
                "pagination": page.meta(),
            }
        )

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_mark")
    @admin_required
    @json_endpoint("Failed to create attendance")
    def attendance_mark():
        data = json_body()
        outcome = container.attendance_service.mark(
            student_id=data.get("studentId"),
            attendance_date=_optional_date(data.get("date")),
            status=data.get("status"),
            remarks=data.get("remarks"),
            class_id=optional_int(data.get("classId"), "classId"),
            marked_by=current_user_id(),
        )
        return jsonify({"success": True, "attendance": outcome.record.to_dict()}), 201

    @app.route("/api/attendance/<int:student_id>/<date_str>", methods=["GET"], endpoint="attendance_get")
    @admin_required
    @json_endpoint("Failed to fetch attendance")
    def attendance_get(student_id: int, date_str: str):
        record = container.attendance_service.get_record(student_id, parse_iso_date(date_str))
        return jsonify({"success": True, "attendance": record.to_dict()})

    @app.route("/api/attendance/bulk", methods=["POST"], endpoint="attendance_bulk")
    @admin_required
    @json_endpoint("Failed to create attendance records")
    def attendance_bulk():
        data = json_body()
        records = data.get("records")
        outcome = container.attendance_service.mark_bulk(
            attendance_date=_optional_date(data.get("date")),
            records=records if isinstance(records, list) else None,
            class_id=optional_int(data.get("classId"), "classId"),
            marked_by=current_user_id(),
        )
        return jsonify(
            {
                "success": True,
                "message": f"{outcome.count} attendance records saved",
                "count": outcome.count,
            }
        )

    @app.route("/api/student/attendance", methods=["GET"], endpoint="student_attendance")
    @student_required
    @json_endpoint("Failed to fetch attendance")
    def student_attendance():
        args = request.args
        page, stats = container.attendance_service.student_history(
            student_id=current_user_id(),
            class_id=optional_int(args.get("classId"), "classId"),
            page=args.get("page", 1),
            limit=args.get("limit", 20),
        )
        return jsonify(
            {
                "success": True,
                "records": [row.to_dict() for row in page.items],
                "stats": stats.to_dict(),
                "pagination": page.meta(),
            }
        )
