from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, today_local
from ..common.decorators import admin_required, json_endpoint
from ..common.validators import optional_int
from ..container import Container
from .model import AttendanceReport

CSV_FIELDS = [
    "student_id",
    "name",
    "course",
    "year",
    "section",
    "present",
    "absent",
    "late",
    "total",
    "rate",
]


def register(app: Flask, container: Container) -> None:
    def _build_report() -> AttendanceReport:
        args = request.args
        anchor = parse_iso_date(args["date"]) if args.get("date") else today_local()
        return container.report_service.build_report(
            report_type=args.get("type") or "daily",
            anchor=anchor,
            course=args.get("course") or None,
            year=optional_int(args.get("year"), "year"),
            section=args.get("section") or None,
        )

    def _write_report_csv(report: AttendanceReport, *, filename: str):
        """One line per student, summary counts and rate."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in report.rows:
            writer.writerow(
                {
                    "student_id": row.student.student_code,
                    "name": row.student.name,
                    "course": row.student.course,
                    "year": row.student.year,
                    "section": row.student.section,
                    "present": row.summary.present,
                    "absent": row.summary.absent,
                    "late": row.summary.late,
                    "total": row.summary.total,
                    "rate": f"{row.rate:.1f}",
                }
            )

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports", methods=["GET"], endpoint="reports")
    @admin_required
    @json_endpoint("Failed to build report")
    def reports():
        report = _build_report()
        return jsonify({"success": True, **report.to_dict()})

    @app.route("/api/reports/export", methods=["GET"], endpoint="reports_export")
    @admin_required
    @json_endpoint("Failed to export report")
    def reports_export():
        report = _build_report()
        filename = (
            f"attendance_{report.report_type.value}_"
            f"{report.start_date.isoformat()}_{report.end_date.isoformat()}.csv"
        )
        return _write_report_csv(report, filename=filename)

    @app.route("/api/reports/dashboard", methods=["GET"], endpoint="reports_dashboard")
    @admin_required
    @json_endpoint("Failed to load dashboard")
    def reports_dashboard():
        return jsonify({"success": True, "dashboard": container.report_service.dashboard(today=today_local())})
