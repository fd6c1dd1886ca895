from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Any, Optional

from ..attendance.model import AttendanceFilter, StatusCounts
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import last_n_days, report_range
from ..common.validators import clean_optional
from ..core.constants import DASHBOARD_TREND_DAYS, RECENT_ACTIVITY_LIMIT
from ..core.enums import AttendanceStatus, ReportType
from ..core.exceptions import ValidationError
from ..students.model import StudentFilter
from ..students.repository import StudentRepository
from .model import AttendanceReport, DayEntry, ReportStats, StudentReportRow


def parse_report_type(value: Any) -> ReportType:
    if isinstance(value, ReportType):
        return value
    try:
        return ReportType(str(value or ReportType.DAILY.value).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid report type {value!r} (expected daily, weekly or monthly)") from None


class ReportService:
    """Report aggregator over students and their attendance rows."""

    def __init__(self, students: StudentRepository, attendance: AttendanceRepository):
        self._students = students
        self._attendance = attendance

    def build_report(
        self,
        *,
        report_type: Any,
        anchor: date,
        course: Optional[str] = None,
        year: Optional[int] = None,
        section: Optional[str] = None,
    ) -> AttendanceReport:
        report_type = parse_report_type(report_type)
        start, end = report_range(report_type, anchor)

        students = self._students.list_filtered(
            StudentFilter(course=clean_optional(course), year=year, section=clean_optional(section))
        )
        records = self._attendance.find_in_range(
            student_ids=[s.student_id for s in students],
            start_date=start,
            end_date=end,
        )

        by_student: dict[int, dict[date, DayEntry]] = defaultdict(dict)
        for r in records:
            by_student[r.student_id][r.attendance_date] = DayEntry(status=r.status, remarks=r.remarks)

        rows = []
        for s in students:
            days = by_student.get(s.student_id, {})
            rows.append(
                StudentReportRow(
                    student=s,
                    attendance=dict(days),
                    summary=StatusCounts.from_statuses(e.status for e in days.values()),
                )
            )

        stats = ReportStats(
            total_students=len(students),
            counts=StatusCounts.from_statuses(r.status for r in records),
        )
        return AttendanceReport(report_type=report_type, start_date=start, end_date=end, rows=rows, stats=stats)

    def dashboard(self, *, today: date) -> dict:
        total_students = self._students.count_filtered(StudentFilter())
        today_counts = self._attendance.status_counts(AttendanceFilter(on_date=today))

        days = last_n_days(today, DASHBOARD_TREND_DAYS)
        trend = {d: {s.value: 0 for s in AttendanceStatus} for d in days}
        for r in self._attendance.find_in_range(student_ids=None, start_date=days[0], end_date=today):
            if r.attendance_date in trend:
                trend[r.attendance_date][r.status.value] += 1

        return {
            "totalStudents": total_students,
            "today": {
                "present": today_counts.present,
                "absent": today_counts.absent,
                "late": today_counts.late,
                "notMarked": max(total_students - today_counts.total, 0),
            },
            "weeklyTrend": [{"date": d.isoformat(), **counts} for d, counts in trend.items()],
            "recentActivity": [
                {
                    "id": row.record.attendance_id,
                    "date": row.record.attendance_date.isoformat(),
                    "status": row.record.status.value,
                    "createdAt": row.record.created_at.isoformat() if row.record.created_at else None,
                    "student": row.student.to_brief() if row.student else None,
                }
                for row in self._attendance.recent(limit=RECENT_ACTIVITY_LIMIT)
            ],
            "courseDistribution": [
                {"course": course, "count": count}
                for course, count in self._students.course_distribution().items()
            ],
        }
