from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..attendance.model import StatusCounts
from ..core.enums import AttendanceStatus, ReportType
from ..students.model import Student


def attendance_rate(present: int, late: int, total: int) -> float:
    """(present + late) / total as a percentage with one decimal; 0.0 when total is 0."""
    if not total:
        return 0.0
    pct = Decimal(present + late) * 100 / Decimal(total)
    return float(pct.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class DayEntry:
    status: AttendanceStatus
    remarks: Optional[str] = None


@dataclass(frozen=True)
class StudentReportRow:
    student: Student
    attendance: dict[date, DayEntry]
    summary: StatusCounts

    @property
    def rate(self) -> float:
        return attendance_rate(self.summary.present, self.summary.late, self.summary.total)

    def to_dict(self) -> dict:
        summary = self.summary.to_dict()
        summary["rate"] = self.rate
        return {
            "student": self.student.to_brief(),
            "attendance": {
                d.isoformat(): {"status": e.status.value, "remarks": e.remarks}
                for d, e in sorted(self.attendance.items())
            },
            "summary": summary,
        }


@dataclass(frozen=True)
class ReportStats:
    total_students: int
    counts: StatusCounts

    @property
    def rate(self) -> float:
        return attendance_rate(self.counts.present, self.counts.late, self.counts.total)

    def to_dict(self) -> dict:
        return {
            "totalStudents": self.total_students,
            "totalRecords": self.counts.total,
            "present": self.counts.present,
            "absent": self.counts.absent,
            "late": self.counts.late,
            "rate": self.rate,
        }


@dataclass(frozen=True)
class AttendanceReport:
    report_type: ReportType
    start_date: date
    end_date: date
    rows: list[StudentReportRow]
    stats: ReportStats

    def to_dict(self) -> dict:
        return {
            "report": [r.to_dict() for r in self.rows],
            "stats": self.stats.to_dict(),
            "dateRange": {"startDate": self.start_date.isoformat(), "endDate": self.end_date.isoformat()},
            "type": self.report_type.value,
        }
