from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationDispatcher, NotificationService
from .reports.service import ReportService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.mysql_admin_repository import MySQLAdminRepository
from .users.repository import AdminRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    admins_repo: AdminRepository
    students_repo: StudentRepository
    classes_repo: ClassRepository
    attendance_repo: AttendanceRepository
    notifications_repo: NotificationRepository

    auth_service: AuthService
    student_service: StudentService
    class_service: ClassService
    notification_service: NotificationService
    notification_dispatcher: NotificationDispatcher
    attendance_service: AttendanceService
    report_service: ReportService


def wire(
    *,
    admins: AdminRepository,
    students: StudentRepository,
    classes: ClassRepository,
    attendance: AttendanceRepository,
    notifications: NotificationRepository,
) -> Container:
    """Build every service on top of the given repositories (MySQL or in-memory)."""
    notification_service = NotificationService(notifications)
    dispatcher = NotificationDispatcher(notification_service)

    return Container(
        admins_repo=admins,
        students_repo=students,
        classes_repo=classes,
        attendance_repo=attendance,
        notifications_repo=notifications,
        auth_service=AuthService(admins, students),
        student_service=StudentService(students),
        class_service=ClassService(classes, students),
        notification_service=notification_service,
        notification_dispatcher=dispatcher,
        attendance_service=AttendanceService(attendance, classes, dispatcher),
        report_service=ReportService(students, attendance),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire(
        admins=MySQLAdminRepository(conn),
        students=MySQLStudentRepository(conn),
        classes=MySQLClassRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        notifications=MySQLNotificationRepository(conn),
    )
