from __future__ import annotations

import csv
import io
from datetime import date

import pytest
from werkzeug.security import generate_password_hash

from school_attendance.core.enums import Role


@pytest.fixture
def roster(store):
    return [store.students.add("STU001", "Ana", section="A"), store.students.add("STU002", "Ben", section="B")]


@pytest.mark.parametrize(
    "method, url",
    [
        ("get", "/api/attendance"),
        ("post", "/api/attendance/bulk"),
        ("get", "/api/reports"),
        ("get", "/api/students"),
        ("get", "/api/student/attendance"),
    ],
)
def test_routes_require_a_session(client, method, url):
    resp = getattr(client, method)(url)
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "error": "Authentication required"}


def test_students_cannot_use_admin_routes(client, login):
    login(client, Role.STUDENT, 1)
    assert client.post("/api/attendance/bulk", json={}).status_code == 403
    assert client.get("/api/reports").status_code == 403


def test_bulk_mark_reports_count_and_notifies(admin_client, store, roster):
    ana, ben = roster
    resp = admin_client.post(
        "/api/attendance/bulk",
        json={
            "date": "2024-03-14",
            "records": [
                {"studentId": ana.student_id, "status": "present"},
                {"studentId": ben.student_id, "status": "absent", "remarks": "sick"},
            ],
        },
    )

    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "2 attendance records saved", "count": 2}
    assert store.attendance.get_for_student_and_date(ana.student_id, date(2024, 3, 14)).marked_by == 1
    assert [n.student_id for n in store.notifications.rows] == [ben.student_id]


@pytest.mark.parametrize(
    "body",
    [
        {"date": "2024-03-14", "records": []},
        {"date": "2024-03-14"},
        {"records": [{"studentId": 1, "status": "present"}]},
        {"date": "14-03-2024", "records": [{"studentId": 1, "status": "present"}]},
    ],
)
def test_bulk_mark_bad_input_is_400(admin_client, store, roster, body):
    resp = admin_client.post("/api/attendance/bulk", json=body)
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert store.attendance.rows == {}


def test_bulk_store_failure_is_a_generic_500(admin_client, store, roster):
    store.attendance.fail_writes = True
    resp = admin_client.post(
        "/api/attendance/bulk",
        json={"date": "2024-03-14", "records": [{"studentId": roster[0].student_id, "status": "absent"}]},
    )
    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "error": "Failed to create attendance records"}
    assert store.notifications.rows == []


def test_single_mark_then_fetch(admin_client, roster):
    sid = roster[0].student_id
    created = admin_client.post(
        "/api/attendance", json={"studentId": sid, "date": "2024-03-14", "status": "late", "remarks": "bus"}
    )
    assert created.status_code == 201
    assert created.get_json()["attendance"]["status"] == "late"

    fetched = admin_client.get(f"/api/attendance/{sid}/2024-03-14")
    assert fetched.get_json()["attendance"]["remarks"] == "bus"
    assert admin_client.get(f"/api/attendance/{sid}/2024-03-15").status_code == 404

    listing = admin_client.get("/api/attendance?date=2024-03-14").get_json()
    assert listing["pagination"] == {"page": 1, "limit": 50, "total": 1, "pages": 1}
    assert listing["records"][0]["student"]["studentId"] == "STU001"


def test_weekly_report_endpoint(admin_client, container, roster):
    container.attendance_service.mark(student_id=roster[0].student_id, attendance_date=date(2024, 3, 12), status="present")

    payload = admin_client.get("/api/reports?type=weekly&date=2024-03-14&section=A").get_json()

    assert payload["success"] is True
    assert payload["type"] == "weekly"
    assert payload["dateRange"] == {"startDate": "2024-03-11", "endDate": "2024-03-17"}
    assert [row["student"]["name"] for row in payload["report"]] == ["Ana"]
    assert payload["stats"]["rate"] == 100.0


def test_report_rejects_unknown_type(admin_client):
    assert admin_client.get("/api/reports?type=yearly&date=2024-03-14").status_code == 400


def test_report_export_is_csv(admin_client, container, roster):
    container.attendance_service.mark(student_id=roster[1].student_id, attendance_date=date(2024, 3, 1), status="absent")

    resp = admin_client.get("/api/reports/export?type=monthly&date=2024-03-20")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attendance_monthly_2024-03-01_2024-03-31.csv" in resp.headers["Content-Disposition"]
    rows = list(csv.DictReader(io.StringIO(resp.data.decode("utf-8-sig"))))
    assert [r["student_id"] for r in rows] == ["STU001", "STU002"]
    assert rows[1]["absent"] == "1"
    assert rows[1]["rate"] == "0.0"


def test_dashboard_endpoint(admin_client, roster):
    dash = admin_client.get("/api/reports/dashboard").get_json()["dashboard"]
    assert dash["totalStudents"] == 2
    assert len(dash["weeklyTrend"]) == 7


def test_student_history_notifications_and_join(client, login, container, store, roster):
    ana = roster[0]
    svc = container.class_service
    school_class = svc.create_class(name="Math", created_by=1)
    container.attendance_service.mark(
        student_id=ana.student_id, attendance_date=date(2024, 3, 14), status="absent", class_id=school_class.class_id
    )
    login(client, Role.STUDENT, ana.student_id)

    joined = client.post("/api/student/classes/join", json={"code": school_class.code.lower()})
    assert joined.status_code == 201
    assert client.post("/api/student/classes/join", json={"code": school_class.code}).status_code == 400
    assert client.post("/api/student/classes/join", json={"code": "NOPE00"}).status_code == 404

    history = client.get("/api/student/attendance").get_json()
    assert history["stats"] == {"present": 0, "absent": 1, "late": 0, "total": 1}

    notes = client.get("/api/student/notifications").get_json()["notifications"]
    assert [n["title"] for n in notes] == ["Absence Recorded"]
    assert client.put(f"/api/student/notifications/{notes[0]['id']}/read").status_code == 200
    assert store.notifications.rows[0].read is True


def test_admin_register_login_me_logout(client):
    body = {"name": "Admin", "email": "admin@school.test", "password": "admin123"}
    assert client.post("/api/auth/register", json=body).status_code == 201
    assert client.post("/api/auth/logout").status_code == 200
    assert client.get("/api/auth/me").status_code == 401

    assert client.post("/api/auth/login", json={"email": body["email"], "password": "bad-pass"}).status_code == 401
    assert client.post("/api/auth/login", json={"email": body["email"], "password": body["password"]}).status_code == 200
    assert client.get("/api/auth/me").get_json()["admin"]["email"] == "admin@school.test"


def test_student_login_by_code(client, store):
    store.students.add("STU009", "Zed", password_hash=generate_password_hash("pw1234"))

    resp = client.post("/api/student/auth/login", json={"studentId": "STU009", "password": "pw1234"})

    assert resp.status_code == 200
    assert client.get("/api/student/auth/me").get_json()["student"]["name"] == "Zed"


def test_student_crud(admin_client):
    created = admin_client.post(
        "/api/students",
        json={
            "studentId": "STU050",
            "name": "Eve",
            "email": "eve@school.test",
            "password": "secret1",
            "course": "BSCS",
            "year": 2,
            "section": "C",
        },
    )
    assert created.status_code == 201
    sid = created.get_json()["student"]["id"]

    assert admin_client.put(f"/api/students/{sid}", json={"section": "D"}).get_json()["student"]["section"] == "D"
    assert admin_client.delete(f"/api/students/{sid}").status_code == 200
    assert admin_client.get(f"/api/students/{sid}").status_code == 404


@pytest.mark.parametrize("records", [["abc"], [None], [1, 2]])
def test_bulk_mark_rejects_non_object_entries(admin_client, store, roster, records):
    store.attendance.fail_writes = True  # any store access would surface as a 500

    resp = admin_client.post("/api/attendance/bulk", json={"date": "2024-03-14", "records": records})

    assert resp.status_code == 400
    assert resp.get_json() == {
        "success": False,
        "error": "Every record must be an object with studentId and status",
    }
    assert store.attendance.rows == {}
    assert store.notifications.rows == []


def test_class_enrollment_rejects_non_numeric_student_id(admin_client, container, roster):
    school_class = container.class_service.create_class(name="Math", created_by=1)

    enrolled = admin_client.post(f"/api/classes/{school_class.class_id}/students", json={"studentId": "abc"})
    removed = admin_client.delete(f"/api/classes/{school_class.class_id}/students?studentId=abc")

    assert enrolled.status_code == 400
    assert enrolled.get_json()["error"] == "Student ID must be an integer"
    assert removed.status_code == 400
    assert container.class_service.list_students(school_class.class_id) == []


def test_role_mismatch_is_403(client, login):
    login(client, Role.ADMIN, 1)
    resp = client.get("/api/student/notifications")
    assert resp.status_code == 403
    assert resp.get_json() == {"success": False, "error": "Forbidden"}
