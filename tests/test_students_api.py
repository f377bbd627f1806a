from app.features.students.derivation import COURSE_SUMMARIES
from app.features.students.models import Course
from conftest import STUDENT


def test_create_student_derives_fields(client, admin_headers):
    resp = client.post("/api/students", json=STUDENT, headers=admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    student = body["student"]
    assert student["dateOfBirth"] == "1999-01-01"
    assert student["courseSummary"] == COURSE_SUMMARIES[Course.networking]
    assert student["status"] == "Pending"
    assert "password" not in student
    assert len(student["registrationTimestamp"]) == len("2026-10-19 09:30:15")


def test_duplicate_email_rejected_and_store_unchanged(client, admin_headers, student):
    dup = dict(STUDENT, studentNo="S002", idNumber="0001015800086")
    resp = client.post("/api/students", json=dup, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "error": "Email already exists for another student.",
        "field": "email",
    }
    listed = client.get("/api/students", headers=admin_headers).json()
    assert [s["studentNo"] for s in listed] == ["S001"]


def test_missing_required_fields(client, admin_headers):
    resp = client.post("/api/students", json={"fullname": "Only Name"}, headers=admin_headers)
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"].startswith("Missing required fields")
    assert {"idNumber", "studentNo", "email"} <= set(body["fields"])


def test_invalid_course_rejected(client, admin_headers):
    resp = client.post("/api/students", json=dict(STUDENT, course="Cooking"), headers=admin_headers)
    assert resp.status_code == 400
    assert "course" in resp.json()["fields"]


def test_legacy_date_of_birth_key_accepted(client, admin_headers):
    body = dict(STUDENT, idNumber="X1", dateofBirth="2001-02-03")
    resp = client.post("/api/students", json=body, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["student"]["dateOfBirth"] == "2001-02-03"


def test_update_own_record_with_unchanged_keys(client, admin_headers, student):
    body = dict(STUDENT, fullname="A B Updated", status="Active")
    resp = client.put("/api/students/S001", json=body, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Successfully updated student details"
    fetched = client.get("/api/students/S001", headers=admin_headers).json()
    assert fetched["fullname"] == "A B Updated"
    assert fetched["status"] == "Active"


def test_update_cannot_rename_student_no(client, admin_headers, student):
    resp = client.put("/api/students/S001", json=dict(STUDENT, studentNo="S777"), headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["field"] == "studentNo"
    assert client.get("/api/students/S777", headers=admin_headers).status_code == 404


def test_update_unknown_student(client, admin_headers):
    resp = client.put("/api/students/S404", json=dict(STUDENT, studentNo="S404"), headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["error"] == "Student not found"


def test_delete_then_get_is_404(client, admin_headers, student):
    resp = client.delete("/api/students/S001", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Successfully deleted student"}
    resp = client.get("/api/students/S001", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Student not found"}


def test_delete_revokes_student_sessions(client, admin_headers, student_headers):
    assert client.get("/api/profile", headers=student_headers).status_code == 200
    client.delete("/api/students/S001", headers=admin_headers)
    assert client.get("/api/profile", headers=student_headers).status_code == 401


def test_search_students(client, admin_headers, student):
    other = dict(STUDENT, fullname="Zoe Q", studentNo="S002", idNumber="0001015800086", email="zoe@x.com")
    client.post("/api/students", json=other, headers=admin_headers)
    assert [s["studentNo"] for s in client.get("/api/students", headers=admin_headers).json()] == ["S001", "S002"]
    found = client.get("/api/students", params={"q": "zoe"}, headers=admin_headers).json()
    assert [s["studentNo"] for s in found] == ["S002"]


def test_round_trip_matches_submission(client, admin_headers):
    body = dict(
        STUDENT,
        enrollmentDate="2024-02-01",
        registrationTimestamp="2024-01-15 08:00:00",
        courseSummary="Custom note",
    )
    client.post("/api/students", json=body, headers=admin_headers)
    fetched = client.get("/api/students/S001", headers=admin_headers).json()
    assert fetched["enrollmentDate"] == "2024-02-01"
    assert fetched["registrationTimestamp"] == "2024-01-15 08:00:00"
    assert fetched["courseSummary"] == "Custom note"
    assert fetched["email"] == "a@x.com"


def test_student_sees_only_own_record(client, admin_headers, student_headers):
    other = dict(STUDENT, studentNo="S002", idNumber="0001015800086", email="other@x.com")
    client.post("/api/students", json=other, headers=admin_headers)
    assert client.get("/api/students/S001", headers=student_headers).status_code == 200
    resp = client.get("/api/students/S002", headers=student_headers)
    assert resp.status_code == 403
    assert resp.json()["error"] == "Not authorized for this record"


def test_student_cannot_use_admin_routes(client, student_headers):
    assert client.get("/api/students", headers=student_headers).status_code == 403
    resp = client.post("/api/students", json=dict(STUDENT, studentNo="S009"), headers=student_headers)
    assert resp.status_code == 403
    assert client.delete("/api/students/S001", headers=student_headers).status_code == 403


def test_profile_returns_logged_in_student(client, student_headers, admin_headers):
    resp = client.get("/api/profile", headers=student_headers)
    assert resp.status_code == 200
    assert resp.json()["studentNo"] == "S001"
    assert client.get("/api/profile", headers=admin_headers).status_code == 403


def test_requires_authentication(client, student):
    client.cookies.clear()
    resp = client.get("/api/students")
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "error": "Missing token"}


def test_role_gate_with_overridden_identity(client):
    from app.common.deps import CurrentUser, get_current_user
    from app.main import app

    app.dependency_overrides[get_current_user] = lambda: CurrentUser(
        id=99, email="ops@example.com", role="admin", fullname="Ops", session_id="test"
    )
    try:
        resp = client.get("/api/students")
        assert resp.status_code == 200
        assert resp.json() == []
    finally:
        app.dependency_overrides.clear()
