"""Tests for grade CRUD, grade configs and the student report endpoint."""

import pytest


def _grade_payload(student_id, **overrides):
    payload = {
        "student_id": student_id,
        "subject": "Mathematics",
        "assessment_type": "Quiz",
        "score": 18,
        "max_score": 20,
        "weight": 1,
        "date": "2025-03-01T09:00:00",
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# Grades
# ---------------------------------------------------------------------------

class TestGrades:
    def test_create_grade(self, client, make_student):
        student = make_student("STU-1", first_name="Amara", last_name="Okafor")
        resp = client.post("/api/grading/", json=_grade_payload(student.id))
        assert resp.status_code == 201
        data = resp.json()
        assert data["percentage"] == 90
        assert data["student_name"] == "Amara Okafor"
        assert data["weight"] == 1

    def test_create_grade_unknown_student(self, client):
        resp = client.post("/api/grading/", json=_grade_payload("missing"))
        assert resp.status_code == 404
        assert resp.json()["code"] == "STUDENT_NOT_FOUND"

    @pytest.mark.parametrize("field,value", [
        ("score", -1),
        ("max_score", 0),
        ("weight", 0),
        ("subject", ""),
    ])
    def test_create_grade_validation(self, client, make_student, field, value):
        student = make_student()
        resp = client.post("/api/grading/", json=_grade_payload(student.id, **{field: value}))
        assert resp.status_code == 422

    def test_list_grades_filtered_newest_first(self, client, make_student):
        ada = make_student("STU-1")
        bob = make_student("STU-2")
        client.post("/api/grading/", json=_grade_payload(ada.id, date="2025-03-01T00:00:00"))
        client.post("/api/grading/", json=_grade_payload(ada.id, date="2025-03-09T00:00:00"))
        client.post("/api/grading/", json=_grade_payload(ada.id, subject="Art"))
        client.post("/api/grading/", json=_grade_payload(bob.id))

        resp = client.get("/api/grading/", params={"student_id": ada.id, "subject": "Mathematics"})
        assert resp.status_code == 200
        dates = [g["date"][:10] for g in resp.json()]
        assert dates == ["2025-03-09", "2025-03-01"]

    def test_list_grades_inverted_range(self, client):
        resp = client.get("/api/grading/", params={
            "start_date": "2025-05-01T00:00:00",
            "end_date": "2025-04-01T00:00:00",
        })
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_FILTER"

    def test_list_grades_mixed_timezone_range(self, client, make_student):
        student = make_student()
        client.post("/api/grading/", json=_grade_payload(student.id, date="2024-06-01T12:00:00+02:00"))

        resp = client.get("/api/grading/", params={
            "start_date": "2024-06-01T10:00:00Z", "end_date": "2024-06-30T00:00:00",
        })
        assert resp.status_code == 200
        assert len(resp.json()) == 1
        assert resp.json()[0]["date"].startswith("2024-06-01T10:00:00")

    def test_update_grade(self, client, make_student):
        student = make_student()
        grade_id = client.post("/api/grading/", json=_grade_payload(student.id)).json()["id"]

        resp = client.put(f"/api/grading/{grade_id}", json={"score": 10, "remarks": "Re-marked"})
        assert resp.status_code == 200
        assert resp.json()["percentage"] == 50
        assert resp.json()["remarks"] == "Re-marked"

    def test_update_grade_rejects_null_required_field(self, client, make_student):
        student = make_student()
        grade_id = client.post("/api/grading/", json=_grade_payload(student.id)).json()["id"]

        resp = client.put(f"/api/grading/{grade_id}", json={"score": None})
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_GRADE"

    def test_update_missing_grade(self, client):
        resp = client.put("/api/grading/999", json={"score": 1})
        assert resp.status_code == 404
        assert resp.json()["code"] == "GRADE_NOT_FOUND"

    def test_delete_grade(self, client, make_student):
        student = make_student()
        grade_id = client.post("/api/grading/", json=_grade_payload(student.id)).json()["id"]

        assert client.delete(f"/api/grading/{grade_id}").status_code == 204
        assert client.delete(f"/api/grading/{grade_id}").status_code == 404


# ---------------------------------------------------------------------------
# Grade configs
# ---------------------------------------------------------------------------

class TestGradeConfig:
    def test_upsert_creates_then_replaces(self, client):
        resp = client.post("/api/grading/config", json={
            "subject": "English",
            "passingScore": 50,
            "gradingScale": {"A+": 95, "A": 85, "B": 70, "C": 55, "F": 0},
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["passingScore"] == 50
        assert [e["letter"] for e in data["gradingScale"]] == ["A+", "A", "B", "C", "F"]
        assert data["gradingScale"][0]["minScore"] == 95

        resp = client.post("/api/grading/config", json={
            "subject": "English",
            "grading_scale": [["Pass", 50], ["Fail", 0]],
        })
        assert resp.status_code == 200
        assert resp.json()["id"] == data["id"]

        configs = client.get("/api/grading/config").json()
        assert len(configs) == 1
        assert [e["letter"] for e in configs[0]["gradingScale"]] == ["Pass", "Fail"]

    @pytest.mark.parametrize("scale", [
        [],
        [["A", 90], ["A", 0]],
        [["A", 90], ["B", 80]],
    ])
    def test_upsert_rejects_bad_scale(self, client, scale):
        resp = client.post("/api/grading/config", json={"subject": "Math", "gradingScale": scale})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Student report
# ---------------------------------------------------------------------------

class TestStudentReport:
    def test_report_shape_and_values(self, client, make_student):
        student = make_student("STU-1", first_name="Amara", last_name="Okafor")
        client.post("/api/grading/config", json={
            "subject": "English",
            "gradingScale": [["Distinction", 85], ["Pass", 50], ["Fail", 0]],
        })
        client.post("/api/grading/", json=_grade_payload(
            student.id, subject="Mathematics", score=90, max_score=100, weight=1,
        ))
        client.post("/api/grading/", json=_grade_payload(
            student.id, subject="Mathematics", assessment_type="Exam",
            score=70, max_score=100, weight=1, date="2025-03-10T09:00:00",
        ))
        client.post("/api/grading/", json=_grade_payload(
            student.id, subject="English", score=45, max_score=50, date="2025-03-05T09:00:00",
        ))
        client.post("/api/attendance/", json={
            "student_id": student.id, "subject": "Mathematics",
            "date": "2025-03-01T00:00:00", "status": "Present",
        })
        client.post("/api/attendance/", json={
            "student_id": student.id, "subject": "Mathematics",
            "date": "2025-03-02T00:00:00", "status": "Absent",
        })

        resp = client.get(f"/api/grading/report/{student.id}")
        assert resp.status_code == 200
        data = resp.json()

        assert data["student"]["studentNumber"] == "STU-1"
        assert data["student"]["firstName"] == "Amara"
        assert data["totalSubjects"] == 2
        assert data["totalAssessments"] == 3
        assert "generatedAt" in data

        math, english = data["subjectReports"]
        assert math["subject"] == "Mathematics"
        assert math["average"] == pytest.approx(80)
        assert math["gradeLetter"] == "B"
        assert math["config"] is None
        assert list(math["groupedByAssessmentType"]) == ["Quiz", "Exam"]
        assert math["lastAssessmentDate"].startswith("2025-03-10")

        assert english["gradeLetter"] == "Distinction"
        assert english["config"]["subject"] == "English"

        assert data["overallAverage"] == pytest.approx(85)
        assert data["attendanceSummary"] == {
            "total": 2, "present": 1, "absent": 1, "late": 0, "excused": 0,
            "attendanceRate": 50.0,
        }
        assert len(data["attendanceRecords"]) == 2

    def test_report_date_range(self, client, make_student):
        student = make_student()
        client.post("/api/grading/", json=_grade_payload(student.id, date="2025-01-15T00:00:00"))
        client.post("/api/grading/", json=_grade_payload(
            student.id, score=10, date="2025-03-15T00:00:00",
        ))

        resp = client.get(f"/api/grading/report/{student.id}", params={
            "start_date": "2025-03-01T00:00:00", "end_date": "2025-03-31T00:00:00",
        })
        assert resp.status_code == 200
        assert resp.json()["totalAssessments"] == 1
        assert resp.json()["overallAverage"] == pytest.approx(50)

    def test_report_mixed_timezone_range(self, client, make_student):
        student = make_student()
        client.post("/api/grading/", json=_grade_payload(student.id, date="2024-06-01T00:00:00Z"))

        resp = client.get(f"/api/grading/report/{student.id}", params={
            "start_date": "2024-01-01T00:00:00Z", "end_date": "2024-12-31T00:00:00",
        })
        assert resp.status_code == 200
        assert resp.json()["totalAssessments"] == 1

    def test_report_empty_student(self, client, make_student):
        student = make_student()
        data = client.get(f"/api/grading/report/{student.id}").json()
        assert data["subjectReports"] == []
        assert data["overallAverage"] == 0
        assert data["attendanceSummary"]["attendanceRate"] == 0

    def test_report_unknown_student(self, client):
        resp = client.get("/api/grading/report/nope")
        assert resp.status_code == 404
        assert resp.json()["code"] == "STUDENT_NOT_FOUND"

    def test_report_inverted_range(self, client, make_student):
        student = make_student()
        resp = client.get(f"/api/grading/report/{student.id}", params={
            "start_date": "2025-05-01T00:00:00", "end_date": "2025-04-01T00:00:00",
        })
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_FILTER"
