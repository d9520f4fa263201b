"""Tests for student CRUD and statistics."""

import pytest


def _student_payload(**overrides):
    payload = {
        "student_number": "STU-2001",
        "first_name": "Amara",
        "last_name": "Okafor",
        "gender": "FEMALE",
        "email": "Amara.Okafor@Example.edu",
        "course": "Science",
        "date_of_birth": "2010-03-14",
    }
    payload.update(overrides)
    return payload


class TestCreateStudent:
    def test_create(self, client):
        resp = client.post("/api/students/", json=_student_payload())
        assert resp.status_code == 201
        data = resp.json()
        assert data["id"]
        assert data["email"] == "amara.okafor@example.edu"
        assert data["status"] == "ACTIVE"
        assert data["gender"] == "FEMALE"
        assert data["date_of_birth"] == "2010-03-14"

    def test_duplicate_email(self, client):
        client.post("/api/students/", json=_student_payload())
        resp = client.post("/api/students/", json=_student_payload(student_number="STU-2002"))
        assert resp.status_code == 409
        assert resp.json()["code"] == "STUDENT_EXISTS"

    def test_duplicate_student_number(self, client):
        client.post("/api/students/", json=_student_payload())
        resp = client.post("/api/students/", json=_student_payload(email="other@example.edu"))
        assert resp.status_code == 409

    @pytest.mark.parametrize("field,value", [
        ("first_name", "A"),
        ("first_name", "R2-D2"),
        ("email", "not-an-email"),
        ("phone", "abc"),
        ("status", "EXPELLED"),
    ])
    def test_validation(self, client, field, value):
        resp = client.post("/api/students/", json=_student_payload(**{field: value}))
        assert resp.status_code == 422


class TestReadStudents:
    def test_get_and_404(self, client, make_student):
        student = make_student()
        assert client.get(f"/api/students/{student.id}").json()["student_number"] == "STU-0001"

        resp = client.get("/api/students/unknown")
        assert resp.status_code == 404
        assert resp.json()["code"] == "STUDENT_NOT_FOUND"

    def test_search_and_status_filter(self, client, make_student):
        make_student("STU-1", first_name="Amara", last_name="Okafor")
        make_student("STU-2", first_name="Liam", last_name="Novak", status="GRADUATED")
        make_student("STU-3", first_name="Priya", last_name="Raman")

        names = [s["first_name"] for s in client.get("/api/students/", params={"q": "nova"}).json()]
        assert names == ["Liam"]

        graduated = client.get("/api/students/", params={"status": "GRADUATED"}).json()
        assert [s["student_number"] for s in graduated] == ["STU-2"]

    def test_search_treats_wildcards_literally(self, client, make_student):
        make_student("STU-1", first_name="Amara")
        assert client.get("/api/students/", params={"q": "%"}).json() == []

    def test_limit(self, client, make_student):
        for i in range(3):
            make_student(f"STU-{i}")
        assert len(client.get("/api/students/", params={"limit": 2}).json()) == 2

    def test_stats(self, client, make_student):
        make_student("STU-1", course="Science")
        make_student("STU-2", course="Science", status="INACTIVE")
        make_student("STU-3", course=None, gender="FEMALE")

        data = client.get("/api/students/stats").json()
        assert data["total"] == 3
        assert data["male"] == 2
        assert data["female"] == 1
        assert data["by_status"] == {"ACTIVE": 2, "INACTIVE": 1, "GRADUATED": 0, "SUSPENDED": 0}
        assert data["by_gender"] == {"MALE": 2, "FEMALE": 1}
        assert data["by_course"] == {"Science": 2, "Unassigned": 1}


class TestUpdateDeleteStudent:
    def test_patch_changes_only_sent_fields(self, client, make_student):
        student = make_student(phone="+15551234567")
        resp = client.patch(f"/api/students/{student.id}", json={"course": "Arts", "status": "INACTIVE"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["course"] == "Arts"
        assert data["status"] == "INACTIVE"
        assert data["phone"] == "+15551234567"

    def test_patch_email_conflict(self, client, make_student):
        make_student("STU-1")
        other = make_student("STU-2")
        resp = client.patch(f"/api/students/{other.id}", json={"email": "stu-1@example.edu"})
        assert resp.status_code == 409

    def test_delete_cascades_grades(self, client, make_student):
        student = make_student()
        client.post("/api/grading/", json={
            "student_id": student.id, "subject": "Math", "assessment_type": "Quiz",
            "score": 5, "max_score": 10, "date": "2025-03-01T00:00:00",
        })

        assert client.delete(f"/api/students/{student.id}").status_code == 204
        assert client.get(f"/api/students/{student.id}").status_code == 404
        assert client.get("/api/grading/").json() == []

    def test_delete_cascades_fees(self, client, make_student):
        student = make_student()
        client.post("/api/fees/", json={"student_id": student.id, "amount": 250, "due_date": "2025-04-01"})

        assert client.delete(f"/api/students/{student.id}").status_code == 204
        assert client.get("/api/fees/").json() == []


def test_suspend_student(client, make_student):
    student = make_student()
    resp = client.patch(f"/api/students/{student.id}", json={"status": "SUSPENDED"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "SUSPENDED"

    suspended = client.get("/api/students/", params={"status": "SUSPENDED"}).json()
    assert [s["id"] for s in suspended] == [student.id]
    assert client.get("/api/students/stats").json()["by_status"]["SUSPENDED"] == 1
