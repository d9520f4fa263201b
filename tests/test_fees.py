"""Tests for student fees."""

from datetime import date


def _fee(client, student_id, **overrides):
    body = {"student_id": student_id, "amount": 1200.5, "due_date": "2025-04-01"}
    body.update(overrides)
    return client.post("/api/fees/", json=body)


class TestFees:
    def test_create_fee(self, client, make_student):
        student = make_student(first_name="Maya", last_name="Perez")
        resp = _fee(client, student.id, description="Spring tuition")
        assert resp.status_code == 201
        data = resp.json()
        assert data["amount"] == 1200.5
        assert data["status"] == "PENDING"
        assert data["payment_date"] is None
        assert data["student_name"] == "Maya Perez"
        assert data["description"] == "Spring tuition"

    def test_create_for_unknown_student(self, client):
        resp = _fee(client, "missing")
        assert resp.status_code == 404
        assert resp.json()["code"] == "STUDENT_NOT_FOUND"

    def test_amount_must_be_positive(self, client, make_student):
        student = make_student()
        assert _fee(client, student.id, amount=0).status_code == 422

    def test_invalid_status(self, client, make_student):
        student = make_student()
        assert _fee(client, student.id, status="WAIVED").status_code == 422

    def test_paid_without_date_is_stamped_today(self, client, make_student):
        student = make_student()
        resp = _fee(client, student.id, status="PAID")
        assert resp.json()["payment_date"] == date.today().isoformat()

        resp = _fee(client, student.id, status="PAID", payment_date="2025-03-30")
        assert resp.json()["payment_date"] == "2025-03-30"

    def test_list_filters_and_order(self, client, make_student):
        ada = make_student("STU-1")
        bob = make_student("STU-2")
        _fee(client, ada.id, due_date="2025-01-01")
        _fee(client, ada.id, due_date="2025-06-01", status="OVERDUE")
        _fee(client, bob.id, due_date="2025-03-01")

        rows = client.get("/api/fees/", params={"student_id": ada.id}).json()
        assert [r["due_date"] for r in rows] == ["2025-06-01", "2025-01-01"]

        rows = client.get("/api/fees/", params={"status": "OVERDUE"}).json()
        assert len(rows) == 1
        assert rows[0]["student_id"] == ada.id

    def test_mark_paid(self, client, make_student):
        student = make_student()
        fee_id = _fee(client, student.id).json()["id"]

        resp = client.patch(f"/api/fees/{fee_id}", json={"status": "PAID"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "PAID"
        assert resp.json()["payment_date"] == date.today().isoformat()
        assert resp.json()["amount"] == 1200.5

    def test_get_update_delete_missing(self, client):
        for method in ("get", "delete"):
            resp = getattr(client, method)("/api/fees/999")
            assert resp.status_code == 404
            assert resp.json()["code"] == "FEE_NOT_FOUND"
        assert client.patch("/api/fees/999", json={"amount": 5}).status_code == 404

    def test_delete_fee(self, client, make_student):
        student = make_student()
        fee_id = _fee(client, student.id).json()["id"]
        assert client.delete(f"/api/fees/{fee_id}").status_code == 204
        assert client.get(f"/api/fees/{fee_id}").status_code == 404


def test_student_includes_fees(client, make_student):
    student = make_student()
    _fee(client, student.id, due_date="2025-01-01")
    _fee(client, student.id, due_date="2025-02-01")

    data = client.get(f"/api/students/{student.id}").json()
    assert [f["due_date"] for f in data["fees"]] == ["2025-02-01", "2025-01-01"]

    listed = client.get("/api/students/").json()
    assert len(listed[0]["fees"]) == 2
