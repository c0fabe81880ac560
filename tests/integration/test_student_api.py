"""Integration tests for Student API endpoints via TestClient."""

from canteen.domain import CAMPUS_EMAIL_DOMAIN


def as_student(student_id):
    return {"X-Actor-Id": student_id, "X-Actor-Role": "student"}


class TestStudentAccount:
    def test_register_and_read_profile(self, client, register_student):
        student_id = register_student(name="Asha Verma", roll_number="102103001")

        response = client.get("/students/me", headers=as_student(student_id))
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Asha Verma"
        assert data["roll_number"] == "102103001"
        assert data["email"].endswith(f"@{CAMPUS_EMAIL_DOMAIN}")

    def test_off_campus_email(self, client):
        response = client.post(
            "/students",
            json={
                "name": "Asha Verma",
                "email": "asha@gmail.com",
                "roll_number": "102103001",
                "hostel": "J",
                "phone": "9876543210",
                "year": 2,
            },
        )
        assert response.status_code == 400
        assert "email" in response.json()["error"]

    def test_duplicate_roll_number(self, client, register_student):
        register_student(roll_number="102103001")
        response = client.post(
            "/students",
            json={
                "name": "Second",
                "email": f"second@{CAMPUS_EMAIL_DOMAIN}",
                "roll_number": "102103001",
                "hostel": "A",
                "phone": "9876543211",
                "year": 1,
            },
        )
        assert response.status_code == 400
        assert "roll_number" in response.json()["error"]
        assert "email" not in response.json()["error"]

    def test_update_profile(self, client, register_student):
        student_id = register_student()

        response = client.put("/students/me", json={"hostel": "PG", "year": 3}, headers=as_student(student_id))
        assert response.status_code == 200
        assert response.json()["hostel"] == "PG"
        assert response.json()["year"] == 3

    def test_missing_headers(self, client):
        assert client.get("/students/me").status_code == 401

    def test_invalid_role(self, client):
        response = client.get("/students/me", headers={"X-Actor-Id": "x", "X-Actor-Role": "admin"})
        assert response.status_code == 401

    def test_unknown_student(self, client):
        response = client.get("/students/me", headers=as_student("no-such-student"))
        assert response.status_code == 404
