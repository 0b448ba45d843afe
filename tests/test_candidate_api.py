"""HTTP tests for the candidate endpoints and the response envelope."""

from datetime import datetime

from sqlalchemy.exc import OperationalError

from candidate_tracker.repositories.candidate_repository import CandidateRepository

BASE = "/api/candidates"


def create(client, **overrides):
    body = {"name": "Jane Roe", "age": 29, "email": "Jane.Roe@Example.com"}
    body.update(overrides)
    return client.post(BASE, json=body)


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["message"] == "Candidate Tracker API is running"
    assert payload["timestamp"].endswith("Z")


def test_create_normalizes_email_and_keeps_status(client):
    response = create(client, status="Interviewing")

    assert response.status_code == 201
    payload = response.json()
    assert payload["success"] is True
    assert payload["message"] == "Candidate created successfully"
    data = payload["data"]
    assert data["email"] == "jane.roe@example.com"
    assert data["status"] == "Interviewing"
    assert isinstance(data["id"], int)
    assert data["created_at"] == data["updated_at"]
    assert data["phone"] is None


def test_create_defaults_status_to_applied(client):
    assert create(client).json()["data"]["status"] == "Applied"


def test_list_returns_count_and_newest_first(client):
    assert client.get(BASE).json() == {"success": True, "count": 0, "data": []}

    create(client, email="first@example.com")
    create(client, email="second@example.com")

    payload = client.get(BASE).json()
    assert payload["count"] == 2
    assert [c["email"] for c in payload["data"]] == ["second@example.com", "first@example.com"]


def test_get_one(client):
    candidate_id = create(client).json()["data"]["id"]

    response = client.get(f"{BASE}/{candidate_id}")

    assert response.status_code == 200
    assert response.json()["data"]["id"] == candidate_id
    assert "message" not in response.json()


def test_get_missing_returns_404(client):
    response = client.get(f"{BASE}/999")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Candidate not found"}


def test_get_non_integer_id_is_a_validation_failure(client):
    response = client.get(f"{BASE}/abc")

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Validation failed",
        "details": [{"field": "id", "message": "Invalid candidate ID"}],
    }


def test_create_validation_failure_lists_every_field(client):
    response = client.post(BASE, json={"name": "J", "age": 151, "phone": "abc"})

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"] == "Validation failed"
    assert [d["field"] for d in payload["details"]] == ["name", "age", "email", "phone"]


def test_age_boundaries(client):
    assert create(client, age=1, email="a1@example.com").status_code == 201
    assert create(client, age=150, email="a150@example.com").status_code == 201
    assert create(client, age=0, email="a0@example.com").status_code == 400
    assert create(client, age=151, email="a151@example.com").status_code == 400
    assert create(client, age="many", email="many@example.com").status_code == 400


def test_duplicate_email_is_rejected(client):
    assert create(client).status_code == 201

    response = create(client, name="Jane Again", email="  JANE.ROE@example.com ")

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Email already exists",
        "message": "A candidate with this email already exists",
    }
    assert client.get(BASE).json()["count"] == 1


def test_status_update_leaves_other_fields_untouched(client):
    created = create(client, skills="python, sql", phone="555.123.4567").json()["data"]

    response = client.put(f"{BASE}/{created['id']}", json={"status": "Hired"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "Candidate updated successfully"
    data = payload["data"]
    assert data["status"] == "Hired"
    for field in ("name", "age", "email", "phone", "skills", "experience", "applied_position", "created_at"):
        assert data[field] == created[field]
    assert datetime.fromisoformat(data["updated_at"]) > datetime.fromisoformat(created["updated_at"])


def test_update_missing_candidate_returns_404(client):
    response = client.put(f"{BASE}/999", json={"status": "Hired"})

    assert response.status_code == 404
    assert response.json()["error"] == "Candidate not found"


def test_update_to_taken_email_returns_400(client):
    create(client, email="taken@example.com")
    other = create(client, email="other@example.com").json()["data"]

    response = client.put(f"{BASE}/{other['id']}", json={"email": "Taken@Example.com"})

    assert response.status_code == 400
    assert response.json()["error"] == "Email already exists"
    assert response.json()["message"] == "Another candidate with this email already exists"
    assert client.get(f"{BASE}/{other['id']}").json()["data"]["email"] == "other@example.com"


def test_update_validation_reports_id_and_body(client):
    response = client.put(f"{BASE}/zero", json={"age": 0})

    assert response.status_code == 400
    assert response.json()["details"] == [
        {"field": "id", "message": "Invalid candidate ID"},
        {"field": "age", "message": "Age must be between 1 and 150"},
    ]


def test_delete_returns_deleted_record(client):
    created = create(client).json()["data"]

    response = client.delete(f"{BASE}/{created['id']}")

    assert response.status_code == 200
    assert response.json()["message"] == "Candidate deleted successfully"
    assert response.json()["data"] == created
    assert client.get(f"{BASE}/{created['id']}").status_code == 404


def test_delete_missing_returns_404(client):
    response = client.delete(f"{BASE}/999")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Candidate not found"}


def test_ids_beyond_the_id_column_range_are_not_found(client):
    huge = "99999999999999999999"

    responses = [
        client.get(f"{BASE}/{huge}"),
        client.put(f"{BASE}/{huge}", json={"status": "Hired"}),
        client.delete(f"{BASE}/{huge}"),
    ]

    for response in responses:
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Candidate not found"}


def test_malformed_json_is_a_validation_failure(client):
    response = client.post(BASE, content=b"{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed"
    assert response.json()["details"] == [{"field": "body", "message": "Request body must be valid JSON"}]


def test_unknown_route_returns_404_envelope(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Route not found"}


def test_wrong_method_returns_405_envelope(client):
    response = client.patch(f"{BASE}/1", json={})

    assert response.status_code == 405
    assert response.json() == {"success": False, "error": "Method not allowed"}


def test_store_failure_hides_details_outside_development(client, monkeypatch):
    async def broken(self):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(CandidateRepository, "list_all", broken)

    response = client.get(BASE)

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Failed to fetch candidates",
        "message": "Something went wrong",
    }


def test_store_failure_exposes_details_in_development(make_client, monkeypatch):
    client = make_client(ENVIRONMENT="development")

    async def broken(self, candidate_id):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(CandidateRepository, "get_by_id", broken)

    response = client.get(f"{BASE}/1")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to fetch candidate"
    assert response.json()["message"] == "connection refused"


def test_unhandled_error_returns_generic_500(client, monkeypatch):
    async def boom(self):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(CandidateRepository, "list_all", boom)

    response = client.get(BASE)

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Internal server error",
        "message": "Something went wrong",
    }


def test_root(client):
    payload = client.get("/").json()

    assert payload["success"] is True
    assert payload["service"] == "Candidate Tracker"
