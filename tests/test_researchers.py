# File: tests/test_researchers.py
from conftest import PAST, backdate, stored_updated_at
from database.models.research_models import Researcher


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "database": "ok"}


def test_create_and_get_researcher(client):
    payload = {
        "full_name": "Ada Lovelace",
        "student_id": "STU-001",
        "phone_number": "0123456789",
        "email": "ada@example.edu",
    }
    r = client.post("/api/researchers", json=payload)
    assert r.status_code == 201
    body = r.json()
    assert body["id"] > 0
    assert body["full_name"] == "Ada Lovelace"
    assert body["research_papers_count"] == 0
    assert body["created_at"] is not None

    r = client.get(f"/api/researchers/{body['id']}")
    assert r.status_code == 200
    assert r.json()["student_id"] == "STU-001"


def test_get_missing_researcher_is_404(client):
    r = client.get("/api/researchers/9999")
    assert r.status_code == 404
    assert r.json()["detail"] == "Researcher not found"


def test_create_requires_fields(client):
    r = client.post("/api/researchers", json={"full_name": "No Id", "phone_number": "1"})
    assert r.status_code == 400

    r = client.post("/api/researchers", json={"full_name": "  ", "student_id": "X1", "phone_number": "1"})
    assert r.status_code == 400


def test_create_rejects_bad_email_and_negative_count(client):
    base = {"full_name": "A", "student_id": "X1", "phone_number": "1"}
    r = client.post("/api/researchers", json={**base, "email": "not-an-email"})
    assert r.status_code == 400

    r = client.post("/api/researchers", json={**base, "research_papers_count": -1})
    assert r.status_code == 400


def test_blank_email_is_stored_as_null(client):
    r = client.post(
        "/api/researchers",
        json={"full_name": "A", "student_id": "X1", "phone_number": "1", "email": ""},
    )
    assert r.status_code == 201
    assert r.json()["email"] is None


def test_duplicate_student_id_conflict(client, make_researcher):
    first = make_researcher(student_id="DUP-1", full_name="First")
    r = client.post(
        "/api/researchers",
        json={"full_name": "Second", "student_id": "DUP-1", "phone_number": "42"},
    )
    assert r.status_code == 409
    assert r.json()["detail"] == "Student ID already exists"

    r = client.get(f"/api/researchers/{first['id']}")
    assert r.json()["full_name"] == "First"
    assert len(client.get("/api/researchers").json()) == 1


def test_partial_update_changes_only_given_field(client, make_researcher):
    original = make_researcher(research_papers_count=3)
    backdate(Researcher, original["id"])
    r = client.put(f"/api/researchers/{original['id']}", json={"phone_number": "9999999999"})
    assert r.status_code == 200
    updated = r.json()

    assert updated["phone_number"] == "9999999999"
    assert not updated["updated_at"].startswith("2000-01-01")
    assert stored_updated_at(Researcher, original["id"]) > PAST
    for field in ("full_name", "student_id", "email", "research_papers_count", "created_at"):
        assert updated[field] == original[field]


def test_update_with_empty_patch_is_400(client, make_researcher):
    researcher = make_researcher()
    r = client.put(f"/api/researchers/{researcher['id']}", json={})
    assert r.status_code == 400
    assert r.json()["detail"] == "No fields to update"


def test_update_missing_researcher_is_404(client):
    r = client.put("/api/researchers/12345", json={"full_name": "Ghost"})
    assert r.status_code == 404


def test_update_to_taken_student_id_conflict(client, make_researcher):
    a = make_researcher(student_id="A-1")
    b = make_researcher(student_id="B-1")

    r = client.put(f"/api/researchers/{b['id']}", json={"student_id": "A-1"})
    assert r.status_code == 409

    # Re-sending your own student ID is not a conflict
    r = client.put(f"/api/researchers/{a['id']}", json={"student_id": "A-1"})
    assert r.status_code == 200


def test_update_rejects_null_required_field(client, make_researcher):
    researcher = make_researcher()
    r = client.put(f"/api/researchers/{researcher['id']}", json={"full_name": None})
    assert r.status_code == 400


def test_list_is_newest_first(client, make_researcher):
    ids = [make_researcher()["id"] for _ in range(3)]
    listed = [r["id"] for r in client.get("/api/researchers").json()]
    assert listed == list(reversed(ids))


def test_search_matches_any_field_case_insensitive(client, make_researcher):
    grace = make_researcher(full_name="Grace Hopper", student_id="NAVY-7", phone_number="111", email="grace@navy.mil")
    make_researcher(full_name="Alan Turing", student_id="BLETCH-1", phone_number="222", email=None)

    def search(term):
        return [r["id"] for r in client.get("/api/researchers", params={"search": term}).json()]

    assert search("hopper") == [grace["id"]]
    assert search("navy-") == [grace["id"]]
    assert search("111") == [grace["id"]]
    assert search("NAVY.MIL") == [grace["id"]]
    assert len(search("")) == 2
    assert search("nobody") == []


def test_search_treats_wildcards_literally(client, make_researcher):
    make_researcher(full_name="Percent Person")
    assert client.get("/api/researchers", params={"search": "%"}).json() == []


def test_delete_researcher(client, make_researcher):
    researcher = make_researcher()
    r = client.delete(f"/api/researchers/{researcher['id']}")
    assert r.status_code == 200
    assert r.json() == {"message": "Researcher deleted successfully"}

    assert client.get(f"/api/researchers/{researcher['id']}").status_code == 404
    assert client.delete(f"/api/researchers/{researcher['id']}").status_code == 404
