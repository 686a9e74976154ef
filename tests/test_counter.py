# File: tests/test_counter.py
from unittest.mock import patch

from conftest import stored_count
from database.db import SessionLocal
from database.models.research_models import Researcher
from services.counter_service import recount, recount_all


def test_count_follows_create_and_delete(client, topics, make_researcher, make_paper):
    researcher = make_researcher()
    topic = topics["Artificial Intelligence"]

    papers = [make_paper(researcher["id"], topic, title=f"P{i}") for i in range(3)]
    assert stored_count(researcher["id"]) == 3
    assert client.get(f"/api/researchers/{researcher['id']}").json()["research_papers_count"] == 3

    client.delete(f"/api/papers/{papers[0]['id']}")
    assert stored_count(researcher["id"]) == 2


def test_reassignment_recounts_old_and_new_researcher(client, topics, make_researcher, make_paper):
    a = make_researcher()
    b = make_researcher()
    topic = topics["Cybersecurity"]
    paper = make_paper(a["id"], topic, title="Moving")
    make_paper(a["id"], topic, title="Staying")
    assert stored_count(a["id"]) == 2
    assert stored_count(b["id"]) == 0

    r = client.put(f"/api/papers/{paper['id']}", json={"researcher_id": b["id"]})
    assert r.status_code == 200
    assert r.json()["researcher_name"] == b["full_name"]

    assert stored_count(a["id"]) == 1
    assert stored_count(b["id"]) == 1


def test_client_supplied_count_is_overwritten_by_paper_mutation(client, topics, make_researcher, make_paper):
    researcher = make_researcher(research_papers_count=42)
    assert stored_count(researcher["id"]) == 42

    make_paper(researcher["id"], topics["Cybersecurity"])
    assert stored_count(researcher["id"]) == 1


def test_update_without_researcher_change_skips_recount(client, topics, make_researcher, make_paper):
    researcher = make_researcher()
    paper = make_paper(researcher["id"], topics["Cybersecurity"])

    with patch("services.paper_service.recount_many") as mock_recount:
        r = client.put(f"/api/papers/{paper['id']}", json={"researcher_id": researcher["id"], "title": "Same owner"})
        assert r.status_code == 200
        mock_recount.assert_not_called()


def test_recount_failure_rolls_back_paper_insert(client, topics, make_researcher):
    from sqlalchemy.exc import OperationalError

    researcher = make_researcher()
    with patch("services.paper_service.recount", side_effect=OperationalError("UPDATE", {}, Exception("locked"))):
        r = client.post(
            "/api/papers",
            data={"title": "T", "researcher_id": str(researcher["id"]), "topic_id": str(topics["Cybersecurity"])},
        )
    assert r.status_code == 500
    assert client.get("/api/papers").json() == []
    assert stored_count(researcher["id"]) == 0


def test_recount_is_idempotent(client, topics, make_researcher, make_paper):
    researcher = make_researcher()
    make_paper(researcher["id"], topics["Cybersecurity"])
    make_paper(researcher["id"], topics["Bioinformatics"])

    with SessionLocal() as db:
        recount(db, researcher["id"])
        db.commit()
        first = db.get(Researcher, researcher["id"]).research_papers_count
        recount(db, researcher["id"])
        db.commit()
        db.expire_all()
        second = db.get(Researcher, researcher["id"]).research_papers_count

    assert first == second == 2


def test_recount_missing_researcher_is_noop(client):
    with SessionLocal() as db:
        recount(db, 4242)
        recount(db, None)
        db.commit()


def test_recount_all_repairs_drift(client, topics, make_researcher, make_paper):
    a = make_researcher()
    b = make_researcher()
    make_paper(a["id"], topics["Cybersecurity"])

    # Drift introduced outside the paper endpoints
    client.put(f"/api/researchers/{a['id']}", json={"research_papers_count": 7})
    client.put(f"/api/researchers/{b['id']}", json={"research_papers_count": 3})

    with SessionLocal() as db:
        assert recount_all(db) == 2

    assert stored_count(a["id"]) == 1
    assert stored_count(b["id"]) == 0
