import os
from datetime import datetime

os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BLOB_BACKEND"] = "local"

import pytest
from fastapi.testclient import TestClient

from api.dependencies.database import get_store
from api.main import app
from clients.blob_store import LocalBlobStore
from database.db import Base, SessionLocal, engine
from database.models.research_models import Researcher, ResearchTopic

PDF_BYTES = b"%PDF-1.4\n% test document\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture
def client(blob_store):
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_store] = lambda: blob_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def topics(client):
    with SessionLocal() as db:
        rows = [
            ResearchTopic(name="Artificial Intelligence", description="AI"),
            ResearchTopic(name="Bioinformatics", description=None),
            ResearchTopic(name="Cybersecurity", description="Security"),
        ]
        db.add_all(rows)
        db.commit()
        return {t.name: t.id for t in rows}


@pytest.fixture
def make_researcher(client):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        payload = {
            "full_name": f"Researcher {n}",
            "student_id": f"S{n:04d}",
            "phone_number": f"555000{n:04d}",
            "email": f"researcher{n}@example.edu",
        }
        payload.update(overrides)
        r = client.post("/api/researchers", json=payload)
        assert r.status_code == 201, r.text
        return r.json()

    return _make


@pytest.fixture
def make_paper(client):
    def _make(researcher_id, topic_id, title="A Study", file_bytes=None, filename="paper.pdf", **fields):
        data = {"title": title, "researcher_id": str(researcher_id), "topic_id": str(topic_id)}
        data.update({k: str(v) for k, v in fields.items()})
        files = None
        if file_bytes is not None:
            files = {"file": (filename, file_bytes, "application/pdf")}
        r = client.post("/api/papers", data=data, files=files)
        assert r.status_code == 201, r.text
        return r.json()

    return _make


def stored_count(researcher_id):
    with SessionLocal() as db:
        researcher = db.get(Researcher, researcher_id)
        return None if researcher is None else researcher.research_papers_count


PAST = datetime(2000, 1, 1, 0, 0, 0)


def backdate(model, row_id):
    """Pins updated_at far in the past so a refresh is visible despite 1s clock resolution."""
    with SessionLocal() as db:
        row = db.get(model, row_id)
        row.updated_at = PAST
        db.commit()


def stored_updated_at(model, row_id):
    with SessionLocal() as db:
        return db.get(model, row_id).updated_at
