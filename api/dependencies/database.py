# File: api/dependencies/database.py
from clients.blob_store import BlobStore, get_blob_store
from database.db import SessionLocal


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store() -> BlobStore:
    return get_blob_store()
