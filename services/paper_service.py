# services/paper_service.py
import logging
import os
import time
from datetime import datetime, timezone
from typing import Any, BinaryIO, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.models.research_models import PaperCreate, PaperUpdate
from clients.blob_store import BlobStore
from database.models.research_models import Researcher, ResearchPaper, ResearchTopic
from services.counter_service import recount, recount_many
from services.errors import FileTooLargeError, NotFoundError, StorageError, ValidationError
from utils.sanitization import safe_filename

logger = logging.getLogger(__name__)

FILE_URL_PREFIX = "/api/files/"
PDF_CONTENT_TYPE = "application/pdf"
PDF_MAGIC = b"%PDF-"
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

PAPER_COLUMNS = [c.name for c in ResearchPaper.__table__.columns]


def _joined_select():
    # Outer joins keep papers whose researcher was deleted visible
    return (
        select(
            ResearchPaper,
            ResearchTopic.name.label("topic_name"),
            Researcher.full_name.label("researcher_name"),
        )
        .outerjoin(ResearchTopic, ResearchPaper.topic_id == ResearchTopic.id)
        .outerjoin(Researcher, ResearchPaper.researcher_id == Researcher.id)
    )


def _row_to_dict(row) -> Dict[str, Any]:
    paper, topic_name, researcher_name = row
    data = {name: getattr(paper, name) for name in PAPER_COLUMNS}
    data["topic_name"] = topic_name
    data["researcher_name"] = researcher_name
    return data


def list_papers(db: Session, topic_id: Optional[int] = None, researcher_id: Optional[int] = None) -> List[Dict[str, Any]]:
    """Papers joined with topic and researcher names, newest first. Filters AND together."""
    stmt = _joined_select()
    if topic_id is not None:
        stmt = stmt.where(ResearchPaper.topic_id == topic_id)
    if researcher_id is not None:
        stmt = stmt.where(ResearchPaper.researcher_id == researcher_id)
    stmt = stmt.order_by(ResearchPaper.created_at.desc(), ResearchPaper.id.desc())

    return [_row_to_dict(row) for row in db.execute(stmt).all()]


def get_paper(db: Session, paper_id: int) -> Dict[str, Any]:
    row = db.execute(_joined_select().where(ResearchPaper.id == paper_id)).first()
    if row is None:
        raise NotFoundError("Research paper not found")
    return _row_to_dict(row)


def _check_references(db: Session, researcher_id: Optional[int] = None, topic_id: Optional[int] = None) -> None:
    if researcher_id is not None and db.get(Researcher, researcher_id) is None:
        raise ValidationError(f"Researcher {researcher_id} does not exist")
    if topic_id is not None and db.get(ResearchTopic, topic_id) is None:
        raise ValidationError(f"Research topic {topic_id} does not exist")


def _upload_size(stream: BinaryIO) -> int:
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def validate_upload(upload, max_bytes: int = MAX_UPLOAD_BYTES) -> Optional[int]:
    """
    Returns the size of an acceptable PDF upload, or None when the part is
    missing or empty (treated as "no file").
    """
    if upload is None or not upload.filename:
        return None

    size = _upload_size(upload.file)
    if size == 0:
        return None

    filename = upload.filename.lower()
    if not filename.endswith(".pdf"):
        raise ValidationError("Only PDF files are supported")
    if size > max_bytes:
        raise FileTooLargeError(f"File too large (limit {max_bytes // (1024 * 1024)}MB)")

    head = upload.file.read(len(PDF_MAGIC))
    upload.file.seek(0)
    if head != PDF_MAGIC:
        raise ValidationError("Only PDF files are supported")

    return size


def build_file_key(researcher_id: int, filename: str) -> str:
    timestamp = int(time.time() * 1000)
    return f"papers/{researcher_id}/{timestamp}_{safe_filename(filename)}"


def file_key_from_url(file_url: str) -> str:
    if file_url.startswith(FILE_URL_PREFIX):
        return file_url[len(FILE_URL_PREFIX):]
    return file_url


def _discard_blob(store: BlobStore, key: str) -> None:
    try:
        store.delete(key)
    except Exception as e:
        logger.warning(f"Could not remove blob {key}: {type(e).__name__}: {e}")


def create_paper(db: Session, store: BlobStore, data: PaperCreate, upload=None) -> Dict[str, Any]:
    _check_references(db, researcher_id=data.researcher_id, topic_id=data.topic_id)
    size = validate_upload(upload, MAX_UPLOAD_BYTES)

    file_key = None
    file_url = file_name = file_size = None
    if size is not None:
        file_key = build_file_key(data.researcher_id, upload.filename)
        file_name = safe_filename(upload.filename)
        try:
            file_size = store.put(file_key, upload.file, PDF_CONTENT_TYPE, file_name)
        except Exception as e:
            raise StorageError(f"File upload failed for {file_key}: {e}") from e
        file_url = f"{FILE_URL_PREFIX}{file_key}"

    paper = ResearchPaper(
        title=data.title,
        researcher_id=data.researcher_id,
        topic_id=data.topic_id,
        publication_year=data.publication_year,
        journal_name=data.journal_name,
        abstract=data.abstract,
        file_url=file_url,
        file_name=file_name,
        file_size=file_size,
    )

    try:
        db.add(paper)
        db.flush()
        recount(db, paper.researcher_id)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        if file_key:
            _discard_blob(store, file_key)
        raise StorageError(f"Failed to create research paper: {e}") from e

    logger.info(f"Created paper {paper.id} for researcher {paper.researcher_id} (file={'yes' if file_key else 'no'})")
    return get_paper(db, paper.id)


def update_paper(db: Session, paper_id: int, patch: PaperUpdate) -> Dict[str, Any]:
    paper = db.get(ResearchPaper, paper_id)
    if paper is None:
        raise NotFoundError("Research paper not found")

    changes = patch.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No fields to update")

    _check_references(db, researcher_id=changes.get("researcher_id"), topic_id=changes.get("topic_id"))

    old_researcher_id = paper.researcher_id
    for field_name, value in changes.items():
        setattr(paper, field_name, value)
    paper.updated_at = datetime.now(timezone.utc)

    try:
        db.flush()
        if paper.researcher_id != old_researcher_id:
            recount_many(db, [old_researcher_id, paper.researcher_id])
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Failed to update research paper {paper_id}: {e}") from e

    logger.info(f"Updated paper {paper_id}: {sorted(changes)}")
    return get_paper(db, paper_id)


def delete_paper(db: Session, store: BlobStore, paper_id: int) -> None:
    paper = db.get(ResearchPaper, paper_id)
    if paper is None:
        raise NotFoundError("Research paper not found")

    researcher_id = paper.researcher_id
    file_key = file_key_from_url(paper.file_url) if paper.file_url else None

    try:
        db.delete(paper)
        db.flush()
        recount(db, researcher_id)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Failed to delete research paper {paper_id}: {e}") from e

    # Blob removal follows the commit: a surviving row always keeps its file
    if file_key:
        try:
            store.delete(file_key)
        except Exception as e:
            # The record is already deleted; the blob is left behind
            logger.error(f"Error deleting file {file_key} for paper {paper_id}: {e}", exc_info=True)

    logger.info(f"Deleted paper {paper_id} (researcher {researcher_id})")
