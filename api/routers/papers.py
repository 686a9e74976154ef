# File: api/routers/papers.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import ValidationError as PayloadError
from sqlalchemy.orm import Session

from api.dependencies.database import get_db, get_store
from api.errors import INTERNAL_ERROR, to_http_exception
from api.models.research_models import MessageResponse, PaperCreate, PaperResponse, PaperUpdate
from clients.blob_store import BlobStore
from services import paper_service
from services.errors import RecordServiceError

router = APIRouter()
logger = logging.getLogger(__name__)


def _optional_int(value: Optional[str], field_name: str) -> Optional[int]:
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{field_name} must be an integer")


@router.get("/papers", response_model=List[PaperResponse])
def list_papers(
    topic_id: Optional[int] = Query(None),
    researcher_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    try:
        return paper_service.list_papers(db, topic_id=topic_id, researcher_id=researcher_id)
    except Exception:
        logger.error("Failed to fetch papers", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.post("/papers", response_model=PaperResponse, status_code=201)
def create_paper(
    title: str = Form(...),
    researcher_id: int = Form(...),
    topic_id: int = Form(...),
    publication_year: Optional[str] = Form(None),
    journal_name: Optional[str] = Form(None),
    abstract: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    store: BlobStore = Depends(get_store),
):
    try:
        payload = PaperCreate(
            title=title,
            researcher_id=researcher_id,
            topic_id=topic_id,
            publication_year=_optional_int(publication_year, "publication_year"),
            journal_name=journal_name,
            abstract=abstract,
        )
    except PayloadError as e:
        logger.warning(f"Invalid paper payload: {e.errors()}")
        raise HTTPException(status_code=400, detail="Missing or invalid required fields")

    try:
        return paper_service.create_paper(db, store, payload, upload=file)
    except RecordServiceError as e:
        raise to_http_exception(e, "create_paper")
    except Exception:
        logger.error("Error creating paper", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.put("/papers/{paper_id}", response_model=PaperResponse)
def update_paper(paper_id: int, payload: PaperUpdate, db: Session = Depends(get_db)):
    try:
        return paper_service.update_paper(db, paper_id, payload)
    except RecordServiceError as e:
        raise to_http_exception(e, "update_paper")
    except Exception:
        logger.error(f"Failed to update paper {paper_id}", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.delete("/papers/{paper_id}", response_model=MessageResponse)
def delete_paper(paper_id: int, db: Session = Depends(get_db), store: BlobStore = Depends(get_store)):
    try:
        paper_service.delete_paper(db, store, paper_id)
    except RecordServiceError as e:
        raise to_http_exception(e, "delete_paper")
    except Exception:
        logger.error(f"Failed to delete paper {paper_id}", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    return {"message": "Research paper deleted successfully"}
