# File: api/routers/researchers.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from api.dependencies.database import get_db
from api.errors import INTERNAL_ERROR, to_http_exception
from api.models.research_models import (
    MessageResponse,
    ResearcherCreate,
    ResearcherResponse,
    ResearcherUpdate,
)
from services import researcher_service
from services.errors import RecordServiceError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/researchers", response_model=List[ResearcherResponse])
def list_researchers(
    search: Optional[str] = Query(None, description="Substring of name, student ID, phone or email"),
    db: Session = Depends(get_db),
):
    try:
        return researcher_service.list_researchers(db, search)
    except Exception:
        logger.error("Failed to fetch researchers", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.get("/researchers/{researcher_id}", response_model=ResearcherResponse)
def get_researcher(researcher_id: int, db: Session = Depends(get_db)):
    try:
        return researcher_service.get_researcher(db, researcher_id)
    except RecordServiceError as e:
        raise to_http_exception(e, "get_researcher")
    except Exception:
        logger.error(f"Failed to fetch researcher {researcher_id}", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.post("/researchers", response_model=ResearcherResponse, status_code=201)
def create_researcher(payload: ResearcherCreate, db: Session = Depends(get_db)):
    try:
        return researcher_service.create_researcher(db, payload)
    except RecordServiceError as e:
        raise to_http_exception(e, "create_researcher")
    except Exception:
        logger.error("Failed to create researcher", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.put("/researchers/{researcher_id}", response_model=ResearcherResponse)
def update_researcher(researcher_id: int, payload: ResearcherUpdate, db: Session = Depends(get_db)):
    try:
        return researcher_service.update_researcher(db, researcher_id, payload)
    except RecordServiceError as e:
        raise to_http_exception(e, "update_researcher")
    except Exception:
        logger.error(f"Failed to update researcher {researcher_id}", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.delete("/researchers/{researcher_id}", response_model=MessageResponse)
def delete_researcher(researcher_id: int, db: Session = Depends(get_db)):
    try:
        researcher_service.delete_researcher(db, researcher_id)
    except RecordServiceError as e:
        raise to_http_exception(e, "delete_researcher")
    except Exception:
        logger.error(f"Failed to delete researcher {researcher_id}", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    return {"message": "Researcher deleted successfully"}
