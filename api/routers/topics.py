# File: api/routers/topics.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.dependencies.database import get_db
from api.errors import INTERNAL_ERROR
from api.models.research_models import TopicResponse
from services.topic_service import list_topics

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/topics", response_model=List[TopicResponse])
def get_topics(db: Session = Depends(get_db)):
    try:
        return list_topics(db)
    except Exception:
        logger.error("Failed to fetch topics", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
