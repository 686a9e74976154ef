# File: api/routers/statistics.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.dependencies.database import get_db
from api.errors import INTERNAL_ERROR
from api.models.research_models import TopicStatsResponse
from services.topic_service import list_topic_stats

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/statistics/topics", response_model=List[TopicStatsResponse])
def get_topic_statistics(db: Session = Depends(get_db)):
    try:
        return list_topic_stats(db)
    except Exception:
        logger.error("Failed to fetch topic statistics", exc_info=True)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
