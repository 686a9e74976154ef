# services/topic_service.py
from typing import Any, Dict, List

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from database.models.research_models import ResearchPaper, ResearchTopic


def list_topics(db: Session) -> List[ResearchTopic]:
    return list(db.scalars(select(ResearchTopic).order_by(ResearchTopic.name)).all())


def list_topic_stats(db: Session) -> List[Dict[str, Any]]:
    """
    Per-topic paper count and distinct researcher count, computed live.
    Topics without papers are included with zero counts.
    """
    paper_count = func.count(ResearchPaper.id).label("paper_count")
    researcher_count = func.count(distinct(ResearchPaper.researcher_id)).label("researcher_count")

    stmt = (
        select(
            ResearchTopic.id,
            ResearchTopic.name,
            ResearchTopic.description,
            paper_count,
            researcher_count,
        )
        .outerjoin(ResearchPaper, ResearchPaper.topic_id == ResearchTopic.id)
        .group_by(ResearchTopic.id, ResearchTopic.name, ResearchTopic.description)
        .order_by(paper_count.desc(), ResearchTopic.name)
    )

    return [dict(row._mapping) for row in db.execute(stmt).all()]
