# services/counter_service.py
import logging
from typing import Iterable, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from database.models.research_models import Researcher, ResearchPaper

logger = logging.getLogger(__name__)


def recount(db: Session, researcher_id: Optional[int]) -> None:
    """
    Overwrites researchers.research_papers_count with the live number of
    research_papers rows pointing at researcher_id.

    Runs inside the caller's session so it commits (or rolls back) together
    with the paper write that triggered it. A missing researcher is a no-op.
    """
    if researcher_id is None:
        return

    paper_count = (
        select(func.count(ResearchPaper.id))
        .where(ResearchPaper.researcher_id == researcher_id)
        .scalar_subquery()
    )
    result = db.execute(
        update(Researcher)
        .where(Researcher.id == researcher_id)
        .values(research_papers_count=paper_count)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        logger.debug(f"Recount skipped, researcher {researcher_id} does not exist")


def recount_many(db: Session, researcher_ids: Iterable[Optional[int]]) -> None:
    seen = set()
    for researcher_id in researcher_ids:
        if researcher_id is None or researcher_id in seen:
            continue
        seen.add(researcher_id)
        recount(db, researcher_id)


def recount_all(db: Session) -> int:
    """
    Re-derives every researcher's counter. Used to repair drift left by
    writes that bypassed the API. Returns the number of researchers touched.
    """
    ids = db.scalars(select(Researcher.id)).all()
    recount_many(db, ids)
    db.commit()
    logger.info(f"Recounted papers for {len(ids)} researchers")
    return len(ids)
