# services/researcher_service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from api.models.research_models import ResearcherCreate, ResearcherUpdate
from database.models.research_models import Researcher
from services.errors import ConflictError, NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

DUPLICATE_STUDENT_ID = "Student ID already exists"


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def list_researchers(db: Session, search: Optional[str] = None) -> List[Researcher]:
    """
    All researchers, newest first. `search` is a case-insensitive substring
    match over full_name, student_id, phone_number and email.
    """
    stmt = select(Researcher)

    term = (search or "").strip()
    if term:
        pattern = f"%{_escape_like(term)}%"
        stmt = stmt.where(
            or_(
                Researcher.full_name.ilike(pattern, escape="\\"),
                Researcher.student_id.ilike(pattern, escape="\\"),
                Researcher.phone_number.ilike(pattern, escape="\\"),
                Researcher.email.ilike(pattern, escape="\\"),
            )
        )

    stmt = stmt.order_by(Researcher.created_at.desc(), Researcher.id.desc())
    return list(db.scalars(stmt).all())


def get_researcher(db: Session, researcher_id: int) -> Researcher:
    researcher = db.get(Researcher, researcher_id)
    if researcher is None:
        raise NotFoundError("Researcher not found")
    return researcher


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # student_id is the only unique column a client can write
        raise ConflictError(DUPLICATE_STUDENT_ID)
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Failed to {action} researcher: {e}") from e


def _student_id_taken(db: Session, student_id: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(Researcher.id).where(Researcher.student_id == student_id)
    if exclude_id is not None:
        stmt = stmt.where(Researcher.id != exclude_id)
    return db.scalar(stmt) is not None


def create_researcher(db: Session, data: ResearcherCreate) -> Researcher:
    if _student_id_taken(db, data.student_id):
        raise ConflictError(DUPLICATE_STUDENT_ID)

    researcher = Researcher(
        full_name=data.full_name,
        student_id=data.student_id,
        phone_number=data.phone_number,
        email=data.email,
        research_papers_count=data.research_papers_count,
    )
    db.add(researcher)
    _commit(db, "create")
    db.refresh(researcher)

    logger.info(f"Created researcher {researcher.id}")
    return researcher


def update_researcher(db: Session, researcher_id: int, patch: ResearcherUpdate) -> Researcher:
    researcher = get_researcher(db, researcher_id)

    changes = patch.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("No fields to update")

    if "student_id" in changes and _student_id_taken(db, changes["student_id"], exclude_id=researcher_id):
        raise ConflictError(DUPLICATE_STUDENT_ID)

    for field_name, value in changes.items():
        setattr(researcher, field_name, value)
    researcher.updated_at = datetime.now(timezone.utc)

    _commit(db, "update")
    db.refresh(researcher)

    logger.info(f"Updated researcher {researcher_id}: {sorted(changes)}")
    return researcher


def delete_researcher(db: Session, researcher_id: int) -> None:
    """
    Removes the researcher row only. Papers that reference it are left as they
    are, with a dangling researcher_id.
    """
    researcher = get_researcher(db, researcher_id)
    db.delete(researcher)
    _commit(db, "delete")
    logger.info(f"Deleted researcher {researcher_id}")
