# File: api/models/research_models.py
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from utils.sanitization import blank_to_none, clean_text


def _required_text(value: str) -> str:
    text = clean_text(value)
    if not text:
        raise ValueError("must not be empty")
    return text


def _check_publication_year(value: Optional[int]) -> Optional[int]:
    if not value:
        return None
    max_year = date.today().year + 1
    if value < 1900 or value > max_year:
        raise ValueError(f"must be between 1900 and {max_year}")
    return value


# --- Researchers ---

class ResearcherCreate(BaseModel):
    full_name: str
    student_id: str
    phone_number: str
    email: Optional[EmailStr] = None
    research_papers_count: int = Field(0, ge=0)

    @field_validator("full_name", "student_id", "phone_number")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, v):
        return blank_to_none(v) if isinstance(v, str) else v


class ResearcherUpdate(BaseModel):
    """Partial update: only fields present in the request body are applied."""
    full_name: Optional[str] = None
    student_id: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[EmailStr] = None
    research_papers_count: Optional[int] = Field(None, ge=0)

    @field_validator("full_name", "student_id", "phone_number")
    @classmethod
    def _not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("must not be null")
        return _required_text(v)

    @field_validator("research_papers_count")
    @classmethod
    def _count_not_null(cls, v: Optional[int]) -> Optional[int]:
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, v):
        return blank_to_none(v) if isinstance(v, str) else v


class ResearcherResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    student_id: str
    phone_number: str
    email: Optional[str] = None
    research_papers_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Topics ---

class TopicResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TopicStatsResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    paper_count: int
    researcher_count: int


# --- Papers ---

class PaperCreate(BaseModel):
    title: str
    researcher_id: int = Field(..., gt=0)
    topic_id: int = Field(..., gt=0)
    publication_year: Optional[int] = None
    journal_name: Optional[str] = None
    abstract: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("publication_year")
    @classmethod
    def _year_in_range(cls, v: Optional[int]) -> Optional[int]:
        return _check_publication_year(v)

    @field_validator("journal_name", "abstract")
    @classmethod
    def _optional_text(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class PaperUpdate(BaseModel):
    """
    Partial update. The attachment cannot be changed here; there is no
    replace/remove operation for files.
    """
    title: Optional[str] = None
    researcher_id: Optional[int] = Field(None, gt=0)
    topic_id: Optional[int] = Field(None, gt=0)
    publication_year: Optional[int] = None
    journal_name: Optional[str] = None
    abstract: Optional[str] = None

    @field_validator("title", "researcher_id", "topic_id")
    @classmethod
    def _required_not_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return _required_text(v) if isinstance(v, str) else v

    @field_validator("publication_year")
    @classmethod
    def _year_in_range(cls, v: Optional[int]) -> Optional[int]:
        return _check_publication_year(v)

    @field_validator("journal_name", "abstract")
    @classmethod
    def _optional_text(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class PaperResponse(BaseModel):
    id: int
    title: str
    researcher_id: int
    topic_id: int
    publication_year: Optional[int] = None
    journal_name: Optional[str] = None
    abstract: Optional[str] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    topic_name: Optional[str] = None
    researcher_name: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
