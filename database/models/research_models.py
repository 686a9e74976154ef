# database/models/research_models.py
from sqlalchemy import Column, Integer, String, Text, DateTime, func
from database.db import Base


class Researcher(Base):
    __tablename__ = "researchers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    full_name = Column(String(255), nullable=False)
    student_id = Column(String(64), unique=True, index=True, nullable=False)
    phone_number = Column(String(64), nullable=False)
    email = Column(String(255), nullable=True)

    # Derived from research_papers, see services.counter_service.recount
    research_papers_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class ResearchTopic(Base):
    """
    Reference data, seeded outside the API (scripts/seed_topics.py).
    """
    __tablename__ = "research_topics"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class ResearchPaper(Base):
    __tablename__ = "research_papers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    title = Column(String(512), nullable=False)

    # Logical references only: deleting a researcher leaves its papers in place
    researcher_id = Column(Integer, nullable=False, index=True)
    topic_id = Column(Integer, nullable=False, index=True)

    publication_year = Column(Integer, nullable=True)
    journal_name = Column(String(255), nullable=True)
    abstract = Column(Text, nullable=True)

    # Attachment triad: all set or all null
    file_url = Column(String(1024), nullable=True)
    file_name = Column(String(512), nullable=True)
    file_size = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
