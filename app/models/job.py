from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Float, DateTime
from app.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Job(Base):
    """
    Job model representing a job posting on the board.

    created_at is assigned on insert and never written again; no API
    schema exposes it as an input.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    company = Column(String, nullable=True)
    location = Column(String, nullable=True, index=True)
    salary = Column(Float, nullable=True)

    # Python-side default keeps microsecond ordering on every backend
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', company='{self.company}')>"
