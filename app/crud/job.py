"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs, providing a clean interface for the API layer.
"""

from typing import List, Optional, Tuple
from sqlalchemy import and_, true
from sqlalchemy.orm import Session
from app.models.job import Job
from app.schemas.job import JobCreateRequest, JobUpdateRequest
from app.services.job_query import JobQuery, SORTABLE_FIELDS

LIKE_ESCAPE = "\\"


def create(db: Session, job_data: JobCreateRequest) -> Job:
    """
    Create a new job in the database.

    Args:
        db: Database session
        job_data: Validated job creation data

    Returns:
        Created Job instance with id and created_at
    """
    db_job = Job(
        title=job_data.title,
        company=job_data.company,
        location=job_data.location,
        salary=job_data.salary,
    )

    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    return db_job


def get_by_id(db: Session, job_id: int) -> Optional[Job]:
    """
    Retrieve a job by its ID.

    Returns:
        Job instance if found, None otherwise
    """
    return db.query(Job).filter(Job.id == job_id).first()


def update(db: Session, job_id: int, job_data: JobUpdateRequest) -> Optional[Job]:
    """
    Merge the fields present in job_data into an existing job.

    Returns:
        Updated Job instance if found, None otherwise
    """
    job = get_by_id(db, job_id)
    if not job:
        return None

    for field, value in job_data.model_dump(exclude_unset=True).items():
        setattr(job, field, value)

    db.commit()
    db.refresh(job)

    return job


def delete(db: Session, job_id: int) -> bool:
    """
    Delete a job by ID.

    Returns:
        True if deleted, False if not found
    """
    job = get_by_id(db, job_id)
    if not job:
        return False

    db.delete(job)
    db.commit()

    return True


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def build_filter(query: JobQuery):
    """
    Translate the filter part of a JobQuery into one SQL expression.

    Constraints are ANDed; with none present the expression is TRUE so the
    page query and the count query always share the same predicate.
    """
    conditions = []
    if query.location:
        conditions.append(Job.location == query.location)
    if query.search:
        conditions.append(Job.title.ilike(f"%{escape_like(query.search)}%", escape=LIKE_ESCAPE))
    return and_(true(), *conditions)


def build_order_by(query: JobQuery) -> list:
    """ORDER BY clauses for the requested sort keys plus an id tie-break."""
    clauses = []
    for field, descending in query.sort:
        column = getattr(Job, SORTABLE_FIELDS[field])
        clause = column.desc() if descending else column.asc()
        clauses.append(clause.nulls_last())

    first_descending = query.sort[0][1]
    clauses.append(Job.id.desc() if first_descending else Job.id.asc())
    return clauses


def get_page(db: Session, query: JobQuery) -> Tuple[List[Job], int]:
    """
    Run the listing query.

    Returns:
        (jobs on the requested page, total number of jobs matching the filter)
    """
    predicate = build_filter(query)

    jobs = (
        db.query(Job)
        .filter(predicate)
        .order_by(*build_order_by(query))
        .offset(query.skip)
        .limit(query.limit)
        .all()
    )
    total = db.query(Job).filter(predicate).count()

    return jobs, total
