import logging
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.celery_utils import queue_task_safely
from app.core.database import get_db
from app.core.deps import require_job_writer
from app.core.exceptions import NotFoundError
from app.crud import job as job_crud
from app.schemas.job import (
    JobCreateRequest,
    JobListResponse,
    JobResponse,
    JobUpdateRequest,
    MessageResponse,
)
from app.services.job_query import build_job_query
from app.tasks.notification_tasks import send_job_alerts_task

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)

JOB_NOT_FOUND = "Job not found"


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=JobResponse,
    dependencies=[Depends(require_job_writer)]
)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Create a new job posting and queue the alert emails via Celery.

    The job is committed first; the alert task is queued afterwards and a
    queueing failure does not affect the response.
    """
    new_job = job_crud.create(db, request)
    logger.info(f"Created job {new_job.id}: {new_job.title}")

    if not queue_task_safely(send_job_alerts_task, job_id=new_job.id):
        logger.warning(f"Job {new_job.id} created but alert emails were not queued")

    return new_job


@router.get("", response_model=JobListResponse)
def list_jobs(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    sort: Optional[str] = None,
    search: Optional[str] = None,
    location: Optional[str] = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """
    List jobs with filtering, search, sorting and pagination.

    Args:
        page: 1-based page number (default: 1)
        limit: Page size (default: 3, max: JOB_PAGE_MAX_LIMIT)
        sort: Comma separated fields, "-" prefix for descending (default: -createdAt)
        search: Case-insensitive substring of the title
        location: Exact location match

    `total` counts every job matching the filters, not just this page.
    """
    query = build_job_query(
        page=page,
        limit=limit,
        sort=sort,
        search=search,
        location=location,
        default_limit=settings.JOB_PAGE_DEFAULT_LIMIT,
        max_limit=settings.JOB_PAGE_MAX_LIMIT,
    )
    jobs, total = job_crud.get_page(db, query)

    return JobListResponse(
        success=True,
        total=total,
        page=query.page,
        limit=query.limit,
        skip=query.skip,
        data=[JobResponse.model_validate(job) for job in jobs],
    )


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Retrieve a job by ID."""
    job = job_crud.get_by_id(db, job_id)

    if not job:
        raise NotFoundError(JOB_NOT_FOUND)

    return job


@router.put("/{job_id}", response_model=JobResponse, dependencies=[Depends(require_job_writer)])
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Partially update a job. Only the fields sent are changed.
    """
    job = job_crud.update(db, job_id, request)

    if not job:
        raise NotFoundError(JOB_NOT_FOUND)

    logger.info(f"Updated job {job_id}")
    return job


@router.delete("/{job_id}", response_model=MessageResponse, dependencies=[Depends(require_job_writer)])
def delete_job(job_id: int, db: Session = Depends(get_db)):
    """
    Delete a job by ID.
    """
    deleted = job_crud.delete(db, job_id)

    if not deleted:
        raise NotFoundError(JOB_NOT_FOUND)

    logger.info(f"Deleted job {job_id}")
    return MessageResponse(message="Job deleted")
