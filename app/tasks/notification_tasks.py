"""
Celery tasks for job alert emails.
"""

import logging

from app.core.celery_app import JOB_ALERTS_TASK, celery_app
from app.core.config import settings
from app.core.database import SessionLocal
from app.services.email_service import email_service
from app.services.job_alerts import send_job_alerts

logger = logging.getLogger(__name__)


@celery_app.task(name=JOB_ALERTS_TASK, bind=True)
def send_job_alerts_task(self, job_id: int):
    """
    Email every alert recipient about a newly created job.

    Per-recipient failures are isolated inside the fan-out and reported in
    the result rather than retried, so a retry never re-mails recipients
    that already received the alert.

    Args:
        self: Celery task instance (when bind=True)
        job_id: The job that was just created

    Returns:
        dict: {"job_id": ..., "outcomes": {email: bool}}
    """
    logger.info(f"[Task {self.request.id}] Sending job alerts for job {job_id}")

    db = SessionLocal()
    try:
        outcomes = send_job_alerts(
            db,
            job_id,
            recipient_role=settings.JOB_ALERT_RECIPIENT_ROLE,
            mailer=email_service,
        )
        return {"job_id": job_id, "outcomes": outcomes}
    finally:
        db.close()
