"""
Celery application for background job alert delivery.

Redis is both broker and result backend. Start a worker with:
    celery -A app.core.celery_app worker --loglevel=info
"""

from celery import Celery
from app.core.config import settings

JOB_ALERTS_TASK = "app.tasks.notification_tasks.send_job_alerts_task"

celery_app = Celery(
    "job_board_worker",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["app.tasks.notification_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Ack on receipt; a redelivered alert task would mail recipients twice
    task_acks_late=False,
    task_annotations={
        JOB_ALERTS_TASK: {
            "time_limit": settings.JOB_ALERT_TASK_TIME_LIMIT,
            "soft_time_limit": settings.JOB_ALERT_TASK_TIME_LIMIT - 30,
        }
    },

    # Outcomes are only kept for inspection
    result_expires=86400,

    worker_prefetch_multiplier=1,
    broker_connection_retry_on_startup=True,
)
