"""
Celery utility functions for reliable task queueing.

Provides helper functions to ensure Celery tasks are queued successfully
even when called from FastAPI endpoints.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Tuple
from celery import Task
from kombu import Connection

from app.core.config import settings

logger = logging.getLogger(__name__)

QUEUE_TIMEOUT_SECONDS = 5

# Thread pool for queueing tasks outside the request handler's thread
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="celery_queue")


def _queue_task_sync(task: Task, args: tuple, kwargs: dict) -> Tuple[bool, str, str]:
    """
    Internal function to queue task synchronously in a thread.

    Returns:
        Tuple[bool, str, str]: (success, task_id, error_message)
    """
    try:
        # Use a fresh Kombu connection to avoid stale connection pool issues
        with Connection(settings.REDIS_URL) as conn:
            result = task.apply_async(
                args=args,
                kwargs=kwargs,
                connection=conn,
                retry=True,
                retry_policy={
                    'max_retries': 3,
                    'interval_start': 0,
                    'interval_step': 0.2,
                    'interval_max': 0.2,
                }
            )
            return (True, result.id, "")
    except Exception as e:
        return (False, "", str(e))


def queue_task_safely(task: Task, *args, **kwargs) -> bool:
    """
    Safely queue a Celery task with connection retry logic.

    Never raises: a broker outage or a slow broker is logged and reported
    as False so the caller's own operation can still succeed.

    Returns:
        bool: True if task was queued successfully, False otherwise

    Example:
        from app.tasks.notification_tasks import send_job_alerts_task
        success = queue_task_safely(send_job_alerts_task, job_id=42)
    """
    future = _executor.submit(_queue_task_sync, task, args, kwargs)
    try:
        success, task_id, error = future.result(timeout=QUEUE_TIMEOUT_SECONDS)
    except FutureTimeoutError:
        success, task_id, error = False, "", f"timed out after {QUEUE_TIMEOUT_SECONDS}s"

    if success:
        logger.info(f"Task {task.name} queued successfully: {task_id}")
        return True
    else:
        logger.error(f"Failed to queue task {task.name}: {error}")
        return False
