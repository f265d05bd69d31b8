"""
Celery tasks package.

- notification_tasks: New job alert emails
"""

from app.tasks import notification_tasks

__all__ = ["notification_tasks"]
