"""
Database models package.
"""

from app.models.job import Job
from app.models.user import User, UserRole

__all__ = ["Job", "User", "UserRole"]
