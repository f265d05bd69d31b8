"""
Health check and monitoring endpoints.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/", status_code=status.HTTP_200_OK)
async def root() -> Dict[str, str]:
    """Root endpoint - ping"""
    return {"message": "API is working!"}


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check endpoint.

    Returns 200 OK if the service is running.
    """
    return {"status": "healthy", "timestamp": _timestamp()}


@router.get("/health/detailed")
def detailed_health_check(db: Session = Depends(get_db)) -> Any:
    """
    Health check including database connectivity.

    Returns 503 if the database cannot be reached.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "timestamp": _timestamp(),
                "checks": {"database": {"status": "unhealthy", "message": "Database connection failed"}},
            },
        )

    return {
        "status": "healthy",
        "timestamp": _timestamp(),
        "checks": {"database": {"status": "healthy", "message": "Database connection successful"}},
    }
