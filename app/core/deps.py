"""
FastAPI dependencies for authentication and authorization.

The chain is ordered through the dependency graph: get_admin_user depends on
get_current_user, so the role check can only ever see an authenticated user.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.security import decode_token
from app.crud import user as user_crud
from app.models.user import User

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>)
# auto_error is off so a missing header gets the same 401 as a bad token
security = HTTPBearer(auto_error=False)

NOT_AUTHORIZED = "Not authorized"


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=NOT_AUTHORIZED,
        headers={"WWW-Authenticate": "Bearer"},
    )


def authenticate(
    credentials: Optional[HTTPAuthorizationCredentials],
    db: Session,
    settings: Settings
) -> User:
    """
    Resolve bearer credentials to an account.

    Every failure (no header, wrong scheme, bad signature, expired token,
    unusable subject, deleted account) raises the same 401.
    """
    if credentials is None or not credentials.credentials:
        raise _credentials_exception()

    try:
        payload = decode_token(credentials.credentials, settings)
        user_id = UUID(str(payload.get("sub")))
    except (JWTError, ValueError) as e:
        logger.info(f"Rejected bearer token: {type(e).__name__}")
        raise _credentials_exception()

    user = user_crud.get_by_id(db, user_id)
    if user is None:
        logger.info(f"Bearer token subject {user_id} no longer exists")
        raise _credentials_exception()

    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> User:
    """
    Extract and validate the current user from JWT token.

    This dependency:
    1. Extracts the Bearer token from Authorization header
    2. Decodes and validates the JWT
    3. Fetches the user from the database
    4. Attaches the user to request.state for downstream consumers

    Raises:
        HTTPException 401: If token is missing, invalid, expired or the user is gone
    """
    user = authenticate(credentials, db, settings)
    request.state.user = user
    return user


async def get_admin_user(
    user: User = Depends(get_current_user),
) -> User:
    """
    Get the current user and ensure they hold the admin role.

    Raises:
        HTTPException 401: Not authenticated (raised by get_current_user)
        HTTPException 403: Authenticated but not an admin
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )

    return user


async def require_job_writer(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> Optional[User]:
    """
    Guard for job mutation endpoints.

    Open to anyone unless JOBS_REQUIRE_AUTH is set, in which case the caller
    must present a valid bearer token.
    """
    if not settings.JOBS_REQUIRE_AUTH:
        return None

    user = authenticate(credentials, db, settings)
    request.state.user = user
    return user
