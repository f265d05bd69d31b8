"""
Account registration, sign-in and listing.

Failures are raised as domain exceptions from app.core.exceptions; the API
layer never has to decide which status code a credential problem maps to.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.exceptions import ConflictError, InvalidCredentialsError
from app.core.security import (
    create_access_token,
    dummy_password_hash,
    get_password_hash,
    verify_password,
)
from app.crud import user as user_crud
from app.models.user import User
from app.schemas.user import UserRegisterRequest

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid Credentials"


def register(db: Session, request: UserRegisterRequest, settings: Settings) -> User:
    """
    Create a standard account.

    Raises:
        ConflictError: An account with this email already exists
    """
    if user_crud.get_by_email(db, request.email):
        raise ConflictError("Email already registered")

    user = user_crud.create(
        db,
        name=request.name,
        email=request.email,
        hashed_password=get_password_hash(request.password, settings),
        pic=request.pic,
    )
    logger.info(f"New user registered: {user.email} (id: {user.id})")
    return user


def login(db: Session, email: str, password: str, settings: Settings) -> str:
    """
    Check credentials and issue a signed bearer token.

    Unknown email and wrong password raise the same error so callers cannot
    tell which accounts exist.

    Returns:
        Encoded JWT carrying the account id (sub) and email
    """
    user = user_crud.get_by_email(db, email)
    hashed_password = user.hashed_password if user else dummy_password_hash(settings)
    if not verify_password(password, hashed_password, settings) or not user:
        logger.info("Failed sign-in attempt")
        raise InvalidCredentialsError(INVALID_CREDENTIALS)

    logger.info(f"User signed in: {user.email}")
    return create_access_token(data={"sub": str(user.id), "email": user.email}, settings=settings)


def list_accounts(db: Session) -> List[User]:
    """All accounts. Callers must serialize through UserResponse to drop the hash."""
    return user_crud.get_multi(db)
