"""
Account endpoints.

- POST /users: Register a new account
- POST /users/signin: Exchange email/password for a bearer token
- GET /users: List all accounts (admin only)
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.deps import get_admin_user
from app.models.user import User
from app.schemas.user import (
    RegisterResponse,
    TokenResponse,
    UserLoginRequest,
    UserRegisterRequest,
    UserResponse,
)
from app.services import auth_service

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
def register(
    request: UserRegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """
    Register a new account with the standard role.

    Returns 400 if the email is already registered.
    """
    user = auth_service.register(db, request, settings)
    return RegisterResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(user)
    )


@router.post("/signin", response_model=TokenResponse)
def signin(
    request: UserLoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """
    Authenticate and return a signed bearer token.

    Unknown email and wrong password both return 400 "Invalid Credentials".
    """
    token = auth_service.login(db, request.email, request.password, settings)
    return TokenResponse(token=token, message="Login successful")


@router.get("", response_model=List[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """List all accounts. Password hashes are never included."""
    logger.info(f"Admin {admin_user.email} listed all users")
    return auth_service.list_accounts(db)
