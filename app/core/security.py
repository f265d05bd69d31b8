"""
Security utilities for JWT authentication and password hashing.

Implements stateless JWT authentication using HS256 (shared secret).
Passwords are hashed using bcrypt for security.

Every function takes its secret / cost factor from an explicit Settings
object so the same code runs against production and test configurations.
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from app.core.config import Settings


@lru_cache
def _pwd_context(rounds: int) -> CryptContext:
    """Password hashing context (bcrypt) for a given cost factor."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def verify_password(plain_password: str, hashed_password: str, settings: Settings) -> bool:
    """Verify a plain password against a hashed password."""
    # Bcrypt has a 72-byte limit - truncate if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    return _pwd_context(settings.BCRYPT_ROUNDS).verify(password_bytes, hashed_password)


@lru_cache
def _dummy_hash(rounds: int) -> str:
    return _pwd_context(rounds).hash(b"not-a-real-password")


def dummy_password_hash(settings: Settings) -> str:
    """
    A valid bcrypt hash at the configured cost that no real password matches.

    Checked against when an account is missing so a failed sign-in takes the
    same time whether or not the email exists.
    """
    return _dummy_hash(settings.BCRYPT_ROUNDS)


def get_password_hash(password: str, settings: Settings) -> str:
    """
    Hash a password using bcrypt with the configured cost factor.

    Note: Bcrypt has a 72-byte limit. Passwords longer than 72 bytes
    are automatically truncated to comply with this limitation.
    """
    password_bytes = password.encode('utf-8')[:72]
    return _pwd_context(settings.BCRYPT_ROUNDS).hash(password_bytes)


def create_access_token(
    data: dict,
    settings: Settings,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Dictionary containing claims to encode (typically {"sub": user_id, "email": email})
        settings: Settings carrying the signing secret and default expiry
        expires_delta: Optional expiration time delta (default: ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        Encoded JWT token as a string
    """
    to_encode = data.copy()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str, settings: Settings) -> dict:
    """
    Decode and validate a JWT token.

    Raises:
        JWTError: If token is invalid, tampered with or expired
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


__all__ = [
    "JWTError",
    "create_access_token",
    "decode_token",
    "dummy_password_hash",
    "get_password_hash",
    "verify_password",
]
