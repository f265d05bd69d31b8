"""
CRUD operations for User model.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from app.models.user import User, UserRole


def get_by_id(db: Session, user_id: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_multi(db: Session) -> List[User]:
    """All accounts, oldest first."""
    return db.query(User).order_by(User.created_at.asc()).all()


def get_by_role(db: Session, role: UserRole) -> List[User]:
    """Accounts holding the given role (job alert recipients, admins)."""
    return db.query(User).filter(User.role == role).order_by(User.created_at.asc()).all()


def create(
    db: Session,
    *,
    name: str,
    email: str,
    hashed_password: str,
    pic: Optional[str] = None,
    role: UserRole = UserRole.USER
) -> User:
    """
    Insert a new account.

    The caller is responsible for hashing the password and for the
    duplicate-email check.
    """
    db_user = User(
        name=name,
        email=email,
        hashed_password=hashed_password,
        pic=pic,
        role=role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def set_role(db: Session, user: User, role: UserRole) -> User:
    user.role = role
    db.commit()
    db.refresh(user)
    return user
