"""
User model for authentication and role-based access.

Each User represents a registered account. The role decides whether the
account may use administrative endpoints (admin) or receives job alerts (user).
"""

import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.dialects.postgresql import UUID
from app.core.database import Base


class UserRole(str, enum.Enum):
    """
    Account role enum.

    - USER: Standard account, receives new job alerts
    - ADMIN: Elevated account, may list all accounts
    """
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """
    Registered account.

    Email uniqueness is checked at registration time, not by the schema.
    """
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # Authentication credentials
    email = Column(String, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    # User profile
    name = Column(String, nullable=True)
    pic = Column(String, nullable=True)

    # Stored by value ("user"/"admin"); unknown roles are rejected on write
    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e], validate_strings=True),
        default=UserRole.USER,
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value if self.role else None})>"
