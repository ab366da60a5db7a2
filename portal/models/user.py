"""
User model with authentication and role management.
Handles accounts for listing agents, brokerage administrators and portal staff.
"""

from sqlalchemy import String, Boolean, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from portal.database import Base
from passlib.context import CryptContext
from email_validator import validate_email, EmailNotValidError
from typing import Optional
import enum
import uuid

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserRole(str, enum.Enum):
    """User role enumeration for role-based access control."""
    AGENT = "agent"
    BROKERAGE_ADMIN = "brokerage_admin"
    UPCA_ADMIN = "upca_admin"


class User(Base):
    """
    User model for authentication and authorization.
    Agents and brokerage admins are customers; upca_admin accounts are portal staff.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique and valid"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="User's full name"
    )

    brokerage: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Brokerage the agent works for"
    )

    avatar_url: Mapped[Optional[str]] = mapped_column(
        String(1024),
        nullable=True
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(32),
        nullable=True
    )

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole),
        nullable=False,
        default=UserRole.AGENT,
        index=True,
        comment="User role for access control"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the user account is active"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Normalized email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    @classmethod
    def hash_password(cls, password: str) -> str:
        """Hash a password using bcrypt."""
        if not password or len(password) < 8:
            raise ValueError("Password must be at least 8 characters long")

        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        return pwd_context.verify(password, self.hashed_password)

    @property
    def is_staff(self) -> bool:
        """Check if user is portal staff."""
        return self.role == UserRole.UPCA_ADMIN

    @property
    def is_customer(self) -> bool:
        return self.role in (UserRole.AGENT, UserRole.BROKERAGE_ADMIN)

    def can_access(self, owner_id: uuid.UUID) -> bool:
        """
        Check if user can access a resource owned by another user.

        Staff can access everything; customers only their own records.
        """
        if self.is_staff:
            return True

        return self.id == owner_id

    def to_dict(self) -> dict:
        """
        Convert user to dictionary (excluding sensitive data).
        """
        return {
            "id": str(self.id),
            "email": self.email,
            "full_name": self.full_name,
            "brokerage": self.brokerage,
            "avatar_url": self.avatar_url,
            "phone": self.phone,
            "role": self.role.value,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
