"""
User repository for authentication and account management operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from portal.repositories.base import BaseRepository
from portal.models.user import User, UserRole
from typing import Optional, List, Dict, Any
import uuid
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts with password hashing and email normalization.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Must include email, password, full_name.
                       Optional: role (defaults to AGENT), brokerage, phone, avatar_url

        Returns:
            Created user instance

        Raises:
            ValueError: If validation fails or the email is taken
        """
        try:
            user_data = dict(user_data)
            email = User.validate_email_format(user_data["email"])

            existing_user = await self.get_by_email(email)
            if existing_user:
                raise ValueError(f"User with email {email} already exists")

            password = user_data.pop("password")
            user_data.pop("confirm_password", None)

            create_data = {
                **user_data,
                "email": email,
                "hashed_password": User.hash_password(password),
                "role": user_data.get("role", UserRole.AGENT),
                "is_active": user_data.get("is_active", True)
            }

            created_user = await self.create(create_data)
            logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
            return created_user
        except ValueError as e:
            logger.error(f"User validation failed: {e}")
            raise

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by (normalized) email address."""
        try:
            normalized_email = email.lower().strip()
            result = await self.db.execute(select(User).where(User.email == normalized_email))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns:
            User instance if authentication successful, None otherwise
        """
        user = await self.get_by_email(email)

        if not user:
            logger.debug(f"Authentication failed: user {email} not found")
            return None

        if not user.is_active:
            logger.debug(f"Authentication failed: user {email} is inactive")
            return None

        if not user.verify_password(password):
            logger.debug(f"Authentication failed: invalid password for {email}")
            return None

        return user

    async def update_password(self, user_id: uuid.UUID, new_password: str) -> Optional[User]:
        """Update user's password with proper hashing."""
        hashed_password = User.hash_password(new_password)
        updated_user = await self.update(user_id, {"hashed_password": hashed_password})

        if updated_user:
            logger.info(f"Password updated for user: {updated_user.email}")

        return updated_user

    async def update_profile(self, user_id: uuid.UUID, profile: Dict[str, Any]) -> Optional[User]:
        """Update profile fields shown on the account page."""
        allowed = {"full_name", "brokerage", "avatar_url", "phone"}
        return await self.update(user_id, {k: v for k, v in profile.items() if k in allowed})

    async def check_email_availability(self, email: str) -> bool:
        return await self.get_by_email(email) is None

    async def get_by_ids(self, user_ids: List[uuid.UUID]) -> Dict[uuid.UUID, User]:
        """Fetch several users at once, keyed by id."""
        if not user_ids:
            return {}
        result = await self.db.execute(select(User).where(User.id.in_(user_ids)))
        return {user.id: user for user in result.scalars().all()}
