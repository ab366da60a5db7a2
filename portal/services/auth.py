"""
Authentication service for registration, login, token management and account updates.
"""

from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from portal.config import settings
from portal.repositories.user import UserRepository
from portal.models.user import User, UserRole
from portal.schemas.auth import RegisterRequest, AdminRegisterRequest, ProfileUpdate
from portal.utils.auth import (
    create_access_token,
    create_refresh_token,
    verify_token,
    TokenPayload
)
from portal.utils.exceptions import (
    APIException,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    InactiveUserError,
    NotFoundError,
    ForbiddenError,
    ValidationError,
    BadRequestError,
    DuplicateResourceError,
    InsufficientPermissionsError
)
from jose import JWTError
import hmac
import uuid
import logging

logger = logging.getLogger(__name__)


def _token_error(e: JWTError) -> APIException:
    if "expired" in str(e).lower():
        return TokenExpiredError()
    return InvalidTokenError(str(e))


class AuthService:
    """
    Handles customer and staff accounts, credentials and JWT tokens.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def _register(self, user_data: dict) -> User:
        try:
            if not await self.user_repo.check_email_availability(user_data["email"]):
                raise DuplicateResourceError("User", user_data["email"])
            user = await self.user_repo.create_user(user_data)
            logger.info(f"Registered {user.role.value} account: {user.email} (ID: {user.id})")
            return user
        except APIException:
            raise
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            logger.error(f"Failed to register {user_data.get('email')}: {e}")
            raise BadRequestError("Failed to create account")

    async def register_customer(self, data: RegisterRequest) -> User:
        """Self-registration for agents and brokerage admins."""
        return await self._register(data.model_dump(exclude={"confirm_password"}))

    async def register_admin(self, data: AdminRegisterRequest) -> User:
        """
        Staff registration. Requires the configured signup code.

        Raises:
            ForbiddenError: If the signup code is wrong
        """
        if not hmac.compare_digest(data.admin_code.encode(), settings.admin_signup_code.encode()):
            logger.warning(f"Staff registration rejected for {data.email}: bad signup code")
            raise ForbiddenError("Invalid admin registration code")

        user_data = data.model_dump(exclude={"confirm_password", "admin_code"})
        user_data["role"] = UserRole.UPCA_ADMIN
        return await self._register(user_data)

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Check credentials.

        Raises:
            InvalidCredentialsError: If the email or password is wrong
            InactiveUserError: If the account is disabled
        """
        user = await self.user_repo.get_by_email(email)
        if user and not user.is_active:
            raise InactiveUserError()

        user = await self.user_repo.authenticate_user(email, password)
        if not user:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    def create_tokens(self, user: User) -> Tuple[str, str]:
        access_token = create_access_token(user_id=user.id, email=user.email, role=user.role)
        refresh_token = create_refresh_token(user_id=user.id, email=user.email)
        return access_token, refresh_token

    async def login(self, email: str, password: str) -> Tuple[User, str, str]:
        """Authenticate and issue tokens. Returns (user, access_token, refresh_token)."""
        user = await self.authenticate_user(email, password)
        access_token, refresh_token = self.create_tokens(user)
        return user, access_token, refresh_token

    async def admin_login(self, email: str, password: str) -> Tuple[User, str, str]:
        """Login for the staff console; customer accounts are rejected."""
        user = await self.authenticate_user(email, password)
        if not user.is_staff:
            logger.warning(f"Non-staff login attempt on staff console: {user.email}")
            raise InsufficientPermissionsError("access the admin console")
        access_token, refresh_token = self.create_tokens(user)
        return user, access_token, refresh_token

    async def refresh_access_token(self, refresh_token: str) -> str:
        try:
            payload = verify_token(refresh_token, token_type="refresh")
        except JWTError as e:
            raise _token_error(e)

        user = await self.get_user_by_id(uuid.UUID(payload.user_id))
        if not user.is_active:
            raise InactiveUserError()

        return create_access_token(user_id=user.id, email=user.email, role=user.role)

    def validate_token(self, token: str) -> TokenPayload:
        try:
            return verify_token(token, token_type="access")
        except JWTError as e:
            raise _token_error(e)

    async def get_current_user(self, token: str) -> User:
        """
        Resolve the user behind an access token.

        Raises:
            InvalidTokenError / TokenExpiredError: If the token is unusable
            InactiveUserError: If the account has been disabled since issue
        """
        payload = self.validate_token(token)
        try:
            user = await self.get_user_by_id(uuid.UUID(payload.user_id))
        except NotFoundError:
            raise InvalidTokenError("User no longer exists")

        if not user.is_active:
            raise InactiveUserError()
        return user

    async def get_user_by_id(self, user_id: uuid.UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def update_profile(self, current_user: User, data: ProfileUpdate) -> User:
        try:
            user = await self.user_repo.update_profile(current_user.id, data.model_dump(exclude_unset=True))
            logger.info(f"Profile updated for {user.email}")
            return user
        except Exception as e:
            logger.error(f"Failed to update profile for {current_user.email}: {e}")
            raise BadRequestError("Failed to update profile")

    async def change_password(self, current_user: User, current_password: str, new_password: str) -> None:
        if not current_user.verify_password(current_password):
            raise InvalidCredentialsError("Current password is incorrect")
        if current_password == new_password:
            raise ValidationError("New password must be different from the current password")
        await self.user_repo.update_password(current_user.id, new_password)
