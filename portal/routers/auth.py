"""
Authentication API endpoints: customer and staff registration, login,
token refresh and the account profile.
"""

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials
from portal.config import settings
from portal.models.user import User
from portal.services.auth import AuthService
from portal.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    AdminRegisterRequest,
    RefreshTokenRequest,
    AccessTokenResponse,
    CurrentUserResponse,
    TokenValidationResponse,
    ProfileUpdate,
    PasswordChangeRequest
)
from portal.schemas.error import get_error_responses, get_auth_error_responses
from portal.utils.dependencies import get_auth_service, get_current_active_user, security
from portal.utils.exceptions import UnauthorizedError


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _login_response(user: User, access_token: str, refresh_token: str) -> LoginResponse:
    return LoginResponse(
        user=CurrentUserResponse.model_validate(user.to_dict()),
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60
    )


@router.post(
    "/register",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a customer account",
    responses=get_error_responses(409, 422)
)
async def register(
    data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """Create an agent or brokerage account and sign it in."""
    user = await auth_service.register_customer(data)
    return _login_response(user, *auth_service.create_tokens(user))


@router.post(
    "/admin/register",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a staff account",
    description="Requires the staff signup code.",
    responses=get_error_responses(403, 409, 422)
)
async def register_admin(
    data: AdminRegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    user = await auth_service.register_admin(data)
    return _login_response(user, *auth_service.create_tokens(user))


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="User login",
    description="Authenticate with email and password, returns JWT tokens",
    responses=get_auth_error_responses()
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    return _login_response(*await auth_service.login(login_data.email, login_data.password))


@router.post(
    "/admin/login",
    response_model=LoginResponse,
    summary="Staff console login",
    description="Like /login, but rejects customer accounts",
    responses=get_auth_error_responses()
)
async def admin_login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    return _login_response(*await auth_service.admin_login(login_data.email, login_data.password))


@router.post(
    "/refresh",
    response_model=AccessTokenResponse,
    summary="Refresh access token",
    responses=get_auth_error_responses()
)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AccessTokenResponse:
    access_token = await auth_service.refresh_access_token(refresh_data.refresh_token)
    return AccessTokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60
    )


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Get current user",
    responses=get_auth_error_responses()
)
async def get_current_user_info(current_user: User = Depends(get_current_active_user)) -> CurrentUserResponse:
    return CurrentUserResponse.model_validate(current_user.to_dict())


@router.put(
    "/me",
    response_model=CurrentUserResponse,
    summary="Update profile",
    description="Update name, brokerage, avatar and phone",
    responses=get_error_responses(400, 401, 422)
)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> CurrentUserResponse:
    user = await auth_service.update_profile(current_user, data)
    return CurrentUserResponse.model_validate(user.to_dict())


@router.post(
    "/change-password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change password",
    responses=get_error_responses(401, 422)
)
async def change_password(
    data: PasswordChangeRequest,
    current_user: User = Depends(get_current_active_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> None:
    await auth_service.change_password(current_user, data.current_password, data.new_password)


@router.get(
    "/validate",
    response_model=TokenValidationResponse,
    summary="Validate access token"
)
async def validate_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> TokenValidationResponse:
    """Report whether the bearer token is usable. Never fails for a bad token."""
    if not credentials:
        return TokenValidationResponse(valid=False)
    try:
        payload = auth_service.validate_token(credentials.credentials)
    except UnauthorizedError:
        return TokenValidationResponse(valid=False)

    return TokenValidationResponse(
        valid=True,
        user_id=payload.user_id,
        email=payload.email,
        role=payload.role,
        expires_at=payload.exp
    )


@router.post(
    "/logout",
    status_code=status.HTTP_200_OK,
    summary="Logout",
    description="Tokens are stateless; the client discards them."
)
async def logout(current_user: User = Depends(get_current_active_user)) -> dict:
    return {"message": "Successfully logged out", "user_id": str(current_user.id)}
