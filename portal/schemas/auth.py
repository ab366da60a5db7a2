"""
Pydantic schemas for authentication and account requests and responses.
Handles registration, login, token refresh and profile updates.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime
from portal.models.user import UserRole


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(..., description="User's email address", examples=["agent@example.com"])
    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="User's password (minimum 8 characters)",
        examples=["securepassword123"]
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class RegisterRequest(BaseModel):
    """Customer self-registration schema."""

    email: EmailStr = Field(..., description="Email address", examples=["agent@example.com"])
    password: str = Field(..., min_length=8, max_length=128)
    confirm_password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=2, max_length=255, examples=["Jordan Reyes"])
    brokerage: Optional[str] = Field(None, max_length=255, examples=["Harbour Realty"])
    phone: Optional[str] = Field(None, max_length=32)
    role: UserRole = Field(UserRole.AGENT, description="Customer role (agent or brokerage_admin)")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v):
        if not v.strip():
            raise ValueError("Full name cannot be empty")
        return v.strip()

    @field_validator("role")
    @classmethod
    def validate_customer_role(cls, v):
        """Staff accounts cannot be self-registered through the customer form."""
        if v == UserRole.UPCA_ADMIN:
            raise ValueError("Staff accounts must register through the admin registration")
        return v

    @model_validator(mode="after")
    def validate_passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class AdminRegisterRequest(BaseModel):
    """Staff registration schema, gated by a shared signup code."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    confirm_password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=2, max_length=255)
    admin_code: str = Field(..., min_length=1, description="Staff signup code")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()

    @model_validator(mode="after")
    def validate_passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class RefreshTokenRequest(BaseModel):
    """Refresh token request schema."""

    refresh_token: str = Field(..., description="Valid refresh token")


class AccessTokenResponse(BaseModel):
    """Access token response schema."""

    access_token: str = Field(..., description="New JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration time in seconds", examples=[1800])


class CurrentUserResponse(BaseModel):
    """Current user information (excluding sensitive data)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: EmailStr
    full_name: str
    brokerage: Optional[str] = None
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class LoginResponse(BaseModel):
    """Login response with user information and tokens."""

    user: CurrentUserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenValidationResponse(BaseModel):
    """Token validation response schema."""

    valid: bool
    user_id: Optional[str] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None
    expires_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """Account page profile update."""

    full_name: Optional[str] = Field(None, min_length=2, max_length=255)
    brokerage: Optional[str] = Field(None, max_length=255)
    avatar_url: Optional[str] = Field(None, max_length=1024)
    phone: Optional[str] = Field(None, max_length=32)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Full name cannot be empty")
        return v.strip() if v else v


class PasswordChangeRequest(BaseModel):
    """Password change request."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)
