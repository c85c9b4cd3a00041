"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

USERNAME_PATTERN = r"^[A-Za-z0-9_.]+$"


class RegisterRequest(BaseModel):
    """Schema for creating a new account."""

    username: str = Field(..., min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    full_name: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)


class LoginRequest(BaseModel):
    """Schema for login submissions; `username` also accepts an email address."""

    username: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Public view of an account returned to its owner."""

    id: int
    username: str
    email: str
    full_name: str | None = None
    phone: str | None = None
    avatar_url: str | None = None
    role: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Response returned after successful login or registration."""

    message: str
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type")
    user: UserResponse


class ProfileUpdateRequest(BaseModel):
    """Schema for updating profile information."""

    full_name: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    avatar_url: str | None = Field(None, max_length=1024)


class ChangePasswordRequest(BaseModel):
    """Schema for changing the account password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)

    @field_validator("new_password")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("New password must not be blank")
        return v
