"""Pydantic schemas for the admin dashboard."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .user import USERNAME_PATTERN


class DashboardStats(BaseModel):
    """Site-wide totals shown on the dashboard landing page."""

    total_users: int
    total_items: int
    total_jobs: int
    total_posts: int
    new_users_this_week: int
    new_items_this_week: int


class AdminUserResponse(BaseModel):
    """Account row as seen by an administrator."""

    id: int
    username: str
    email: str
    full_name: str | None = None
    phone: str | None = None
    role: str
    status: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AdminUserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    full_name: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    role: str = Field("user", max_length=20)


class AdminUserUpdate(BaseModel):
    """Replaceable account fields; `status` suspends or reinstates the account."""

    full_name: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    status: str = Field(..., min_length=1, max_length=20)
    role: str | None = Field(None, max_length=20)


class RoleUpdate(BaseModel):
    role: str = Field(..., min_length=1, max_length=20)


class PasswordReset(BaseModel):
    password: str = Field(..., min_length=6, max_length=128)
