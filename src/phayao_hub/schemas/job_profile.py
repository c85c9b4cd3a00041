"""Job seeker profile Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class JobProfileCreate(BaseModel):
    """Schema for creating or replacing a job seeker profile."""

    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(None, max_length=50)
    address: str | None = Field(None, max_length=2000)
    experience: str | None = Field(None, max_length=5000)
    education: str | None = Field(None, max_length=5000)
    skills: str | None = Field(None, max_length=2000)
    resume_url: str | None = Field(None, max_length=1024)


class JobProfileResponse(BaseModel):
    """Schema for a job seeker profile returned by the API."""

    id: int
    user_id: int
    full_name: str
    email: str
    phone: str | None
    address: str | None
    experience: str | None
    education: str | None
    skills: str | None
    resume_url: str | None
    view_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
