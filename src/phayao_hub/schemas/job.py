"""Job board Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class JobCreate(BaseModel):
    """Schema for posting a vacancy."""

    category_id: int | None = None
    title: str = Field(..., min_length=1, max_length=255)
    company_name: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=10000)
    job_type: str | None = Field(None, max_length=20)
    salary_min: float | None = Field(None, ge=0)
    salary_max: float | None = Field(None, ge=0)
    salary_type: str | None = Field(None, max_length=20)
    location: str | None = Field(None, max_length=255)
    contact_email: str | None = Field(None, max_length=255)
    contact_phone: str | None = Field(None, max_length=50)
    contact_line: str | None = Field(None, max_length=100)
    requirements: str | None = Field(None, max_length=5000)
    benefits: str | None = Field(None, max_length=5000)

    @model_validator(mode="after")
    def _check_salary_range(self) -> "JobCreate":
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            raise ValueError("salary_min must not exceed salary_max")
        return self


class JobSummary(BaseModel):
    """Schema for jobs in list views."""

    id: int
    category_id: int | None
    title: str
    company_name: str | None
    description: str | None
    job_type: str | None
    salary_min: float | None
    salary_max: float | None
    salary_type: str | None
    location: str | None
    status: str
    view_count: int
    created_at: datetime
    poster_full_name: str | None = None
    category_name: str | None = None
    category_slug: str | None = None

    model_config = ConfigDict(from_attributes=True)


class JobDetail(JobSummary):
    """Schema for a single job, including contact details."""

    contact_email: str | None = None
    contact_phone: str | None = None
    contact_line: str | None = None
    requirements: str | None = None
    benefits: str | None = None
