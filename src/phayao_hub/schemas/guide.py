"""Local guide Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class GuideImageResponse(BaseModel):
    id: int
    image_url: str

    model_config = ConfigDict(from_attributes=True)


class GuideResponse(BaseModel):
    """Schema for guide entries in list views."""

    id: int
    title: str
    description: str | None
    category: str | None
    image_url: str | None
    location: str | None
    status: str
    is_featured: bool
    view_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GuideDetail(GuideResponse):
    """Schema for a single guide entry with its gallery."""

    content: str | None = None
    map_url: str | None = None
    images: list[GuideImageResponse] = []
