"""Community board Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommunityPostCreate(BaseModel):
    """Schema for starting a discussion thread."""

    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1, max_length=10000)
    category: str | None = Field(None, max_length=50)
    image_url: str | None = Field(None, max_length=1024)


class CommunityPostResponse(BaseModel):
    """Schema for community post information returned by the API."""

    id: int
    title: str
    content: str
    category: str | None
    image_url: str | None
    status: str
    view_count: int
    comment_count: int
    like_count: int
    created_at: datetime
    full_name: str | None = None
    avatar_url: str | None = None
    is_favorited: bool = False

    model_config = ConfigDict(from_attributes=True)


class CommentCreate(BaseModel):
    """Schema for replying to a community post."""

    content: str = Field(..., min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    """Schema for a comment returned by the API."""

    id: int
    content: str
    created_at: datetime
    full_name: str | None = None
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)
