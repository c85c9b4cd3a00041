"""Favorites and activity feed Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FavoriteItemType = Literal["market", "job", "post", "guide"]


class FavoriteToggle(BaseModel):
    """Schema for adding or removing a bookmark."""

    item_type: FavoriteItemType
    item_id: int = Field(..., ge=1)


class FavoriteStatus(BaseModel):
    """Whether the caller has bookmarked an item."""

    is_favorited: bool
    message: str | None = None


class FavoriteResponse(BaseModel):
    id: int
    item_type: str
    item_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ActivityEntry(BaseModel):
    """One of the caller's own recent listings."""

    id: int
    title: str
    type: Literal["market", "job", "post"]
    created_at: datetime
