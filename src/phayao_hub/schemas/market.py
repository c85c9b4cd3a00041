"""Marketplace Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MarketItemCreate(BaseModel):
    """Schema for listing a new item for sale."""

    category_id: int | None = None
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    price: float = Field(..., ge=0)
    condition_type: str | None = Field(None, max_length=20)
    location: str | None = Field(None, max_length=255)
    contact_phone: str | None = Field(None, max_length=50)
    contact_line: str | None = Field(None, max_length=100)


class MarketItemUpdate(MarketItemCreate):
    """Schema for replacing an owned market item.

    When `images` is given the gallery is replaced and the first URL becomes
    the primary image; when omitted the gallery is left alone.
    """

    images: list[str] | None = Field(None, max_length=20)


class MarketItemSummary(BaseModel):
    """Schema for market items in list views."""

    id: int
    category_id: int | None
    title: str
    description: str | None
    price: float
    condition_type: str | None
    location: str | None
    status: str
    view_count: int
    created_at: datetime
    seller_full_name: str | None = None
    category_name: str | None = None
    category_slug: str | None = None
    primary_image: str | None = None

    model_config = ConfigDict(from_attributes=True)


class MarketItemDetail(MarketItemSummary):
    """Schema for a single market item, including contact details."""

    contact_phone: str | None = None
    contact_line: str | None = None


class MarketImageResponse(BaseModel):
    """Schema for an image attached to a market item."""

    id: int
    item_id: int
    image_url: str
    is_primary: bool
    display_order: int

    model_config = ConfigDict(from_attributes=True)


class OwnMarketItemDetail(MarketItemDetail):
    """An owner's view of their item, gallery included, for the edit form."""

    images: list[MarketImageResponse] = []
