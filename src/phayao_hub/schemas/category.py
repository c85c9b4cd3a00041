"""Category Pydantic schemas."""

from pydantic import BaseModel, ConfigDict


class CategoryResponse(BaseModel):
    """Schema for category information returned by the API."""

    id: int
    name: str
    slug: str
    type: str

    model_config = ConfigDict(from_attributes=True)
