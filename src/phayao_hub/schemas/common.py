"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """A page of results together with the unpaginated total."""

    data: list[T]
    total: int = Field(..., ge=0, description="Number of rows matching the filters")


class MessageResponse(BaseModel):
    """Acknowledgement returned by write endpoints."""

    message: str
    id: int | None = Field(None, description="Identifier of the created row, if any")


class StatusUpdate(BaseModel):
    """Payload for changing the lifecycle status of a listing."""

    status: str = Field(..., min_length=1, max_length=20)


class ViewRecorded(BaseModel):
    """Outcome of an explicit view ping."""

    counted: bool = Field(..., description="False when the view was already counted recently")
