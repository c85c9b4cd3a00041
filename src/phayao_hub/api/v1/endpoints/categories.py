# src/phayao_hub/api/v1/endpoints/categories.py
"""Category endpoints for the Phayao Hub API."""

from typing import Literal

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from phayao_hub.api.v1.dependencies import AdminUserDep, SessionDep
from phayao_hub.models import Category
from phayao_hub.schemas.category import CategoryResponse

router = APIRouter(prefix="/categories", tags=["categories"])


class CategoryCreate(BaseModel):
    """Schema for adding a category (admin only)."""

    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")
    type: Literal["market", "job"]


@router.get("/", response_model=list[CategoryResponse])
async def list_categories(
    db: SessionDep,
    type: str | None = Query(None, description="Filter by category type"),
) -> list[Category]:
    """List categories ordered by name, optionally filtered by type."""
    query = db.query(Category)
    if type:
        query = query.filter(Category.type == type)
    return query.order_by(Category.name).all()


@router.post("/", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    admin: AdminUserDep,
    db: SessionDep,
) -> Category:
    """Create a category.

    Raises:
        HTTPException: 400 if the slug is already in use
    """
    if db.query(Category.id).filter(Category.slug == payload.slug).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Category slug already exists",
        )
    category = Category(name=payload.name, slug=payload.slug, type=payload.type)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category
