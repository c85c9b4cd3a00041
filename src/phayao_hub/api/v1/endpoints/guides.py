# src/phayao_hub/api/v1/endpoints/guides.py
"""Local guide directory endpoints for the Phayao Hub API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request, Response, status
from pydantic import BaseModel, Field
from sqlalchemy import desc

from phayao_hub.api.v1.dependencies import (
    AdminUserDep,
    SessionDep,
    ViewGuardDep,
    count_view,
    pagination,
)
from phayao_hub.models import Guide, GuideImage
from phayao_hub.models.guide import GUIDE_STATUS_PUBLISHED
from phayao_hub.schemas.common import MessageResponse
from phayao_hub.schemas.guide import GuideDetail, GuideResponse

router = APIRouter(prefix="/guides", tags=["guides"])


class GuideCreate(BaseModel):
    """Schema for adding a guide entry (admin only)."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    content: str | None = Field(None, max_length=20000)
    category: str | None = Field(None, max_length=50)
    image_url: str | None = Field(None, max_length=1024)
    location: str | None = Field(None, max_length=255)
    map_url: str | None = Field(None, max_length=1024)
    is_featured: bool = False
    images: list[str] = Field(default_factory=list, max_length=20)


@router.get("/", response_model=list[GuideResponse])
async def list_guides(
    db: SessionDep,
    category: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    is_featured: bool | None = Query(None),
    sort: str | None = Query(None, description="'latest' or featured-first by default"),
    limit: int = Query(50),
    offset: int = Query(0),
) -> list[Guide]:
    """List published guide entries, featured first unless `sort=latest`."""
    safe_limit, safe_offset = pagination(limit, offset, default=50)

    query = db.query(Guide).filter(Guide.status == (status_filter or GUIDE_STATUS_PUBLISHED))
    if category:
        query = query.filter(Guide.category == category)
    if is_featured:
        query = query.filter(Guide.is_featured.is_(True))

    if sort == "latest":
        query = query.order_by(desc(Guide.created_at), desc(Guide.id))
    else:
        query = query.order_by(desc(Guide.is_featured), desc(Guide.created_at), desc(Guide.id))

    return query.offset(safe_offset).limit(safe_limit).all()


@router.get("/{guide_id}", response_model=GuideDetail)
async def get_guide(
    guide_id: int,
    request: Request,
    response: Response,
    db: SessionDep,
    guard: ViewGuardDep,
) -> Guide:
    """Return a guide entry with its gallery and count the view.

    Raises:
        HTTPException: 404 if the entry does not exist
    """
    guide = db.get(Guide, guide_id)
    if guide is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="ไม่พบข้อมูล")

    await count_view(guard, request, response, db, Guide, "guide", guide_id)
    return guide


@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_guide(
    payload: GuideCreate,
    admin: AdminUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Publish a guide entry with an optional gallery."""
    guide = Guide(
        status=GUIDE_STATUS_PUBLISHED,
        **payload.model_dump(exclude={"images"}),
    )
    guide.images = [
        GuideImage(image_url=url, display_order=position)
        for position, url in enumerate(payload.images)
    ]
    db.add(guide)
    db.commit()
    db.refresh(guide)
    return MessageResponse(message="เพิ่มข้อมูลสำเร็จ", id=guide.id)
