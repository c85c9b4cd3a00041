# src/phayao_hub/api/v1/endpoints/market.py
"""Secondhand marketplace endpoints for the Phayao Hub API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request, Response, status
from sqlalchemy import desc, or_

from phayao_hub.api.v1.dependencies import (
    CurrentUserDep,
    SessionDep,
    ViewGuardDep,
    count_view,
    pagination,
)
from phayao_hub.models import MarketImage, MarketItem
from phayao_hub.models.market import MARKET_STATUS_AVAILABLE
from phayao_hub.schemas.common import MessageResponse, Page
from phayao_hub.schemas.market import (
    MarketImageResponse,
    MarketItemCreate,
    MarketItemDetail,
    MarketItemSummary,
)

router = APIRouter(prefix="/market-items", tags=["market"])


@router.get("/", response_model=Page[MarketItemSummary])
async def list_market_items(
    db: SessionDep,
    category_id: int | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=100),
    limit: int = Query(20),
    offset: int = Query(0),
) -> Page[MarketItemSummary]:
    """List items for sale, newest first.

    Only `available` items are returned unless another status is requested.
    """
    safe_limit, safe_offset = pagination(limit, offset)

    query = db.query(MarketItem).filter(
        MarketItem.status == (status_filter or MARKET_STATUS_AVAILABLE)
    )
    if category_id:
        query = query.filter(MarketItem.category_id == category_id)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(MarketItem.title.ilike(pattern), MarketItem.description.ilike(pattern))
        )

    total = query.count()
    items = (
        query.order_by(desc(MarketItem.created_at), desc(MarketItem.id))
        .offset(safe_offset)
        .limit(safe_limit)
        .all()
    )
    return Page[MarketItemSummary](
        data=[MarketItemSummary.model_validate(item) for item in items],
        total=total,
    )


@router.get("/{item_id}/images", response_model=list[MarketImageResponse])
async def list_market_item_images(item_id: int, db: SessionDep) -> list[MarketImage]:
    """Return an item's images, primary first."""
    return (
        db.query(MarketImage)
        .filter(MarketImage.item_id == item_id)
        .order_by(desc(MarketImage.is_primary), MarketImage.display_order)
        .all()
    )


@router.get("/{item_id}", response_model=MarketItemDetail)
async def get_market_item(
    item_id: int,
    request: Request,
    response: Response,
    db: SessionDep,
    guard: ViewGuardDep,
) -> MarketItem:
    """Return a single item and count the view once per client per window.

    Raises:
        HTTPException: 404 if the item does not exist
    """
    item = db.get(MarketItem, item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="ไม่พบสินค้า")

    await count_view(
        guard, request, response, db, MarketItem, "market", item_id,
        not_found_detail="ไม่พบสินค้า",
    )
    return item


@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_market_item(
    payload: MarketItemCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """List a new item for sale under the signed-in member."""
    item = MarketItem(
        user_id=current_user.id,
        status=MARKET_STATUS_AVAILABLE,
        **payload.model_dump(),
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return MessageResponse(message="เพิ่มสินค้าสำเร็จ", id=item.id)
