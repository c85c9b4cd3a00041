# src/phayao_hub/api/v1/endpoints/user.py
"""Signed-in member area: editing own listings, bookmarks and recent activity."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import desc, update
from sqlalchemy.orm import Session

from phayao_hub.api.v1.dependencies import CurrentUserDep, SessionDep
from phayao_hub.db.time import as_utc
from phayao_hub.models import CommunityPost, Favorite, Job, MarketImage, MarketItem, User
from phayao_hub.models.community import POST_STATUSES
from phayao_hub.models.job import JOB_STATUSES
from phayao_hub.models.market import MARKET_STATUSES
from phayao_hub.schemas.common import MessageResponse, StatusUpdate
from phayao_hub.schemas.community import CommunityPostCreate, CommunityPostResponse
from phayao_hub.schemas.favorite import (
    ActivityEntry,
    FavoriteItemType,
    FavoriteResponse,
    FavoriteStatus,
    FavoriteToggle,
)
from phayao_hub.schemas.job import JobCreate, JobDetail
from phayao_hub.schemas.market import MarketItemDetail, MarketItemUpdate, OwnMarketItemDetail

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["user"])

ACTIVITY_LIMIT = 10
ACTIVITY_PER_TYPE = 5


def _owned(
    db: Session,
    model: Any,
    row_id: int,
    user: User,
    detail: str,
    *,
    status_code: int = status.HTTP_403_FORBIDDEN,
) -> Any:
    """Fetch a row the caller owns.

    Raises:
        HTTPException: `status_code` (403 unless overridden) if the row is
            missing or belongs to someone else
    """
    row = db.get(model, row_id)
    if row is None or row.user_id != user.id:
        raise HTTPException(status_code=status_code, detail=detail)
    return row


def _set_status(
    db: Session,
    row: Any,
    new_status: str,
    allowed: tuple[str, ...],
) -> MessageResponse:
    if new_status not in allowed:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="สถานะไม่ถูกต้อง")
    row.status = new_status
    db.commit()
    return MessageResponse(message="อัพเดทสถานะสำเร็จ", id=row.id)


def _list_owned(db: Session, model: Any, user: User) -> list[Any]:
    return (
        db.query(model)
        .filter(model.user_id == user.id)
        .order_by(desc(model.created_at), desc(model.id))
        .all()
    )


# --- Market items ---


@router.get("/market-items", response_model=list[MarketItemDetail])
async def list_my_market_items(current_user: CurrentUserDep, db: SessionDep) -> list[MarketItem]:
    """Return every item the caller has listed, whatever its status."""
    return _list_owned(db, MarketItem, current_user)


@router.get("/market-items/{item_id}", response_model=OwnMarketItemDetail)
async def get_my_market_item(
    item_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MarketItem:
    """Return one of the caller's items with its gallery, without counting a view."""
    return _owned(
        db, MarketItem, item_id, current_user, "ไม่พบสินค้า",
        status_code=status.HTTP_404_NOT_FOUND,
    )


@router.put("/market-items/{item_id}", response_model=MessageResponse)
async def update_my_market_item(
    item_id: int,
    payload: MarketItemUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Replace an item's details, and its gallery when `images` is sent."""
    item = _owned(db, MarketItem, item_id, current_user, "คุณไม่มีสิทธิ์แก้ไขสินค้านี้")
    for field, value in payload.model_dump(exclude={"images"}).items():
        setattr(item, field, value)
    if payload.images is not None:
        item.images = [
            MarketImage(image_url=url, is_primary=position == 0, display_order=position)
            for position, url in enumerate(payload.images)
        ]
    db.commit()
    return MessageResponse(message="อัพเดทสินค้าสำเร็จ", id=item.id)


@router.put("/market-items/{item_id}/status", response_model=MessageResponse)
async def update_my_market_item_status(
    item_id: int,
    payload: StatusUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    item = _owned(db, MarketItem, item_id, current_user, "คุณไม่มีสิทธิ์แก้ไขสินค้านี้")
    return _set_status(db, item, payload.status, MARKET_STATUSES)


@router.delete("/market-items/{item_id}", response_model=MessageResponse)
async def delete_my_market_item(
    item_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    item = _owned(db, MarketItem, item_id, current_user, "คุณไม่มีสิทธิ์ลบสินค้านี้")
    db.delete(item)
    db.commit()
    return MessageResponse(message="ลบสินค้าสำเร็จ")


# --- Jobs ---


@router.get("/jobs", response_model=list[JobDetail])
async def list_my_jobs(current_user: CurrentUserDep, db: SessionDep) -> list[Job]:
    """Return every vacancy the caller has posted."""
    return _list_owned(db, Job, current_user)


@router.get("/jobs/{job_id}", response_model=JobDetail)
async def get_my_job(job_id: int, current_user: CurrentUserDep, db: SessionDep) -> Job:
    return _owned(
        db, Job, job_id, current_user, "ไม่พบประกาศงาน",
        status_code=status.HTTP_404_NOT_FOUND,
    )


@router.put("/jobs/{job_id}", response_model=MessageResponse)
async def update_my_job(
    job_id: int,
    payload: JobCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Replace a vacancy's details; its status and counters are untouched."""
    job = _owned(db, Job, job_id, current_user, "คุณไม่มีสิทธิ์แก้ไขประกาศงานนี้")
    for field, value in payload.model_dump().items():
        setattr(job, field, value)
    db.commit()
    return MessageResponse(message="แก้ไขประกาศงานสำเร็จ", id=job.id)


@router.put("/jobs/{job_id}/status", response_model=MessageResponse)
async def update_my_job_status(
    job_id: int,
    payload: StatusUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    job = _owned(db, Job, job_id, current_user, "คุณไม่มีสิทธิ์แก้ไขประกาศงานนี้")
    return _set_status(db, job, payload.status, JOB_STATUSES)


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
async def delete_my_job(
    job_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    job = _owned(db, Job, job_id, current_user, "คุณไม่มีสิทธิ์ลบประกาศงานนี้")
    db.delete(job)
    db.commit()
    return MessageResponse(message="ลบงานสำเร็จ")


# --- Posts ---


@router.get("/posts", response_model=list[CommunityPostResponse])
async def list_my_posts(current_user: CurrentUserDep, db: SessionDep) -> list[CommunityPost]:
    """Return every thread the caller has started, including hidden ones."""
    return _list_owned(db, CommunityPost, current_user)


@router.put("/posts/{post_id}", response_model=MessageResponse)
async def update_my_post(
    post_id: int,
    payload: CommunityPostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    post = _owned(db, CommunityPost, post_id, current_user, "คุณไม่มีสิทธิ์แก้ไขโพสต์นี้")
    for field, value in payload.model_dump().items():
        setattr(post, field, value)
    db.commit()
    return MessageResponse(message="แก้ไขโพสต์สำเร็จ", id=post.id)


@router.put("/posts/{post_id}/status", response_model=MessageResponse)
async def update_my_post_status(
    post_id: int,
    payload: StatusUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    post = _owned(db, CommunityPost, post_id, current_user, "คุณไม่มีสิทธิ์แก้ไขโพสต์นี้")
    return _set_status(db, post, payload.status, POST_STATUSES)


@router.delete("/posts/{post_id}", response_model=MessageResponse)
async def delete_my_post(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    post = _owned(db, CommunityPost, post_id, current_user, "คุณไม่มีสิทธิ์ลบโพสต์นี้")
    db.delete(post)
    db.commit()
    return MessageResponse(message="ลบโพสต์สำเร็จ")


# --- Favorites ---


@router.post("/favorites", response_model=FavoriteStatus)
async def toggle_favorite(
    payload: FavoriteToggle,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> FavoriteStatus:
    """Add the bookmark if absent, remove it if present.

    Bookmarking a community post also moves its `like_count`, which never
    drops below zero.
    """
    existing = (
        db.query(Favorite)
        .filter(
            Favorite.user_id == current_user.id,
            Favorite.item_type == payload.item_type,
            Favorite.item_id == payload.item_id,
        )
        .first()
    )

    if existing is not None:
        db.delete(existing)
        if payload.item_type == "post":
            db.execute(
                update(CommunityPost)
                .where(CommunityPost.id == payload.item_id, CommunityPost.like_count > 0)
                .values(like_count=CommunityPost.like_count - 1)
            )
        db.commit()
        return FavoriteStatus(is_favorited=False, message="ลบจากรายการโปรดแล้ว")

    db.add(
        Favorite(user_id=current_user.id, item_type=payload.item_type, item_id=payload.item_id)
    )
    if payload.item_type == "post":
        db.execute(
            update(CommunityPost)
            .where(CommunityPost.id == payload.item_id)
            .values(like_count=CommunityPost.like_count + 1)
        )
    db.commit()
    return FavoriteStatus(is_favorited=True, message="เพิ่มในรายการโปรดแล้ว")


@router.get("/favorites", response_model=list[FavoriteResponse])
async def list_favorites(current_user: CurrentUserDep, db: SessionDep) -> list[Favorite]:
    return (
        db.query(Favorite)
        .filter(Favorite.user_id == current_user.id)
        .order_by(desc(Favorite.created_at), desc(Favorite.id))
        .all()
    )


@router.get("/favorites/{item_type}/{item_id}", response_model=FavoriteStatus)
async def check_favorite(
    item_type: FavoriteItemType,
    item_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> FavoriteStatus:
    """Report whether the caller has bookmarked an item."""
    found = (
        db.query(Favorite.id)
        .filter(
            Favorite.user_id == current_user.id,
            Favorite.item_type == item_type,
            Favorite.item_id == item_id,
        )
        .first()
    )
    return FavoriteStatus(is_favorited=found is not None)


# --- Activities ---


@router.get("/activities", response_model=list[ActivityEntry])
async def list_activities(current_user: CurrentUserDep, db: SessionDep) -> list[ActivityEntry]:
    """Return the caller's most recent listings across market, jobs and posts."""
    entries: list[ActivityEntry] = []
    for kind, model in (("market", MarketItem), ("job", Job), ("post", CommunityPost)):
        rows = (
            db.query(model.id, model.title, model.created_at)
            .filter(model.user_id == current_user.id)
            .order_by(desc(model.created_at), desc(model.id))
            .limit(ACTIVITY_PER_TYPE)
            .all()
        )
        entries.extend(
            ActivityEntry(id=row.id, title=row.title, type=kind, created_at=row.created_at)
            for row in rows
        )

    entries.sort(key=lambda entry: as_utc(entry.created_at), reverse=True)
    return entries[:ACTIVITY_LIMIT]
