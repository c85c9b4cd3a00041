# src/phayao_hub/api/v1/endpoints/admin.py
"""Administrator endpoints: account management, moderation and site totals."""

from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import desc, func, or_, update
from sqlalchemy.orm import Session

from phayao_hub.api.v1.dependencies import AdminUserDep, SessionDep, pagination
from phayao_hub.core.security import hash_password
from phayao_hub.db.time import utcnow
from phayao_hub.models import Comment, CommunityPost, Job, MarketItem, User
from phayao_hub.models.user import ROLES, STATUS_ACTIVE, USER_STATUSES
from phayao_hub.schemas.admin import (
    AdminUserCreate,
    AdminUserResponse,
    AdminUserUpdate,
    DashboardStats,
    PasswordReset,
    RoleUpdate,
)
from phayao_hub.schemas.common import MessageResponse, Page

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

RECENT_WINDOW = timedelta(days=7)
USER_NOT_FOUND = "ไม่พบผู้ใช้"


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    return user


def _check_role(role: str) -> None:
    if role not in ROLES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Role ไม่ถูกต้อง")


@router.get("/stats", response_model=DashboardStats)
async def get_stats(admin: AdminUserDep, db: SessionDep) -> DashboardStats:
    """Return site totals plus sign-ups and new listings over the last week."""
    since = utcnow() - RECENT_WINDOW

    def count(model, *criteria) -> int:
        return db.query(func.count(model.id)).filter(*criteria).scalar() or 0

    return DashboardStats(
        total_users=count(User),
        total_items=count(MarketItem),
        total_jobs=count(Job),
        total_posts=count(CommunityPost),
        new_users_this_week=count(User, User.created_at >= since),
        new_items_this_week=count(MarketItem, MarketItem.created_at >= since),
    )


# --- Users ---


@router.get("/users", response_model=Page[AdminUserResponse])
async def list_users(
    admin: AdminUserDep,
    db: SessionDep,
    search: str | None = Query(None, max_length=100),
    role: str | None = Query(None),
    limit: int = Query(50),
    offset: int = Query(0),
) -> Page[AdminUserResponse]:
    """List accounts newest first, filtered by role or a username/email/name match."""
    safe_limit, safe_offset = pagination(limit, offset, default=50)

    query = db.query(User)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                User.username.ilike(pattern),
                User.email.ilike(pattern),
                User.full_name.ilike(pattern),
            )
        )
    if role:
        query = query.filter(User.role == role)

    total = query.count()
    users = (
        query.order_by(desc(User.created_at), desc(User.id))
        .offset(safe_offset)
        .limit(safe_limit)
        .all()
    )
    return Page[AdminUserResponse](
        data=[AdminUserResponse.model_validate(user) for user in users],
        total=total,
    )


@router.post("/users", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: AdminUserCreate,
    admin: AdminUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Create an account on someone's behalf.

    Raises:
        HTTPException: 400 on an unknown role or a taken username/email
    """
    _check_role(payload.role)
    existing = (
        db.query(User.id)
        .filter(or_(User.username == payload.username, User.email == payload.email))
        .first()
    )
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username หรือ Email นี้มีอยู่ในระบบแล้ว",
        )

    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=hash_password(payload.password),
        full_name=payload.full_name or None,
        phone=payload.phone or None,
        role=payload.role,
        status=STATUS_ACTIVE,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Admin %s created user %s (id=%s)", admin.id, user.username, user.id)
    return MessageResponse(message="สร้างผู้ใช้สำเร็จ", id=user.id)


@router.put("/users/{user_id}", response_model=MessageResponse)
async def update_user(
    user_id: int,
    payload: AdminUserUpdate,
    admin: AdminUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Replace an account's contact fields and status, and optionally its role.

    A suspended account is refused at login and on every authenticated call.
    """
    user = _get_user(db, user_id)
    if payload.status not in USER_STATUSES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="สถานะไม่ถูกต้อง")
    if payload.role is not None:
        _check_role(payload.role)
        user.role = payload.role

    if user.status != payload.status:
        logger.info(
            "Admin %s changed status of user %s: %s -> %s",
            admin.id, user.id, user.status, payload.status,
        )
    user.full_name = payload.full_name or None
    user.phone = payload.phone or None
    user.status = payload.status
    db.commit()
    return MessageResponse(message="อัพเดทข้อมูลผู้ใช้สำเร็จ", id=user.id)


@router.put("/users/{user_id}/role", response_model=MessageResponse)
async def update_user_role(
    user_id: int,
    payload: RoleUpdate,
    admin: AdminUserDep,
    db: SessionDep,
) -> MessageResponse:
    _check_role(payload.role)
    user = _get_user(db, user_id)
    user.role = payload.role
    db.commit()
    return MessageResponse(message="อัพเดท role สำเร็จ", id=user.id)


@router.put("/users/{user_id}/password", response_model=MessageResponse)
async def reset_user_password(
    user_id: int,
    payload: PasswordReset,
    admin: AdminUserDep,
    db: SessionDep,
) -> MessageResponse:
    user = _get_user(db, user_id)
    user.password_hash = hash_password(payload.password)
    db.commit()
    return MessageResponse(message="รีเซ็ตรหัสผ่านสำเร็จ", id=user.id)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int, admin: AdminUserDep, db: SessionDep) -> MessageResponse:
    """Delete an account; its listings go with it through the foreign keys.

    Raises:
        HTTPException: 400 when an admin targets their own account, 404 if missing
    """
    if user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="ไม่สามารถลบบัญชีของตัวเองได้",
        )
    user = _get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("Admin %s deleted user %s", admin.id, user_id)
    return MessageResponse(message="ลบผู้ใช้สำเร็จ")


# --- Moderation ---


@router.delete("/posts/{post_id}", response_model=MessageResponse)
async def delete_post(post_id: int, admin: AdminUserDep, db: SessionDep) -> MessageResponse:
    post = db.get(CommunityPost, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="ไม่พบโพสต์")
    db.query(Comment).filter(Comment.post_id == post_id).delete(synchronize_session=False)
    db.delete(post)
    db.commit()
    return MessageResponse(message="ลบโพสต์สำเร็จ")


@router.delete("/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(comment_id: int, admin: AdminUserDep, db: SessionDep) -> MessageResponse:
    """Remove a comment and keep its post's `comment_count` in step."""
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="ไม่พบความคิดเห็น")
    post_id = comment.post_id
    db.delete(comment)
    db.execute(
        update(CommunityPost)
        .where(CommunityPost.id == post_id, CommunityPost.comment_count > 0)
        .values(comment_count=CommunityPost.comment_count - 1)
    )
    db.commit()
    return MessageResponse(message="ลบความคิดเห็นสำเร็จ")
