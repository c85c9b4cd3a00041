# src/phayao_hub/api/v1/endpoints/auth.py
"""Authentication endpoints for the Phayao Hub API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import or_

from phayao_hub.api.v1.dependencies import CurrentUserDep, SessionDep
from phayao_hub.core.security import create_access_token, hash_password, verify_password
from phayao_hub.models import User
from phayao_hub.models.user import ROLE_USER, STATUS_ACTIVE
from phayao_hub.schemas.common import MessageResponse
from phayao_hub.schemas.user import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def issue_token(user: User) -> str:
    """Create an access token carrying the claims the frontend reads."""
    return create_access_token(
        user.id,
        extra_claims={
            "username": user.username,
            "email": user.email,
            "role": user.role,
            "status": user.status,
        },
    )


@router.post(
    "/register",
    summary="Create a new account",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
)
async def register_user(payload: RegisterRequest, db: SessionDep) -> AuthResponse:
    """Register a member and sign them in.

    Raises:
        HTTPException: 400 if the username or email is already taken
    """
    existing = (
        db.query(User.id)
        .filter(or_(User.username == payload.username, User.email == payload.email))
        .first()
    )
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="ชื่อผู้ใช้หรืออีเมลนี้ถูกใช้งานแล้ว",
        )

    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=hash_password(payload.password),
        full_name=payload.full_name or None,
        phone=payload.phone or None,
        role=ROLE_USER,
        status=STATUS_ACTIVE,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s (id=%s)", user.username, user.id)

    return AuthResponse(
        message="สมัครสมาชิกสำเร็จ",
        access_token=issue_token(user),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", summary="Sign in with username or email", response_model=AuthResponse)
async def login_user(payload: LoginRequest, db: SessionDep) -> AuthResponse:
    """Verify credentials and return an access token.

    Raises:
        HTTPException: 401 on unknown user or wrong password, 403 if suspended
    """
    user = (
        db.query(User)
        .filter(or_(User.username == payload.username, User.email == payload.username))
        .first()
    )
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("Failed login for %s", payload.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="ชื่อผู้ใช้หรือรหัสผ่านไม่ถูกต้อง",
        )

    if user.is_suspended:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="บัญชีของคุณถูกระงับการใช้งาน กรุณาติดต่อผู้ดูแลระบบ",
        )

    return AuthResponse(
        message="เข้าสู่ระบบสำเร็จ",
        access_token=issue_token(user),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUserDep) -> User:
    """Return the signed-in member's profile."""
    return current_user


@router.put("/profile", response_model=MessageResponse)
async def update_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Replace the editable profile fields; omitted fields are cleared."""
    current_user.full_name = payload.full_name or None
    current_user.phone = payload.phone or None
    current_user.avatar_url = payload.avatar_url or None
    db.commit()
    return MessageResponse(message="อัพเดทข้อมูลสำเร็จ")


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    payload: ChangePasswordRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Change the password after verifying the current one.

    Raises:
        HTTPException: 401 if the current password does not match
    """
    if not verify_password(payload.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="รหัสผ่านปัจจุบันไม่ถูกต้อง",
        )

    current_user.password_hash = hash_password(payload.new_password)
    db.commit()
    return MessageResponse(message="เปลี่ยนรหัสผ่านสำเร็จ")
