"""Shared API dependencies for authentication and common functionality."""

import logging
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session

from phayao_hub.core.security import decode_access_token
from phayao_hub.db.session import get_db
from phayao_hub.models import User
from phayao_hub.services.view_guard import ViewCountGuard, get_view_guard
from phayao_hub.services.views import ItemNotFoundError, view_incrementer

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for JWT authentication; missing headers are handled below
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
ViewGuardDep = Annotated[ViewCountGuard, Depends(get_view_guard)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_user_id(subject: object) -> int:
    """Decode the numeric user ID stored in the token subject.

    Raises:
        HTTPException: If the subject is missing or not an integer
    """
    try:
        return int(str(subject))
    except (TypeError, ValueError) as err:
        raise _unauthorized("Token ไม่ถูกต้อง") from err


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from the bearer token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired, or the
            user no longer exists; 403 if the account is suspended
    """
    if credentials is None:
        raise _unauthorized("ไม่พบ token การยืนยันตัวตน")

    try:
        payload = decode_access_token(credentials.credentials)
    except ExpiredSignatureError as err:
        raise _unauthorized("Token หมดอายุ กรุณาเข้าสู่ระบบใหม่") from err
    except JWTError as err:
        raise _unauthorized("Token ไม่ถูกต้อง") from err

    user_id = _decode_user_id(payload.get("sub"))
    user = db.get(User, user_id)
    if user is None:
        raise _unauthorized("User not found")

    if user.is_suspended:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="บัญชีของคุณถูกระงับการใช้งาน",
        )
    return user


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> User | None:
    """Return the authenticated user if a valid token is present, else None.

    Invalid or expired tokens are treated as anonymous access.
    """
    if credentials is None:
        return None
    try:
        payload = decode_access_token(credentials.credentials)
        user_id = int(str(payload.get("sub")))
    except (JWTError, TypeError, ValueError):
        logger.debug("Ignoring unusable bearer token on optional-auth route")
        return None
    return db.get(User, user_id)


def require_admin(user: Annotated[User, Depends(get_current_user)]) -> User:
    """Allow only accounts with the admin role."""
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="ไม่มีสิทธิ์เข้าถึง",
        )
    return user


# Type aliases for user dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
AdminUserDep = Annotated[User, Depends(require_admin)]


def pagination(limit: int | None, offset: int | None, *, default: int = 20) -> tuple[int, int]:
    """Clamp user-supplied paging values to safe bounds (limit 1..100, offset >= 0)."""
    safe_limit = default if not limit or limit < 1 else min(limit, 100)
    safe_offset = offset if offset and offset > 0 else 0
    return safe_limit, safe_offset


async def count_view(
    guard: ViewCountGuard,
    request: Request,
    response: Response,
    db: Session,
    model: Any,
    item_type: str,
    item_id: int,
    *,
    not_found_detail: str = "ไม่พบข้อมูล",
) -> bool:
    """Count a detail-page view through the guard, mapping a vanished row to 404."""
    try:
        return await guard.guarded_increment(
            request,
            response,
            item_type,
            item_id,
            view_incrementer(db, model, item_type, item_id),
        )
    except ItemNotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=not_found_detail,
        ) from err
