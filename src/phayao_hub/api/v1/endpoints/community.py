# src/phayao_hub/api/v1/endpoints/community.py
"""Community board endpoints for the Phayao Hub API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request, Response, status
from sqlalchemy import desc, or_, update

from phayao_hub.api.v1.dependencies import (
    CurrentUserDep,
    OptionalUserDep,
    SessionDep,
    ViewGuardDep,
    count_view,
    pagination,
)
from phayao_hub.models import Comment, CommunityPost, Favorite
from phayao_hub.models.community import POST_STATUS_ACTIVE
from phayao_hub.schemas.common import MessageResponse, Page
from phayao_hub.schemas.community import (
    CommentCreate,
    CommentResponse,
    CommunityPostCreate,
    CommunityPostResponse,
)

router = APIRouter(prefix="/community-posts", tags=["community"])

POST_NOT_FOUND = "ไม่พบโพสต์"


@router.get("/", response_model=Page[CommunityPostResponse])
async def list_community_posts(
    db: SessionDep,
    current_user: OptionalUserDep,
    category: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=100),
    limit: int = Query(20),
    offset: int = Query(0),
) -> Page[CommunityPostResponse]:
    """List threads newest first, flagging the ones the caller has bookmarked."""
    safe_limit, safe_offset = pagination(limit, offset)

    query = db.query(CommunityPost).filter(
        CommunityPost.status == (status_filter or POST_STATUS_ACTIVE)
    )
    if category:
        query = query.filter(CommunityPost.category == category)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(CommunityPost.title.ilike(pattern), CommunityPost.content.ilike(pattern))
        )

    total = query.count()
    posts = (
        query.order_by(desc(CommunityPost.created_at), desc(CommunityPost.id))
        .offset(safe_offset)
        .limit(safe_limit)
        .all()
    )

    favorited: set[int] = set()
    if current_user is not None and posts:
        rows = (
            db.query(Favorite.item_id)
            .filter(
                Favorite.user_id == current_user.id,
                Favorite.item_type == "post",
                Favorite.item_id.in_([post.id for post in posts]),
            )
            .all()
        )
        favorited = {row.item_id for row in rows}

    data = [
        CommunityPostResponse.model_validate(post).model_copy(
            update={"is_favorited": post.id in favorited}
        )
        for post in posts
    ]
    return Page[CommunityPostResponse](data=data, total=total)


@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_community_post(
    payload: CommunityPostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Start a new thread under the signed-in member."""
    post = CommunityPost(
        user_id=current_user.id,
        status=POST_STATUS_ACTIVE,
        **payload.model_dump(),
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return MessageResponse(message="สร้างโพสต์สำเร็จ", id=post.id)


@router.get("/{post_id}", response_model=CommunityPostResponse)
async def get_community_post(
    post_id: int,
    request: Request,
    response: Response,
    db: SessionDep,
    guard: ViewGuardDep,
) -> CommunityPost:
    """Return a single thread and count the view.

    Raises:
        HTTPException: 404 if the post does not exist
    """
    post = db.get(CommunityPost, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=POST_NOT_FOUND)

    await count_view(
        guard, request, response, db, CommunityPost, "post", post_id,
        not_found_detail=POST_NOT_FOUND,
    )
    return post


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(post_id: int, db: SessionDep) -> list[Comment]:
    """Return a thread's comments, oldest first."""
    return (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at, Comment.id)
        .all()
    )


@router.post(
    "/{post_id}/comments",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Reply to a thread and bump its comment counter.

    Raises:
        HTTPException: 404 if the post does not exist
    """
    if db.get(CommunityPost, post_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=POST_NOT_FOUND)

    comment = Comment(user_id=current_user.id, post_id=post_id, content=payload.content)
    db.add(comment)
    db.execute(
        update(CommunityPost)
        .where(CommunityPost.id == post_id)
        .values(comment_count=CommunityPost.comment_count + 1)
    )
    db.commit()
    db.refresh(comment)
    return MessageResponse(message="แสดงความคิดเห็นสำเร็จ", id=comment.id)
