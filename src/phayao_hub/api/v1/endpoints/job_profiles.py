# src/phayao_hub/api/v1/endpoints/job_profiles.py
"""Job seeker profile endpoints for the Phayao Hub API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, Response, status
from sqlalchemy import desc
from sqlalchemy.orm import Session

from phayao_hub.api.v1.dependencies import (
    CurrentUserDep,
    SessionDep,
    ViewGuardDep,
    count_view,
)
from phayao_hub.models import JobProfile
from phayao_hub.schemas.common import MessageResponse, ViewRecorded
from phayao_hub.schemas.job_profile import JobProfileCreate, JobProfileResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job-profiles", tags=["job-profiles"])

PROFILE_NOT_FOUND = "Profile not found"


def _owned_profile(db: Session, profile_id: int, user_id: int) -> JobProfile:
    profile = db.get(JobProfile, profile_id)
    if profile is None or profile.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found or unauthorized",
        )
    return profile


@router.get("/", response_model=list[JobProfileResponse])
async def list_job_profiles(db: SessionDep) -> list[JobProfile]:
    """List every published job seeker profile, newest first."""
    return (
        db.query(JobProfile)
        .order_by(desc(JobProfile.created_at), desc(JobProfile.id))
        .all()
    )


@router.get("/me", response_model=JobProfileResponse | None)
async def get_my_job_profile(current_user: CurrentUserDep, db: SessionDep) -> JobProfile | None:
    """Return the caller's profile, or null when they have not created one."""
    return db.query(JobProfile).filter(JobProfile.user_id == current_user.id).first()


@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_job_profile(
    payload: JobProfileCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Publish the caller's profile.

    Raises:
        HTTPException: 400 if the caller already has a profile
    """
    exists = db.query(JobProfile.id).filter(JobProfile.user_id == current_user.id).first()
    if exists is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Profile already exists",
        )

    profile = JobProfile(user_id=current_user.id, **payload.model_dump())
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return MessageResponse(message="Profile created", id=profile.id)


@router.put("/{profile_id}", response_model=MessageResponse)
async def update_job_profile(
    profile_id: int,
    payload: JobProfileCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Replace all fields of the caller's own profile."""
    profile = _owned_profile(db, profile_id, current_user.id)
    for field, value in payload.model_dump().items():
        setattr(profile, field, value)
    db.commit()
    return MessageResponse(message="Profile updated", id=profile.id)


@router.delete("/{profile_id}", response_model=MessageResponse)
async def delete_job_profile(
    profile_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Remove the caller's own profile."""
    profile = _owned_profile(db, profile_id, current_user.id)
    db.delete(profile)
    db.commit()
    return MessageResponse(message="Profile deleted")


@router.post("/{profile_id}/view", response_model=ViewRecorded)
async def record_job_profile_view(
    profile_id: int,
    request: Request,
    response: Response,
    db: SessionDep,
    guard: ViewGuardDep,
) -> ViewRecorded:
    """Count a profile view once per client per window.

    The row is not looked up first; a missing profile surfaces from the
    increment itself and becomes a 404 without a marker being issued.
    """
    counted = await count_view(
        guard, request, response, db, JobProfile, "profile", profile_id,
        not_found_detail=PROFILE_NOT_FOUND,
    )
    return ViewRecorded(counted=counted)
