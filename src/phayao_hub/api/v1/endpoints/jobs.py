# src/phayao_hub/api/v1/endpoints/jobs.py
"""Job board endpoints for the Phayao Hub API."""

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
from phayao_hub.models import Job
from phayao_hub.models.job import JOB_STATUS_OPEN
from phayao_hub.schemas.common import MessageResponse, Page
from phayao_hub.schemas.job import JobCreate, JobDetail, JobSummary

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("/", response_model=Page[JobSummary])
async def list_jobs(
    db: SessionDep,
    category_id: int | None = Query(None),
    job_type: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=100),
    limit: int = Query(20),
    offset: int = Query(0),
) -> Page[JobSummary]:
    """List vacancies, newest first; only `open` jobs unless a status is given."""
    safe_limit, safe_offset = pagination(limit, offset)

    query = db.query(Job).filter(Job.status == (status_filter or JOB_STATUS_OPEN))
    if category_id:
        query = query.filter(Job.category_id == category_id)
    if job_type:
        query = query.filter(Job.job_type == job_type)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Job.title.ilike(pattern),
                Job.description.ilike(pattern),
                Job.company_name.ilike(pattern),
            )
        )

    total = query.count()
    jobs = (
        query.order_by(desc(Job.created_at), desc(Job.id))
        .offset(safe_offset)
        .limit(safe_limit)
        .all()
    )
    return Page[JobSummary](
        data=[JobSummary.model_validate(job) for job in jobs],
        total=total,
    )


@router.get("/{job_id}", response_model=JobDetail)
async def get_job(
    job_id: int,
    request: Request,
    response: Response,
    db: SessionDep,
    guard: ViewGuardDep,
) -> Job:
    """Return a single vacancy and count the view.

    Raises:
        HTTPException: 404 if the job does not exist
    """
    job = db.get(Job, job_id)
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="ไม่พบงาน")

    await count_view(guard, request, response, db, Job, "job", job_id, not_found_detail="ไม่พบงาน")
    return job


@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    payload: JobCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Post a vacancy under the signed-in member."""
    job = Job(user_id=current_user.id, status=JOB_STATUS_OPEN, **payload.model_dump())
    db.add(job)
    db.commit()
    db.refresh(job)
    return MessageResponse(message="เพิ่มประกาศงานสำเร็จ", id=job.id)
