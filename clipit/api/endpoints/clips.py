"""
API endpoints for clip submission, review and performance tracking.
"""

import logging
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clipit.core.database import get_db
from clipit.core.deps import get_current_user
from clipit.crud import clip as clip_crud
from clipit.crud import job as job_crud
from clipit.crud import application as application_crud
from clipit.models.clip import Clip, ClipStatus
from clipit.models.user import User
from clipit.schemas.clip import (
    ClipCreateRequest,
    ClipStatusUpdateRequest,
    ClipGoLiveRequest,
    ClipPerformanceUpdateRequest,
    ClipResponse,
    JobClipResponse,
    MyClipResponse,
)

router = APIRouter(prefix="/clips", tags=["Clips"])
logger = logging.getLogger(__name__)


def _get_clip_or_404(db: Session, clip_id: UUID) -> Clip:
    clip = clip_crud.get_by_id(db, clip_id)
    if not clip:
        raise HTTPException(status_code=404, detail="Clip not found")
    return clip


@router.get("/job/{job_id}", response_model=List[JobClipResponse])
def list_job_clips(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Clips submitted for a job.

    The job owner sees every clip; anyone else sees only their own.
    """
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    clipper_filter = None if job.creator_id == current_user.id else current_user.id
    rows = clip_crud.list_for_job(db, job.id, clipper_id=clipper_filter)

    return [JobClipResponse.model_validate(clip) for clip, _clipper in rows]


@router.get("/my-clips", response_model=List[MyClipResponse])
def list_my_clips(
    status_filter: Optional[ClipStatus] = Query(None, alias="status"),
    platform: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The caller's clips with job context, newest first."""
    rows = clip_crud.list_for_clipper(
        db,
        current_user.id,
        status=status_filter,
        platform=platform,
        skip=(page - 1) * limit,
        limit=limit,
    )

    return [
        MyClipResponse(
            **ClipResponse.model_validate(clip).model_dump(),
            job_title=job_title,
            creator_username=creator_username,
        )
        for clip, job_title, creator_username in rows
    ]


@router.post("", status_code=201, response_model=ClipResponse)
def submit_clip(
    request: ClipCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Submit a clip for a job.

    Requirements:
    - The caller holds an ACCEPTED application for the job
    - The job is ACTIVE or IN_PROGRESS

    The first clip on an ACTIVE job moves it to IN_PROGRESS.
    """
    if not application_crud.is_accepted(db, request.job_id, current_user.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You must be accepted for this job to submit clips"
        )

    job = job_crud.get_by_id(db, request.job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    if not job.is_open_for_clips:
        raise HTTPException(status_code=400, detail="Job is no longer accepting clips")

    try:
        clip = clip_crud.create(db, job, current_user.id, request)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error submitting clip for job {job.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to submit clip")

    logger.info(f"Clip {clip.id} submitted for job {job.id} by {current_user.username}")
    return clip


@router.put("/{clip_id}/status", response_model=ClipResponse)
def review_clip(
    clip_id: UUID,
    request: ClipStatusUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Approve or reject a submitted clip (owner of the clip's job only).
    """
    if request.status not in (ClipStatus.APPROVED, ClipStatus.REJECTED):
        raise HTTPException(status_code=400, detail="Valid status required (approved/rejected)")

    clip = _get_clip_or_404(db, clip_id)

    if clip.job.creator_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    if clip.status != ClipStatus.SUBMITTED:
        raise HTTPException(status_code=400, detail="Can only approve/reject submitted clips")

    clip = clip_crud.review(db, clip, request.status, request.feedback)
    logger.info(f"Clip {clip.id} {clip.status.value} by {current_user.username}")

    return clip


@router.put("/{clip_id}/live", response_model=ClipResponse)
def publish_clip(
    clip_id: UUID,
    request: ClipGoLiveRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Mark an approved clip as live on a platform (clip owner only).
    """
    clip = _get_clip_or_404(db, clip_id)

    if clip.clipper_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    if clip.status != ClipStatus.APPROVED:
        raise HTTPException(status_code=400, detail="Only approved clips can go live")

    clip = clip_crud.go_live(db, clip, request.platform)
    logger.info(f"Clip {clip.id} is live on {clip.platform or 'unspecified platform'}")

    return clip


@router.put("/{clip_id}/performance", response_model=ClipResponse)
def update_clip_performance(
    clip_id: UUID,
    request: ClipPerformanceUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update views, engagement and earnings (clip owner only).
    """
    clip = _get_clip_or_404(db, clip_id)

    if clip.clipper_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    return clip_crud.update_performance(db, clip, request)
