"""
CRUD operations for Clip model.

Clip submission and review drive the job lifecycle: the first clip on an
ACTIVE job moves it to IN_PROGRESS in the same commit.
"""

from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session, aliased

from clipit.models.clip import Clip, ClipStatus
from clipit.models.job import Job, JobStatus
from clipit.models.user import User
from clipit.schemas.clip import ClipCreateRequest, ClipPerformanceUpdateRequest


def get_by_id(db: Session, clip_id: UUID) -> Optional[Clip]:
    return db.query(Clip).filter(Clip.id == clip_id).first()


def create(db: Session, job: Job, clipper_id: UUID, clip_data: ClipCreateRequest) -> Clip:
    """
    Record a submitted clip.

    Args:
        db: Database session
        job: Job the clip belongs to (must be open for clips)
        clipper_id: Submitting clipper
        clip_data: Validated clip data

    Returns:
        Created Clip instance
    """
    clip = Clip(
        job_id=job.id,
        clipper_id=clipper_id,
        title=clip_data.title,
        description=clip_data.description,
        video_url=clip_data.video_url,
        thumbnail_url=clip_data.thumbnail_url,
        duration=clip_data.duration,
        start_time=clip_data.start_time,
        end_time=clip_data.end_time,
        platform=clip_data.platform,
        status=ClipStatus.SUBMITTED
    )
    db.add(clip)

    if job.status == JobStatus.ACTIVE:
        job.status = JobStatus.IN_PROGRESS

    db.commit()
    db.refresh(clip)

    return clip


def list_for_job(db: Session, job_id: UUID, clipper_id: Optional[UUID] = None) -> List[Tuple[Clip, User]]:
    """
    Clips of a job with their clippers, newest first.

    When clipper_id is given only that clipper's clips are returned.
    """
    query = db.query(Clip, User).join(User, Clip.clipper_id == User.id).filter(Clip.job_id == job_id)

    if clipper_id is not None:
        query = query.filter(Clip.clipper_id == clipper_id)

    return query.order_by(Clip.created_at.desc()).all()


def list_for_clipper(
    db: Session,
    clipper_id: UUID,
    status: Optional[ClipStatus] = None,
    platform: Optional[str] = None,
    skip: int = 0,
    limit: int = 10,
) -> List[Tuple[Clip, str, str]]:
    """
    A clipper's own clips with job title and creator username.

    Returns:
        List of (Clip, job_title, creator_username) rows
    """
    creator = aliased(User)
    query = db.query(Clip, Job.title, creator.username).join(
        Job, Clip.job_id == Job.id
    ).join(
        creator, Job.creator_id == creator.id
    ).filter(Clip.clipper_id == clipper_id)

    if status:
        query = query.filter(Clip.status == status)

    if platform:
        query = query.filter(Clip.platform == platform)

    return query.order_by(Clip.created_at.desc()).offset(skip).limit(limit).all()


def review(db: Session, clip: Clip, status: ClipStatus, feedback: Optional[str]) -> Clip:
    """Set the creator's decision (APPROVED/REJECTED) and feedback."""
    clip.status = status
    clip.feedback = feedback

    db.commit()
    db.refresh(clip)

    return clip


def go_live(db: Session, clip: Clip, platform: Optional[str] = None) -> Clip:
    """Mark an approved clip as published."""
    clip.status = ClipStatus.LIVE
    if platform:
        clip.platform = platform

    db.commit()
    db.refresh(clip)

    return clip


def update_performance(db: Session, clip: Clip, data: ClipPerformanceUpdateRequest) -> Clip:
    """Overwrite only the performance fields that were provided."""
    if data.views is not None:
        clip.views = data.views
    if data.engagement is not None:
        clip.engagement = data.engagement
    if data.earnings is not None:
        clip.earnings = data.earnings

    db.commit()
    db.refresh(clip)

    return clip
