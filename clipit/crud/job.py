"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs, providing a clean interface for the API layer.
"""

import json
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.orm import Session

from clipit.crud import user as user_crud
from clipit.models.job import Job, JobStatus, JobDifficulty
from clipit.models.user import User
from clipit.models.application import JobApplication
from clipit.schemas.job import JobCreateRequest


def _application_count():
    """Correlated COUNT of applications for the enclosing job row."""
    return (
        select(func.count(JobApplication.id))
        .where(JobApplication.job_id == Job.id)
        .scalar_subquery()
    )


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _tag_pattern(tag: str) -> str:
    """
    LIKE pattern matching one element of the stored JSON tags array.

    The element is encoded with json.dumps, the same way the JSON column
    serializes it (so non-ASCII tags compare as their \\u escapes), and LIKE
    metacharacters are escaped so only the exact element matches.
    """
    return f"%{_escape_like(json.dumps(tag))}%"


def create(db: Session, creator: User, job_data: JobCreateRequest) -> Job:
    """
    Create a new job owned by creator and bump the creator's job counter.

    Args:
        db: Database session
        creator: Authenticated creator
        job_data: Validated job creation data

    Returns:
        Created Job instance with id
    """
    db_job = Job(
        creator_id=creator.id,
        title=job_data.title,
        description=job_data.description,
        video_url=job_data.video_url,
        video_duration=job_data.video_duration,
        budget=job_data.budget,
        deadline=job_data.deadline,
        difficulty=job_data.difficulty,
        tags=job_data.tags,
        requirements=job_data.requirements,
        max_clips=job_data.max_clips,
        average_views=job_data.average_views,
        status=JobStatus.ACTIVE
    )

    db.add(db_job)
    user_crud.increment_total_jobs(db, creator.id)
    db.commit()
    db.refresh(db_job)

    return db_job


def get_by_id(db: Session, job_id: UUID) -> Optional[Job]:
    """
    Retrieve a job by its ID.

    Args:
        db: Database session
        job_id: Job ID to retrieve

    Returns:
        Job instance if found, None otherwise
    """
    return db.query(Job).filter(Job.id == job_id).first()


def get_multi(
    db: Session,
    skip: int = 0,
    limit: int = 10,
    status: Optional[JobStatus] = None,
    difficulty: Optional[JobDifficulty] = None,
    min_budget: Optional[float] = None,
    max_budget: Optional[float] = None,
    tags: Optional[List[str]] = None,
    search: Optional[str] = None,
    creator_id: Optional[UUID] = None,
) -> List[Tuple[Job, str, Optional[str], int]]:
    """
    Retrieve jobs with pagination and optional filtering, newest first.

    Each filter is only applied when given. A job matches the tag filter
    when it carries at least one of the requested tags; search is a
    case-insensitive substring match on title or description.

    Returns:
        List of (Job, creator_username, creator_avatar, application_count) rows
    """
    query = db.query(
        Job,
        User.username,
        User.avatar,
        _application_count().label("application_count"),
    ).join(User, Job.creator_id == User.id)

    if status:
        query = query.filter(Job.status == status)

    if difficulty:
        query = query.filter(Job.difficulty == difficulty)

    if min_budget is not None:
        query = query.filter(Job.budget >= min_budget)

    if max_budget is not None:
        query = query.filter(Job.budget <= max_budget)

    if tags:
        tags_text = cast(Job.tags, String)
        query = query.filter(or_(*[
            tags_text.like(_tag_pattern(tag), escape="\\") for tag in tags
        ]))

    if search:
        pattern = f"%{_escape_like(search)}%"
        query = query.filter(or_(
            Job.title.ilike(pattern, escape="\\"),
            Job.description.ilike(pattern, escape="\\")
        ))

    if creator_id:
        query = query.filter(Job.creator_id == creator_id)

    rows = query.order_by(Job.created_at.desc()).offset(skip).limit(limit).all()
    return [(row[0], row[1], row[2], int(row[3] or 0)) for row in rows]


def count_applications(db: Session, job_id: UUID) -> int:
    return db.query(func.count(JobApplication.id)).filter(JobApplication.job_id == job_id).scalar() or 0


def update_status(db: Session, job: Job, status: JobStatus) -> Job:
    """
    Update job status.

    Args:
        db: Database session
        job: Job to update
        status: New status

    Returns:
        Updated Job instance
    """
    job.status = status
    db.commit()
    db.refresh(job)

    return job
