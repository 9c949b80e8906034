import logging
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, HTTPException, Depends, Query, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from clipit.core.database import get_db
from clipit.core.deps import get_current_user, get_optional_user, require_role
from clipit.crud import job as job_crud
from clipit.crud import application as application_crud
from clipit.models.job import Job, JobStatus, JobDifficulty
from clipit.models.application import ApplicationStatus
from clipit.models.user import User, UserRole
from clipit.schemas.job import (
    JobCreateRequest,
    JobResponse,
    JobDetailResponse,
    JobStatusUpdateRequest,
    JobApplyRequest,
    ApplicationResponse,
    ApplicationWithClipperResponse,
    ApplicationStatusUpdateRequest,
    split_tags,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


def _get_job_or_404(db: Session, job_id: UUID) -> Job:
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


def _get_owned_job(db: Session, job_id: UUID, user: User) -> Job:
    job = _get_job_or_404(db, job_id)
    if job.creator_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return job


@router.get("", response_model=List[JobResponse])
def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[JobStatus] = Query(None, alias="status"),
    difficulty: Optional[JobDifficulty] = None,
    min_budget: Optional[float] = Query(None, ge=0),
    max_budget: Optional[float] = Query(None, ge=0),
    tags: Optional[List[str]] = Query(None),
    search: Optional[str] = None,
    creator: Optional[str] = Query(None, description='"me" or a creator id'),
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """
    List jobs with pagination and optional filtering, newest first.

    Without a status filter only ACTIVE jobs are listed, unless a creator
    filter is given, in which case all of that creator's jobs are listed.
    `creator=me` requires a valid bearer token.
    """
    creator_id = None
    if creator == "me":
        if current_user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Access token required",
                headers={"WWW-Authenticate": "Bearer"},
            )
        creator_id = current_user.id
    elif creator:
        try:
            creator_id = UUID(creator)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid creator id")

    if status_filter is None and creator_id is None:
        status_filter = JobStatus.ACTIVE

    rows = job_crud.get_multi(
        db,
        skip=(page - 1) * limit,
        limit=limit,
        status=status_filter,
        difficulty=difficulty,
        min_budget=min_budget,
        max_budget=max_budget,
        tags=split_tags(tags),
        search=search,
        creator_id=creator_id,
    )

    return [
        JobResponse.model_validate(job).model_copy(update={
            "creator_username": username,
            "creator_avatar": avatar,
            "application_count": application_count,
        })
        for job, username, avatar, application_count in rows
    ]


@router.get("/{job_id}", response_model=JobDetailResponse)
def get_job(job_id: UUID, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID with its creator's public summary.
    """
    job = _get_job_or_404(db, job_id)

    return JobDetailResponse.model_validate(job).model_copy(update={
        "creator_username": job.creator.username,
        "creator_avatar": job.creator.avatar,
        "application_count": job_crud.count_applications(db, job.id),
    })


@router.post("", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    creator: User = Depends(require_role(UserRole.CREATOR)),
    db: Session = Depends(get_db)
):
    """
    Create a new job posting (creators only). The job starts ACTIVE.
    """
    try:
        new_job = job_crud.create(db, creator, request)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating job for creator {creator.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create job")

    logger.info(f"Created job {new_job.id}: {new_job.title} (creator {creator.username})")

    return JobResponse.model_validate(new_job).model_copy(update={
        "creator_username": creator.username,
        "creator_avatar": creator.avatar,
    })


@router.put("/{job_id}/status", response_model=JobResponse)
def update_job_status(
    job_id: UUID,
    request: JobStatusUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Close a job as COMPLETED or CANCELLED (job owner only).

    Only ACTIVE or IN_PROGRESS jobs can be closed.
    """
    if request.status not in (JobStatus.COMPLETED, JobStatus.CANCELLED):
        raise HTTPException(status_code=400, detail="Valid status required (completed/cancelled)")

    job = _get_owned_job(db, job_id, current_user)

    if not job.is_open_for_clips:
        raise HTTPException(status_code=400, detail=f"Job is already {job.status.value}")

    job = job_crud.update_status(db, job, request.status)
    logger.info(f"Job {job.id} marked {job.status.value} by {current_user.username}")

    return JobResponse.model_validate(job).model_copy(update={
        "creator_username": current_user.username,
        "creator_avatar": current_user.avatar,
        "application_count": job_crud.count_applications(db, job.id),
    })


@router.post("/{job_id}/apply", status_code=201, response_model=ApplicationResponse)
def apply_to_job(
    job_id: UUID,
    request: JobApplyRequest,
    clipper: User = Depends(require_role(UserRole.CLIPPER)),
    db: Session = Depends(get_db)
):
    """
    Apply to an ACTIVE job (clippers only). One application per clipper per job.
    """
    job = _get_job_or_404(db, job_id)

    if job.status != JobStatus.ACTIVE:
        raise HTTPException(status_code=400, detail="Job is not accepting applications")

    if application_crud.get_by_job_and_clipper(db, job.id, clipper.id):
        raise HTTPException(status_code=400, detail="You have already applied to this job")

    try:
        application = application_crud.create(db, job.id, clipper.id, request)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="You have already applied to this job")

    logger.info(f"Clipper {clipper.username} applied to job {job.id}")
    return application


@router.get("/{job_id}/applications", response_model=List[ApplicationWithClipperResponse])
def list_job_applications(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List applications for a job (job owner only), newest first.
    """
    job = _get_owned_job(db, job_id, current_user)

    return [
        ApplicationWithClipperResponse.model_validate(application)
        for application, _clipper in application_crud.list_for_job(db, job.id)
    ]


@router.put(
    "/{job_id}/applications/{application_id}/status",
    response_model=ApplicationResponse,
)
def update_application_status(
    job_id: UUID,
    application_id: UUID,
    request: ApplicationStatusUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Accept or reject a pending application (job owner only).

    Accepted clippers may submit clips for the job.
    """
    if request.status not in (ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED):
        raise HTTPException(status_code=400, detail="Valid status required (accepted/rejected)")

    job = _get_owned_job(db, job_id, current_user)

    application = application_crud.get_by_id(db, application_id)
    if not application or application.job_id != job.id:
        raise HTTPException(status_code=404, detail="Application not found")

    if application.status != ApplicationStatus.PENDING:
        raise HTTPException(status_code=400, detail="Can only update pending applications")

    application = application_crud.update_status(db, application, request.status)
    logger.info(f"Application {application.id} {application.status.value} for job {job.id}")

    return application
