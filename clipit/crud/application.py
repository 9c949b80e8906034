"""
CRUD operations for job applications.
"""

from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session

from clipit.crud import user as user_crud
from clipit.models.application import JobApplication, ApplicationStatus
from clipit.models.user import User
from clipit.schemas.job import JobApplyRequest


def get_by_id(db: Session, application_id: UUID) -> Optional[JobApplication]:
    return db.query(JobApplication).filter(JobApplication.id == application_id).first()


def get_by_job_and_clipper(db: Session, job_id: UUID, clipper_id: UUID) -> Optional[JobApplication]:
    return db.query(JobApplication).filter(
        JobApplication.job_id == job_id,
        JobApplication.clipper_id == clipper_id
    ).first()


def is_accepted(db: Session, job_id: UUID, clipper_id: UUID) -> bool:
    """True when the clipper holds an ACCEPTED application for the job."""
    return db.query(JobApplication.id).filter(
        JobApplication.job_id == job_id,
        JobApplication.clipper_id == clipper_id,
        JobApplication.status == ApplicationStatus.ACCEPTED
    ).first() is not None


def create(db: Session, job_id: UUID, clipper_id: UUID, data: JobApplyRequest) -> JobApplication:
    """
    Create a PENDING application.

    The (job_id, clipper_id) unique constraint raises IntegrityError on a
    duplicate that slipped past the caller's existence check.
    """
    application = JobApplication(
        job_id=job_id,
        clipper_id=clipper_id,
        message=data.message,
        proposed_timeline=data.proposed_timeline,
        status=ApplicationStatus.PENDING
    )

    db.add(application)
    db.commit()
    db.refresh(application)

    return application


def list_for_job(db: Session, job_id: UUID) -> List[Tuple[JobApplication, User]]:
    """All applications for a job with their clippers, newest first."""
    return db.query(JobApplication, User).join(
        User, JobApplication.clipper_id == User.id
    ).filter(
        JobApplication.job_id == job_id
    ).order_by(JobApplication.created_at.desc()).all()


def update_status(db: Session, application: JobApplication, status: ApplicationStatus) -> JobApplication:
    """
    Accept or reject a pending application.

    Accepting also increments the clipper's total_jobs counter; both
    changes are committed together.
    """
    application.status = status

    if status == ApplicationStatus.ACCEPTED:
        user_crud.increment_total_jobs(db, application.clipper_id)

    db.commit()
    db.refresh(application)

    return application
