"""
CRUD operations for the User model, including profile statistics.
"""

from typing import Optional
from uuid import UUID
from sqlalchemy import func, case, or_
from sqlalchemy.orm import Session

from clipit.core.security import get_password_hash
from clipit.models.user import User, UserRole
from clipit.models.job import Job, JobStatus
from clipit.models.application import JobApplication, ApplicationStatus
from clipit.models.clip import Clip, ClipStatus
from clipit.models.review import Review
from clipit.schemas.user import UserRegisterRequest, UserProfileUpdateRequest


def get_by_id(db: Session, user_id: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_by_email_or_username(db: Session, email: str, username: str) -> Optional[User]:
    """Find any user that already holds this email or username."""
    return db.query(User).filter(or_(User.email == email, User.username == username)).first()


def username_taken(db: Session, username: str, exclude_user_id: UUID) -> bool:
    """Check whether a username belongs to a user other than exclude_user_id."""
    return db.query(User.id).filter(
        User.username == username,
        User.id != exclude_user_id
    ).first() is not None


def create(db: Session, user_data: UserRegisterRequest) -> User:
    """
    Create a new user with a bcrypt-hashed password.

    Args:
        db: Database session
        user_data: Validated registration data

    Returns:
        Created User instance
    """
    db_user = User(
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        username=user_data.username,
        role=user_data.role,
        rating=0,
        total_earnings=0,
        total_jobs=0,
    )

    db.add(db_user)
    db.commit()
    db.refresh(db_user)

    return db_user


def update_profile(db: Session, user: User, changes: UserProfileUpdateRequest) -> User:
    """
    Apply a partial profile update.

    Only fields explicitly provided (and not None) are written.
    """
    for field, value in changes.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, field, value)

    db.commit()
    db.refresh(user)

    return user


def increment_total_jobs(db: Session, user_id: UUID) -> None:
    """Add one to total_jobs in SQL so concurrent requests cannot lose an update. Does not commit."""
    db.query(User).filter(User.id == user_id).update(
        {User.total_jobs: User.total_jobs + 1},
        synchronize_session=False
    )


def add_earnings(db: Session, user_id: UUID, amount: float) -> None:
    """Add amount to total_earnings in SQL. Does not commit."""
    db.query(User).filter(User.id == user_id).update(
        {User.total_earnings: User.total_earnings + amount},
        synchronize_session=False
    )


def recompute_rating(db: Session, user_id: UUID) -> None:
    """
    Set the user's rating to the mean of all ratings received.

    Does not commit; the caller commits together with the review insert.
    """
    average = db.query(func.avg(Review.rating)).filter(Review.reviewee_id == user_id).scalar()
    user = get_by_id(db, user_id)
    if user is not None:
        user.rating = round(float(average or 0), 2)


def get_creator_stats(db: Session, user_id: UUID) -> dict:
    """Aggregate job and clip counts for a creator."""
    jobs_row = db.query(
        func.count(Job.id),
        func.count(case((Job.status == JobStatus.ACTIVE, 1))),
        func.count(case((Job.status == JobStatus.COMPLETED, 1))),
        func.coalesce(func.sum(Job.budget), 0),
    ).filter(Job.creator_id == user_id).one()

    clips_received = db.query(func.count(Clip.id)).join(
        Job, Clip.job_id == Job.id
    ).filter(Job.creator_id == user_id).scalar()

    return {
        "total_jobs": int(jobs_row[0]),
        "active_jobs": int(jobs_row[1]),
        "completed_jobs": int(jobs_row[2]),
        "total_budget": float(jobs_row[3]),
        "total_clips_received": int(clips_received or 0),
    }


def get_clipper_stats(db: Session, user_id: UUID) -> dict:
    """Aggregate clip performance and application counts for a clipper."""
    clips_row = db.query(
        func.count(Clip.id),
        func.count(case((Clip.status == ClipStatus.APPROVED, 1))),
        func.count(case((Clip.status == ClipStatus.LIVE, 1))),
        func.coalesce(func.sum(Clip.earnings), 0),
        func.coalesce(func.sum(Clip.views), 0),
    ).filter(Clip.clipper_id == user_id).one()

    applications_row = db.query(
        func.count(JobApplication.id),
        func.count(case((JobApplication.status == ApplicationStatus.ACCEPTED, 1))),
    ).filter(JobApplication.clipper_id == user_id).one()

    return {
        "total_clips": int(clips_row[0]),
        "approved_clips": int(clips_row[1]),
        "live_clips": int(clips_row[2]),
        "total_earnings": float(clips_row[3]),
        "total_views": int(clips_row[4]),
        "total_applications": int(applications_row[0]),
        "accepted_applications": int(applications_row[1]),
    }


def get_stats(db: Session, user: User) -> dict:
    """Role-dependent statistics for a user profile."""
    if user.role == UserRole.CREATOR:
        return {"role": UserRole.CREATOR.value, **get_creator_stats(db, user.id)}
    return {"role": UserRole.CLIPPER.value, **get_clipper_stats(db, user.id)}
