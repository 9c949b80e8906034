"""
CRUD operations for reviews.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from clipit.crud import user as user_crud
from clipit.models.review import Review
from clipit.schemas.review import ReviewCreateRequest


def get_existing(db: Session, reviewer_id: UUID, reviewee_id: UUID, job_id: UUID) -> Optional[Review]:
    return db.query(Review).filter(
        Review.reviewer_id == reviewer_id,
        Review.reviewee_id == reviewee_id,
        Review.job_id == job_id
    ).first()


def create(db: Session, reviewer_id: UUID, data: ReviewCreateRequest) -> Review:
    """
    Store a review and refresh the reviewee's average rating.

    Both writes share one commit.
    """
    review = Review(
        reviewer_id=reviewer_id,
        reviewee_id=data.reviewee_id,
        job_id=data.job_id,
        rating=data.rating,
        comment=data.comment
    )
    db.add(review)
    db.flush()

    user_crud.recompute_rating(db, data.reviewee_id)

    db.commit()
    db.refresh(review)

    return review


def list_for_user(db: Session, user_id: UUID, skip: int = 0, limit: int = 20) -> List[Review]:
    """Reviews received by a user, newest first."""
    return db.query(Review).filter(
        Review.reviewee_id == user_id
    ).order_by(Review.created_at.desc()).offset(skip).limit(limit).all()
