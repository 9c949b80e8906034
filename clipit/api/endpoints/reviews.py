"""
Review endpoints.

A review is left by one side of a job for the other: the job's creator
reviews an accepted clipper, or an accepted clipper reviews the creator.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clipit.core.database import get_db
from clipit.core.deps import get_current_user
from clipit.crud import application as application_crud
from clipit.crud import job as job_crud
from clipit.crud import review as review_crud
from clipit.crud import user as user_crud
from clipit.models.user import User
from clipit.schemas.review import ReviewCreateRequest, ReviewResponse

router = APIRouter(prefix="/reviews", tags=["Reviews"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=ReviewResponse)
def create_review(
    request: ReviewCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Review the other side of a job. Updates the reviewee's average rating.
    """
    if request.reviewee_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot review yourself")

    job = job_crud.get_by_id(db, request.job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    if not user_crud.get_by_id(db, request.reviewee_id):
        raise HTTPException(status_code=404, detail="User not found")

    if current_user.id == job.creator_id:
        clipper_id = request.reviewee_id
    elif request.reviewee_id == job.creator_id:
        clipper_id = current_user.id
    else:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the job creator and its accepted clippers can review each other"
        )

    if not application_crud.is_accepted(db, job.id, clipper_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the job creator and its accepted clippers can review each other"
        )

    if review_crud.get_existing(db, current_user.id, request.reviewee_id, job.id):
        raise HTTPException(status_code=400, detail="You have already reviewed this user for this job")

    try:
        review = review_crud.create(db, current_user.id, request)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="You have already reviewed this user for this job")

    logger.info(f"Review {review.id} ({review.rating}/5) left by {current_user.username} for {review.reviewee_id}")
    return review
