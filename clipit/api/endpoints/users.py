"""
User profile, statistics and received-reviews endpoints.
"""

import logging
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clipit.core.database import get_db
from clipit.core.deps import get_current_user
from clipit.crud import user as user_crud
from clipit.crud import review as review_crud
from clipit.models.user import User
from clipit.schemas.user import (
    PublicUserResponse,
    UserResponse,
    UserProfileUpdateRequest,
    UserStatsResponse,
)
from clipit.schemas.review import ReviewResponse

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


def _get_user_or_404(db: Session, user_id: UUID) -> User:
    user = user_crud.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/profile", response_model=UserResponse)
def update_profile(
    request: UserProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update the caller's profile. Omitted fields keep their current value.
    """
    if request.username and user_crud.username_taken(db, request.username, current_user.id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already taken"
        )

    try:
        user = user_crud.update_profile(db, current_user, request)
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already taken"
        )

    logger.info(f"Profile updated for user {user.id}")
    return user


@router.get("/{user_id}", response_model=PublicUserResponse)
def get_user(user_id: UUID, db: Session = Depends(get_db)):
    """Public profile of any user."""
    return _get_user_or_404(db, user_id)


@router.get("/{user_id}/stats", response_model=UserStatsResponse)
def get_user_stats(user_id: UUID, db: Session = Depends(get_db)):
    """
    Role-dependent statistics.

    - creator: job counts by status, total budget, clips received
    - clipper: clip counts by status, earnings, views, applications
    """
    user = _get_user_or_404(db, user_id)
    return user_crud.get_stats(db, user)


@router.get("/{user_id}/reviews", response_model=List[ReviewResponse])
def get_user_reviews(
    user_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Reviews received by the user, newest first."""
    _get_user_or_404(db, user_id)
    return review_crud.list_for_user(db, user_id, skip=(page - 1) * limit, limit=limit)
