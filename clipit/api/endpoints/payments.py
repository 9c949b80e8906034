"""
Payment endpoints.

Creators pay for approved clips; the payment starts PENDING and is later
marked PAID (by the creator) or CANCELLED (by either party).
"""

import logging
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from clipit.core.database import get_db
from clipit.core.deps import get_current_user
from clipit.crud import clip as clip_crud
from clipit.crud import payment as payment_crud
from clipit.models.clip import ClipStatus
from clipit.models.payment import PaymentStatus
from clipit.models.user import User
from clipit.schemas.payment import (
    PaymentCreateRequest,
    PaymentStatusUpdateRequest,
    PaymentResponse,
    PaymentHistoryItem,
    PaymentStatsResponse,
)

router = APIRouter(prefix="/payments", tags=["Payments"])
logger = logging.getLogger(__name__)


@router.get("/history", response_model=List[PaymentHistoryItem])
def payment_history(
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Payments the caller sent or received, newest first.
    """
    rows = payment_crud.get_history(
        db,
        current_user.id,
        status=status_filter,
        skip=(page - 1) * limit,
        limit=limit,
    )

    history = []
    for payment, job_title, creator_username, clipper_username in rows:
        outgoing = payment.creator_id == current_user.id
        history.append(PaymentHistoryItem(
            **PaymentResponse.model_validate(payment).model_dump(),
            job_title=job_title,
            payment_type="outgoing" if outgoing else "incoming",
            other_party=clipper_username if outgoing else creator_username,
        ))

    return history


@router.get("/stats", response_model=PaymentStatsResponse)
def payment_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Payment totals from the caller's side (creator: paid out, clipper: earned)."""
    return payment_crud.get_stats(db, current_user)


@router.post("", status_code=201, response_model=PaymentResponse)
def create_payment(
    request: PaymentCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Create a pending payment for an approved clip (owner of the clip's job only).

    At most one payment exists per clip.
    """
    clip = clip_crud.get_by_id(db, request.clip_id)
    if not clip:
        raise HTTPException(status_code=404, detail="Clip not found")

    if clip.job.creator_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    if clip.status not in (ClipStatus.APPROVED, ClipStatus.LIVE):
        raise HTTPException(status_code=400, detail="Can only create payments for approved clips")

    if payment_crud.get_by_clip(db, clip.id):
        raise HTTPException(status_code=400, detail="Payment already exists for this clip")

    try:
        payment = payment_crud.create(
            db,
            clip,
            creator_id=current_user.id,
            amount=request.amount,
            payment_method=request.payment_method,
        )
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Payment already exists for this clip")

    logger.info(f"Payment {payment.id} of {payment.amount} created for clip {clip.id}")
    return payment


@router.put("/{payment_id}/status", response_model=PaymentResponse)
def update_payment_status(
    payment_id: UUID,
    request: PaymentStatusUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Mark a pending payment PAID or CANCELLED.

    - Either party may cancel
    - Only the creator may mark it paid, which credits the clipper's
      earnings and the clip's earnings and may complete the job
    """
    if request.status not in (PaymentStatus.PAID, PaymentStatus.CANCELLED):
        raise HTTPException(status_code=400, detail="Valid status required (paid/cancelled)")

    payment = payment_crud.get_for_party(db, payment_id, current_user.id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found or access denied")

    if request.status == PaymentStatus.PAID and payment.creator_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the job creator can mark payment as paid"
        )

    if payment.status != PaymentStatus.PENDING:
        raise HTTPException(status_code=400, detail="Can only update pending payments")

    try:
        if request.status == PaymentStatus.PAID:
            payment = payment_crud.mark_paid(db, payment, request.transaction_id)
        else:
            payment = payment_crud.cancel(db, payment, request.transaction_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating payment {payment_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update payment"
        )

    logger.info(f"Payment {payment.id} {payment.status.value} by {current_user.username}")
    return payment
