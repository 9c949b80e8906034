"""
CRUD operations for Payment model.

Marking a payment PAID updates several rows (payment, clipper earnings,
clip earnings and possibly the job status). All of them are written in a
single commit so a failure leaves none of them applied.
"""

from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy import func, case, or_
from sqlalchemy.orm import Session, aliased

from clipit.crud import user as user_crud
from clipit.models.payment import Payment, PaymentStatus
from clipit.models.clip import Clip
from clipit.models.job import Job, JobStatus
from clipit.models.user import User, UserRole


def get_for_party(db: Session, payment_id: UUID, user_id: UUID) -> Optional[Payment]:
    """Fetch a payment only if user_id is its creator or clipper."""
    return db.query(Payment).filter(
        Payment.id == payment_id,
        or_(Payment.creator_id == user_id, Payment.clipper_id == user_id)
    ).first()


def get_by_clip(db: Session, clip_id: UUID) -> Optional[Payment]:
    return db.query(Payment).filter(Payment.clip_id == clip_id).first()


def create(
    db: Session,
    clip: Clip,
    creator_id: UUID,
    amount: float,
    payment_method: Optional[str] = None
) -> Payment:
    """
    Create a PENDING payment for a clip.

    Args:
        db: Database session
        clip: Approved clip being paid for
        creator_id: Paying creator (owner of the clip's job)
        amount: Amount to pay
        payment_method: Optional free-form method label

    Returns:
        Created Payment instance
    """
    payment = Payment(
        job_id=clip.job_id,
        clip_id=clip.id,
        creator_id=creator_id,
        clipper_id=clip.clipper_id,
        amount=amount,
        payment_method=payment_method,
        status=PaymentStatus.PENDING
    )

    db.add(payment)
    db.commit()
    db.refresh(payment)

    return payment


def mark_paid(db: Session, payment: Payment, transaction_id: Optional[str] = None) -> Payment:
    """
    Settle a pending payment.

    In one transaction:
    1. Payment -> PAID with the transaction id
    2. Clipper total_earnings += amount
    3. Clip earnings = amount
    4. Job -> COMPLETED once its paid payments reach max_clips
    """
    payment.status = PaymentStatus.PAID
    payment.transaction_id = transaction_id

    user_crud.add_earnings(db, payment.clipper_id, payment.amount)

    if payment.clip_id is not None:
        clip = db.query(Clip).filter(Clip.id == payment.clip_id).first()
        if clip is not None:
            clip.earnings = payment.amount

    db.flush()

    job = db.query(Job).filter(Job.id == payment.job_id).first()
    if job is not None and job.is_open_for_clips:
        paid_count = db.query(func.count(Payment.id)).filter(
            Payment.job_id == job.id,
            Payment.status == PaymentStatus.PAID
        ).scalar()
        if paid_count >= job.max_clips:
            job.status = JobStatus.COMPLETED

    db.commit()
    db.refresh(payment)

    return payment


def cancel(db: Session, payment: Payment, transaction_id: Optional[str] = None) -> Payment:
    payment.status = PaymentStatus.CANCELLED
    payment.transaction_id = transaction_id

    db.commit()
    db.refresh(payment)

    return payment


def get_history(
    db: Session,
    user_id: UUID,
    status: Optional[PaymentStatus] = None,
    skip: int = 0,
    limit: int = 10,
) -> List[Tuple[Payment, str, str, str]]:
    """
    Payments the user takes part in, newest first.

    Returns:
        List of (Payment, job_title, creator_username, clipper_username) rows
    """
    creator = aliased(User)
    clipper = aliased(User)

    query = db.query(Payment, Job.title, creator.username, clipper.username).join(
        Job, Payment.job_id == Job.id
    ).join(
        creator, Payment.creator_id == creator.id
    ).join(
        clipper, Payment.clipper_id == clipper.id
    ).filter(
        or_(Payment.creator_id == user_id, Payment.clipper_id == user_id)
    )

    if status:
        query = query.filter(Payment.status == status)

    return query.order_by(Payment.created_at.desc()).offset(skip).limit(limit).all()


def get_stats(db: Session, user: User) -> dict:
    """
    Payment totals for a user, seen from their role.

    Creators get totals over payments they make, clippers over payments
    they receive.
    """
    is_creator = user.role == UserRole.CREATOR
    party_column = Payment.creator_id if is_creator else Payment.clipper_id

    row = db.query(
        func.count(Payment.id),
        func.coalesce(func.sum(case((Payment.status == PaymentStatus.PAID, Payment.amount))), 0),
        func.coalesce(func.sum(case((Payment.status == PaymentStatus.PENDING, Payment.amount))), 0),
        func.count(case((Payment.status == PaymentStatus.PAID, 1))),
        func.count(case((Payment.status == PaymentStatus.PENDING, 1))),
    ).filter(party_column == user.id).one()

    if is_creator:
        return {
            "role": UserRole.CREATOR.value,
            "total_payments": int(row[0]),
            "total_paid": float(row[1]),
            "pending_amount": float(row[2]),
            "paid_count": int(row[3]),
            "pending_count": int(row[4]),
        }

    return {
        "role": UserRole.CLIPPER.value,
        "total_payments": int(row[0]),
        "total_earned": float(row[1]),
        "pending_earnings": float(row[2]),
        "paid_count": int(row[3]),
        "pending_count": int(row[4]),
    }
