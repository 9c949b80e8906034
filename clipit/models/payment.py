"""
Payment model.

A monetary record from a creator to a clipper for an approved clip.
At most one payment exists per clip.
"""

import enum
import uuid
from sqlalchemy import Column, String, Numeric, DateTime, Enum, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from clipit.core.database import Base


class PaymentStatus(str, enum.Enum):
    """
    PENDING -> PAID
            -> CANCELLED
    """
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class Payment(Base):
    __tablename__ = "payments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_id = Column(UUID(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    clip_id = Column(UUID(as_uuid=True), ForeignKey("clips.id", ondelete="SET NULL"), nullable=True, unique=True)
    creator_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    clipper_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    amount = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    status = Column(
        Enum(PaymentStatus, name="payment_status", values_callable=lambda e: [m.value for m in e]),
        default=PaymentStatus.PENDING,
        nullable=False,
        index=True,
    )
    payment_method = Column(String(50), nullable=True)
    transaction_id = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    job = relationship("Job")
    clip = relationship("Clip")
    creator = relationship("User", foreign_keys=[creator_id])
    clipper = relationship("User", foreign_keys=[clipper_id])

    def __repr__(self):
        return f"<Payment(id={self.id}, amount={self.amount}, status={self.status.value})>"
