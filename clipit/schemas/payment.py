"""
Pydantic schemas for payments and payment statistics.
"""

from datetime import datetime
from typing import Optional, Literal, Union
from pydantic import BaseModel, Field, UUID4
from clipit.models.payment import PaymentStatus


class PaymentCreateRequest(BaseModel):
    clip_id: UUID4
    amount: float = Field(..., gt=0)
    payment_method: Optional[str] = Field(None, max_length=50)


class PaymentStatusUpdateRequest(BaseModel):
    status: PaymentStatus
    transaction_id: Optional[str] = Field(None, max_length=255)


class PaymentResponse(BaseModel):
    id: UUID4
    job_id: UUID4
    clip_id: Optional[UUID4] = None
    creator_id: UUID4
    clipper_id: UUID4
    amount: float
    status: PaymentStatus
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentHistoryItem(PaymentResponse):
    """
    Payment as seen by one of its parties.

    payment_type is "outgoing" for the creator and "incoming" for the clipper;
    other_party is the counterpart's username.
    """
    job_title: str
    payment_type: Literal["outgoing", "incoming"]
    other_party: str


class CreatorPaymentStats(BaseModel):
    role: Literal["creator"] = "creator"
    total_payments: int
    total_paid: float
    pending_amount: float
    paid_count: int
    pending_count: int


class ClipperPaymentStats(BaseModel):
    role: Literal["clipper"] = "clipper"
    total_payments: int
    total_earned: float
    pending_earnings: float
    paid_count: int
    pending_count: int


PaymentStatsResponse = Union[CreatorPaymentStats, ClipperPaymentStats]
