from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, UUID4


class ReviewCreateRequest(BaseModel):
    job_id: UUID4
    reviewee_id: UUID4
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class ReviewResponse(BaseModel):
    id: UUID4
    reviewer_id: UUID4
    reviewee_id: UUID4
    job_id: UUID4
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
