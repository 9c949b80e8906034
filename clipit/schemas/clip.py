"""
Pydantic schemas for Clip API requests/responses.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, UUID4, model_validator
from clipit.models.clip import ClipStatus
from clipit.schemas.user import UserSummary


class ClipCreateRequest(BaseModel):
    """Clip submission by an accepted clipper."""
    job_id: UUID4
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    video_url: str = Field(..., min_length=1)
    thumbnail_url: Optional[str] = None
    duration: int = Field(..., gt=0, description="Clip length in seconds")
    start_time: int = Field(..., ge=0, description="Offset into the source video (seconds)")
    end_time: int = Field(..., gt=0, description="Offset into the source video (seconds)")
    platform: Optional[str] = Field(None, max_length=50)

    @model_validator(mode="after")
    def check_time_range(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be greater than start_time")
        return self


class ClipStatusUpdateRequest(BaseModel):
    """Creator review decision."""
    status: ClipStatus
    feedback: Optional[str] = None


class ClipGoLiveRequest(BaseModel):
    platform: Optional[str] = Field(None, max_length=50)


class ClipPerformanceUpdateRequest(BaseModel):
    """Omitted fields keep their current value."""
    views: Optional[int] = Field(None, ge=0)
    engagement: Optional[float] = Field(None, ge=0, le=100)
    earnings: Optional[float] = Field(None, ge=0)


class ClipResponse(BaseModel):
    id: UUID4
    job_id: UUID4
    clipper_id: UUID4
    title: str
    description: Optional[str] = None
    video_url: str
    thumbnail_url: Optional[str] = None
    duration: int
    start_time: int
    end_time: int
    status: ClipStatus
    platform: Optional[str] = None
    views: int = 0
    engagement: float = 0
    earnings: float = 0
    feedback: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobClipResponse(ClipResponse):
    """Clip listed under a job, with the clipper's summary."""
    clipper: UserSummary


class MyClipResponse(ClipResponse):
    """Clip listed for its clipper, with job context."""
    job_title: str
    creator_username: str
