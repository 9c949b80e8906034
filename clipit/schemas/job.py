from pydantic import BaseModel, Field, UUID4, field_validator
from typing import List, Optional, Union
from datetime import datetime

from clipit.models.job import JobStatus, JobDifficulty
from clipit.models.application import ApplicationStatus
from clipit.schemas.user import UserSummary


def split_tags(v: Union[str, List[str], None]) -> List[str]:
    """Accept a list or a comma-separated string; drop blanks and duplicates."""
    if v is None:
        return []
    if isinstance(v, str):
        v = v.split(",")
    tags = []
    for tag in v:
        tag = str(tag).strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    video_url: str = Field(..., min_length=1)
    video_duration: int = Field(..., gt=0, description="Source video length in seconds")
    budget: float = Field(..., gt=0)
    deadline: datetime
    difficulty: JobDifficulty
    tags: List[str] = Field(default_factory=list)
    requirements: Optional[str] = None
    max_clips: int = Field(5, ge=1, le=100)
    average_views: Optional[str] = Field(None, max_length=20)

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v):
        return split_tags(v)


class JobStatusUpdateRequest(BaseModel):
    """Creator closing a job."""
    status: JobStatus


class JobResponse(BaseModel):
    """Schema for a job as returned by create and list endpoints"""
    id: UUID4
    creator_id: UUID4
    creator_username: Optional[str] = None
    creator_avatar: Optional[str] = None
    title: str
    description: str
    video_url: str
    video_duration: int
    budget: float
    deadline: datetime
    difficulty: JobDifficulty
    tags: List[str] = []
    status: JobStatus
    requirements: Optional[str] = None
    max_clips: int
    average_views: Optional[str] = None
    application_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobDetailResponse(JobResponse):
    """Single job with the creator's public summary."""
    creator: UserSummary


class JobApplyRequest(BaseModel):
    message: str = Field(..., min_length=1)
    proposed_timeline: Optional[str] = Field(None, max_length=100)


class ApplicationResponse(BaseModel):
    id: UUID4
    job_id: UUID4
    clipper_id: UUID4
    message: str
    proposed_timeline: Optional[str] = None
    status: ApplicationStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationWithClipperResponse(ApplicationResponse):
    """Application as seen by the job owner."""
    clipper: UserSummary


class ApplicationStatusUpdateRequest(BaseModel):
    status: ApplicationStatus
