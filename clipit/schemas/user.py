"""
Pydantic schemas for authentication, registration and user profiles.
"""

from pydantic import BaseModel, EmailStr, Field, UUID4
from typing import Optional, Literal, Union
from datetime import datetime

from clipit.models.user import UserRole


class UserRegisterRequest(BaseModel):
    """Request schema for user registration."""
    email: EmailStr
    password: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    role: UserRole


class UserLoginRequest(BaseModel):
    """Request schema for user login."""
    email: EmailStr
    password: str


class TokenRefreshRequest(BaseModel):
    """Request schema for refreshing access token."""
    refresh_token: str


class UserResponse(BaseModel):
    """Full profile of the authenticated user."""
    id: UUID4
    email: str
    first_name: str
    last_name: str
    username: str
    role: UserRole
    avatar: Optional[str] = None
    bio: Optional[str] = None
    rating: float = 0
    total_earnings: float = 0
    total_jobs: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PublicUserResponse(BaseModel):
    """Public profile (no email)."""
    id: UUID4
    first_name: str
    last_name: str
    username: str
    role: UserRole
    avatar: Optional[str] = None
    bio: Optional[str] = None
    rating: float = 0
    total_earnings: float = 0
    total_jobs: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    """Compact user info embedded in job, application and clip responses."""
    id: UUID4
    username: str
    first_name: str
    last_name: str
    avatar: Optional[str] = None
    rating: float = 0

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: Optional[UserResponse] = None


class UserProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    username: Optional[str] = Field(None, min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    bio: Optional[str] = None
    avatar: Optional[str] = None


class CreatorStatsResponse(BaseModel):
    role: Literal["creator"] = "creator"
    total_jobs: int
    active_jobs: int
    completed_jobs: int
    total_budget: float
    total_clips_received: int


class ClipperStatsResponse(BaseModel):
    role: Literal["clipper"] = "clipper"
    total_clips: int
    approved_clips: int
    live_clips: int
    total_earnings: float
    total_views: int
    total_applications: int
    accepted_applications: int


UserStatsResponse = Union[CreatorStatsResponse, ClipperStatsResponse]
