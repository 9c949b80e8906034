import enum
import uuid
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, Enum, ForeignKey, JSON, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from clipit.core.database import Base


class JobStatus(str, enum.Enum):
    """
    Job lifecycle status.

    - ACTIVE: Open for applications
    - IN_PROGRESS: First clip submitted, still accepting clips
    - COMPLETED: Closed by the creator or all paid clips delivered
    - CANCELLED: Closed by the creator without completion
    """
    ACTIVE = "active"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class JobDifficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Job(Base):
    """
    A clipping job posted by a creator against a source video.
    """
    __tablename__ = "jobs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    creator_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    video_url = Column(Text, nullable=False)
    video_duration = Column(Integer, nullable=False)  # seconds
    budget = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=False)
    difficulty = Column(
        Enum(JobDifficulty, name="job_difficulty", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    # Stored as a JSON array of strings
    tags = Column(JSON, nullable=False, default=list)

    status = Column(
        Enum(JobStatus, name="job_status", values_callable=lambda e: [m.value for m in e]),
        default=JobStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    requirements = Column(Text, nullable=True)
    max_clips = Column(Integer, default=5, nullable=False)
    average_views = Column(String(20), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    creator = relationship("User", back_populates="jobs")
    applications = relationship("JobApplication", back_populates="job", cascade="all, delete-orphan")
    clips = relationship("Clip", back_populates="job", cascade="all, delete-orphan")

    @property
    def is_open_for_clips(self) -> bool:
        return self.status in (JobStatus.ACTIVE, JobStatus.IN_PROGRESS)

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', status={self.status.value})>"
