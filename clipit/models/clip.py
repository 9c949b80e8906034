"""
Clip database model.

A video segment cut from a job's source video and submitted by a clipper.
"""

from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, Enum, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum
import uuid
from clipit.core.database import Base


class ClipStatus(str, enum.Enum):
    """
    Clip review lifecycle:

    SUBMITTED -> APPROVED -> LIVE
              -> REJECTED
    """
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    LIVE = "live"


class Clip(Base):
    __tablename__ = "clips"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_id = Column(UUID(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    clipper_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    video_url = Column(Text, nullable=False)
    thumbnail_url = Column(Text, nullable=True)

    # Seconds; start/end are offsets into the job's source video
    duration = Column(Integer, nullable=False)
    start_time = Column(Integer, nullable=False)
    end_time = Column(Integer, nullable=False)

    status = Column(
        Enum(ClipStatus, name="clip_status", values_callable=lambda e: [m.value for m in e]),
        default=ClipStatus.SUBMITTED,
        nullable=False,
        index=True,
    )
    platform = Column(String(50), nullable=True)

    # Performance
    views = Column(Integer, default=0, nullable=False)
    engagement = Column(Numeric(5, 2, asdecimal=False), default=0, nullable=False)
    earnings = Column(Numeric(10, 2, asdecimal=False), default=0, nullable=False)

    feedback = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    job = relationship("Job", back_populates="clips")
    clipper = relationship("User", back_populates="clips")

    def __repr__(self):
        return f"<Clip(id={self.id}, job_id={self.job_id}, status={self.status.value})>"
