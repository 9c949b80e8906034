"""
Job application model.

A clipper's request to work on a job. Only clippers with an ACCEPTED
application may submit clips for that job.
"""

import enum
import uuid
from sqlalchemy import Column, String, Text, DateTime, Enum, ForeignKey, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from clipit.core.database import Base


class ApplicationStatus(str, enum.Enum):
    """
    PENDING -> ACCEPTED
            -> REJECTED
    """
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class JobApplication(Base):
    __tablename__ = "job_applications"
    __table_args__ = (
        UniqueConstraint("job_id", "clipper_id", name="uq_job_applications_job_clipper"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_id = Column(UUID(as_uuid=True), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    clipper_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    message = Column(Text, nullable=False)
    proposed_timeline = Column(String(100), nullable=True)
    status = Column(
        Enum(ApplicationStatus, name="application_status", values_callable=lambda e: [m.value for m in e]),
        default=ApplicationStatus.PENDING,
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    job = relationship("Job", back_populates="applications")
    clipper = relationship("User", back_populates="applications")

    def __repr__(self):
        return f"<JobApplication(job_id={self.job_id}, clipper_id={self.clipper_id}, status={self.status.value})>"
