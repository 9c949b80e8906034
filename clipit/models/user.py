"""
User model for authentication and marketplace roles.

Each User is either a creator (posts jobs, reviews and pays for clips)
or a clipper (applies to jobs, submits clips, receives payment).
"""

import enum
import uuid
from sqlalchemy import Column, String, Text, Integer, Numeric, DateTime, Enum, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from clipit.core.database import Base


class UserRole(str, enum.Enum):
    """Marketplace role, fixed at registration."""
    CREATOR = "creator"
    CLIPPER = "clipper"


class User(Base):
    """
    User account.

    rating, total_earnings and total_jobs are denormalized counters kept up
    to date by the review, payment and application flows.
    """
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    # Authentication credentials
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    username = Column(String(50), unique=True, nullable=False, index=True)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    avatar = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)

    # Marketplace counters
    rating = Column(Numeric(3, 2, asdecimal=False), default=0, nullable=False)
    total_earnings = Column(Numeric(10, 2, asdecimal=False), default=0, nullable=False)
    total_jobs = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    jobs = relationship("Job", back_populates="creator", cascade="all, delete-orphan")
    applications = relationship("JobApplication", back_populates="clipper", cascade="all, delete-orphan")
    clips = relationship("Clip", back_populates="clipper", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role={self.role.value})>"
