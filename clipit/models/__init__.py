"""
Database models package.
"""

from clipit.models.user import User, UserRole
from clipit.models.job import Job, JobStatus, JobDifficulty
from clipit.models.application import JobApplication, ApplicationStatus
from clipit.models.clip import Clip, ClipStatus
from clipit.models.payment import Payment, PaymentStatus
from clipit.models.review import Review

__all__ = [
    "User", "UserRole",
    "Job", "JobStatus", "JobDifficulty",
    "JobApplication", "ApplicationStatus",
    "Clip", "ClipStatus",
    "Payment", "PaymentStatus",
    "Review",
]
