"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern.
"""

from clipit.crud import user, job, application, clip, payment, review

__all__ = ["user", "job", "application", "clip", "payment", "review"]
