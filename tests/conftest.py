"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Creator / clipper accounts with auth headers
- Jobs, accepted applications and clips in known states
"""

import os

# Tests create their own schema on SQLite and never reach Redis
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clipit import models  # noqa: F401  Register all tables on Base.metadata
from clipit.core.config import settings
from clipit.core.database import Base, get_db
from clipit.core.security import get_password_hash, create_access_token
from clipit.models.user import User, UserRole
from clipit.models.job import Job, JobStatus, JobDifficulty
from clipit.models.application import JobApplication, ApplicationStatus
from clipit.models.clip import Clip, ClipStatus
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "SecurePass123!"


@pytest.fixture(autouse=True)
def disable_rate_limit(monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", False)
    monkeypatch.setattr(settings, "AUTO_CREATE_TABLES", False)


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _make_user(db_session, username, role, email=None):
    """Insert a user directly and return it."""
    user = User(
        email=email or f"{username}@example.com",
        hashed_password=get_password_hash(TEST_PASSWORD),
        first_name=username.capitalize(),
        last_name="Tester",
        username=username,
        role=role,
        rating=0,
        total_earnings=0,
        total_jobs=0,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _auth_headers(user):
    """Bearer headers for a user, minted directly (no login round-trip)."""
    token = create_access_token(data={"sub": str(user.id), "email": user.email, "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def creator(db_session):
    return _make_user(db_session, "creator", UserRole.CREATOR)


@pytest.fixture
def clipper(db_session):
    return _make_user(db_session, "clipper", UserRole.CLIPPER)


@pytest.fixture
def other_clipper(db_session):
    return _make_user(db_session, "otherclipper", UserRole.CLIPPER)


@pytest.fixture
def creator_headers(creator):
    return _auth_headers(creator)


@pytest.fixture
def clipper_headers(clipper):
    return _auth_headers(clipper)


@pytest.fixture
def other_clipper_headers(other_clipper):
    return _auth_headers(other_clipper)


@pytest.fixture
def sample_job_data():
    """Sample job payload for the create endpoint"""
    return {
        "title": "Podcast highlights for TikTok",
        "description": "Cut the three funniest moments from this two-hour episode.",
        "video_url": "https://www.youtube.com/watch?v=abc123",
        "video_duration": 7200,
        "budget": 250.0,
        "deadline": (datetime.now(timezone.utc) + timedelta(days=7)).isoformat(),
        "difficulty": "medium",
        "tags": ["podcast", "comedy"],
        "requirements": "Vertical 9:16, burned-in captions",
        "max_clips": 3,
        "average_views": "50K",
    }


@pytest.fixture
def job(db_session, creator):
    """An ACTIVE job owned by the creator fixture."""
    db_job = Job(
        creator_id=creator.id,
        title="Stream clips",
        description="Clip the best plays from last night's stream.",
        video_url="https://www.twitch.tv/videos/1",
        video_duration=3600,
        budget=100.0,
        deadline=datetime.now(timezone.utc) + timedelta(days=3),
        difficulty=JobDifficulty.EASY,
        tags=["gaming"],
        max_clips=2,
        status=JobStatus.ACTIVE,
    )
    db_session.add(db_job)
    db_session.commit()
    db_session.refresh(db_job)
    return db_job


@pytest.fixture
def accepted_application(db_session, job, clipper):
    application = JobApplication(
        job_id=job.id,
        clipper_id=clipper.id,
        message="I edit gaming content daily.",
        status=ApplicationStatus.ACCEPTED,
    )
    db_session.add(application)
    db_session.commit()
    db_session.refresh(application)
    return application


def _make_clip(db_session, job, clipper, status=ClipStatus.SUBMITTED, title="Clutch round"):
    clip = Clip(
        job_id=job.id,
        clipper_id=clipper.id,
        title=title,
        video_url="https://cdn.example.com/clip.mp4",
        duration=45,
        start_time=120,
        end_time=165,
        status=status,
        views=0,
        engagement=0,
        earnings=0,
    )
    db_session.add(clip)
    db_session.commit()
    db_session.refresh(clip)
    return clip


@pytest.fixture
def approved_clip(db_session, job, clipper, accepted_application):
    return _make_clip(db_session, job, clipper, status=ClipStatus.APPROVED)


@pytest.fixture
def clip_payload(job):
    return {
        "job_id": str(job.id),
        "title": "Best clutch of the night",
        "description": "1v4 clutch",
        "video_url": "https://cdn.example.com/clutch.mp4",
        "duration": 30,
        "start_time": 600,
        "end_time": 630,
        "platform": "tiktok",
    }


@pytest.fixture
def user_factory(db_session):
    """Create extra users: user_factory("name", UserRole.CLIPPER)."""
    def factory(username, role, email=None):
        return _make_user(db_session, username, role, email=email)
    return factory


@pytest.fixture
def clip_factory(db_session):
    """Create clips in a given state: clip_factory(job, clipper, ClipStatus.APPROVED)."""
    def factory(job, clipper, status=ClipStatus.SUBMITTED, title="Clutch round"):
        return _make_clip(db_session, job, clipper, status=status, title=title)
    return factory


@pytest.fixture
def headers_for():
    """Build bearer headers for any user."""
    return _auth_headers


@pytest.fixture
def failing_commit(db_session, monkeypatch):
    """Make the next commits on the shared session fail like a dropped connection."""
    def commit():
        raise SQLAlchemyError("commit failed")

    monkeypatch.setattr(db_session, "commit", commit)
