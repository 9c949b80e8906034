from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from clipit.core.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using them
    pool_size=20,
    max_overflow=10,
    pool_recycle=1800,
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """
    Initialize database.

    Imports every model so it is registered on Base.metadata, then creates
    any missing tables when AUTO_CREATE_TABLES is enabled.
    """
    from clipit import models  # noqa: F401  Import models to register them

    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=bind or engine)
