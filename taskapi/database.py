import logging

from sqlmodel import SQLModel, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from contextlib import contextmanager

from .config import DATABASE_URL

# Import all models to ensure they are registered with SQLModel metadata
from .models import Task  # noqa: F401

logger = logging.getLogger(__name__)


def _create_engine(url: str = DATABASE_URL):
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    # Server databases: no pooling between requests, pre-ping stale connections
    return create_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        poolclass=NullPool,
    )

engine = _create_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def get_session():
    """Get a database session (context manager style).

    For use outside of FastAPI dependencies:
        with get_session() as session:
            store = TaskStore(session)
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

def create_tables(bind=None):
    """Create all database tables."""
    bind = bind or engine
    logger.info("Ensuring database tables exist (%s)", bind.url.render_as_string(hide_password=True))
    SQLModel.metadata.create_all(bind=bind)
