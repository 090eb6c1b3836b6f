"""
Database configuration and connection management
"""
import logging
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from foodorder.core.config import settings
from foodorder.core.errors import StorageFailure

logger = logging.getLogger(__name__)

def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    options = {"connect_args": {"check_same_thread": False}}
    # A memory database lives inside one connection, so every session must share it
    if url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return options

# SQLAlchemy setup
engine = create_engine(
    settings.DATABASE_URL,
    echo=False,  # Set to True for SQL query logging
    **_engine_options(settings.DATABASE_URL)
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db() -> Session:
    """Get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_tables():
    """Create all database tables"""
    # Register the mapped classes before touching the metadata
    from foodorder.models import food, order, user  # noqa: F401
    Base.metadata.create_all(bind=engine)

def drop_tables():
    """Drop all database tables (for testing/reset)"""
    Base.metadata.drop_all(bind=engine)

@contextmanager
def storage_guard(db: Session, operation: str):
    """Roll back and raise StorageFailure if the block hits a database error"""
    try:
        yield
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Storage failure during {operation}", exc_info=True)
        raise StorageFailure(operation)

def commit(db: Session, operation: str):
    """Commit the session, mapping database errors to StorageFailure"""
    with storage_guard(db, operation):
        db.commit()
