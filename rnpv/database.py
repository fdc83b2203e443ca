"""
rNPV Valuator Database Configuration

Sets up the SQLAlchemy engine, session factory, and declarative base used
by the SQL-backed valuation store.

Key Design Decisions:
    - check_same_thread=False for SQLite so FastAPI worker threads can share it
    - pool_pre_ping=True to handle stale connections gracefully
    - DATABASE_URL comes from rnpv.config; change it to switch to PostgreSQL
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .config import DATABASE_URL, SQLALCHEMY_ECHO

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in DATABASE_URL else {},
    pool_pre_ping=True,
    echo=SQLALCHEMY_ECHO,
)


@event.listens_for(engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable WAL mode for SQLite connections."""
    if "sqlite" in DATABASE_URL:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Declarative base class for all ORM models."""
    pass


def get_db():
    """
    FastAPI dependency that provides a database session.
    Yields a session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Create all database tables from ORM model definitions.
    Called during application startup.
    """
    from . import models  # noqa: F401 — side-effect import to register models
    Base.metadata.create_all(bind=engine)
