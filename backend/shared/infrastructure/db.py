"""
Database configuration and session management.
Uses SQLAlchemy 2.0 patterns.

Archive and restore cascades run inside the transaction of the session they
are given; ArchiveService commits or rolls it back once per call.
"""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session

from shared.config.settings import DATABASE_URL, settings


def _engine_options(url: str) -> dict[str, Any]:
    """
    Build engine keyword arguments for the configured backend.

    SQLite (used in development and tests) does not accept server pool or
    connect timeout settings.
    """
    if make_url(url).get_backend_name() == "sqlite":
        return {
            "connect_args": {"check_same_thread": False},
            "echo": settings.db_echo,
        }
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "connect_args": {"connect_timeout": 10},
        "echo": settings.db_echo,
    }


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.

    Usage:
        @router.delete("/{entity_type}/{entity_id}")
        def archive(db: Session = Depends(get_db)):
            ...

    The session is automatically closed after the request completes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database sessions outside of FastAPI (CLI, scripts).

    Usage:
        with get_db_context() as db:
            ArchiveService(db).archive("site", site_id, "ops")
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

