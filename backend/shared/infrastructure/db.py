"""
Database configuration and session management.
Uses SQLAlchemy 2.0 patterns.
"""

import os
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from shared.config.settings import DATABASE_URL


def _calculate_pool_size() -> int:
    """
    Calculate pool size based on CPU cores.
    Formula: (2 * CPU cores) + 1, capped at 20.
    """
    cores = os.cpu_count() or 4
    return min(cores * 2 + 1, 20)


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """
    Turn on FK enforcement for every SQLite connection of an engine.
    SQLite ships with foreign keys disabled per connection.
    """

    @event.listens_for(target, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str, **overrides: Any) -> Engine:
    """
    Create an engine with settings appropriate for the backend in use.

    SQLite (development, tests, single-terminal setups) gets thread sharing
    and FK enforcement; server databases get connection pooling and timeouts.
    """
    if url.startswith("sqlite"):
        options: dict[str, Any] = {
            "connect_args": {"check_same_thread": False, "timeout": 30},
            "echo": False,
        }
        options.update(overrides)
        new_engine = create_engine(url, **options)
        enable_sqlite_foreign_keys(new_engine)
        return new_engine

    options = {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": _calculate_pool_size(),
        "max_overflow": 15,
        "pool_timeout": 30,  # Wait max 30s for connection from pool
        "pool_recycle": 1800,  # Recycle connections after 30 minutes
        "connect_args": {"connect_timeout": 10},
        "echo": False,  # Set to True for SQL logging in development
    }
    options.update(overrides)
    return create_engine(url, **options)


engine = build_engine(DATABASE_URL)

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
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.scalars(select(MenuItem)).all()

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
    Context manager for database sessions outside of FastAPI.

    Usage:
        with get_db_context() as db:
            db.scalars(select(Order)).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def safe_commit(db: Session) -> None:
    """
    Commit with automatic rollback on failure.

    Raises the original exception after rolling back.
    """
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
