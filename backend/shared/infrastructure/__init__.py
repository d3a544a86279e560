"""
Infrastructure module: Database and request plumbing.

Provides:
- Database sessions and transactions (db.py)
- Request correlation IDs (correlation.py)
"""

from shared.infrastructure.db import (
    engine,
    SessionLocal,
    build_engine,
    enable_sqlite_foreign_keys,
    get_db,
    get_db_context,
    safe_commit,
)

__all__ = [
    "engine",
    "SessionLocal",
    "build_engine",
    "enable_sqlite_foreign_keys",
    "get_db",
    "get_db_context",
    "safe_commit",
]
