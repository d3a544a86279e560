"""
Base class and shared column types for all SQLAlchemy ORM models.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Integer, Numeric
from sqlalchemy.orm import DeclarativeBase


# BigInteger identity on server databases; SQLite only auto-increments
# "INTEGER PRIMARY KEY", so the variant keeps row ids server-assigned there too.
IdentityType = BigInteger().with_variant(Integer(), "sqlite")

# Two-decimal money column. Rounding for display happens at presentation time.
MoneyType = Numeric(10, 2, asdecimal=True)


class Base(DeclarativeBase):
    """Base class for all models."""

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        id_val = getattr(self, "id", None)
        return f"<{class_name}(id={id_val})>"
