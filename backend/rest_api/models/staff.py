"""
Staff Models: Employee.
"""

from __future__ import annotations

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdentityType


class Employee(Base):
    """A staff member listed in the back office (no login, no permissions)."""

    __tablename__ = "employee"

    id: Mapped[int] = mapped_column(IdentityType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(Text, nullable=False)  # "waiter", "cook", "cashier"...
