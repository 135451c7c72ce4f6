"""
polyrel.db.base

SQLAlchemy declarative base.

Responsibilities:
- Provide a shared DeclarativeBase for models owned or owning through polyrel lists.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# --- Module Notes -----------------------------------------------------------
# `TypeRegistry.from_base(Base)` discovers owner types from the classes mapped here.
