"""
polyrel.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
"""

from __future__ import annotations

from sqlalchemy import Engine

from polyrel.db.base import Base


def init_db(engine: Engine) -> None:
    with engine.begin() as conn:
        Base.metadata.create_all(conn)


# --- Module Notes -----------------------------------------------------------
# Schema migration is out of scope; production schemas are managed elsewhere.
