"""
polyrel.db.session

SQLAlchemy engine + session factory helpers.

Responsibilities:
- Create the engine from settings.
- Create the sessionmaker with safe defaults.
- Provide a transactional session scope for callers.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine
from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.orm import Session, sessionmaker

from polyrel.settings import Settings


def create_engine(settings: Settings) -> Engine:
    return sa_create_engine(
        settings.database_url,
        echo=settings.echo_sql,
        pool_pre_ping=True,
    )


def create_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    # expire_on_commit=False keeps relation fields readable after the scope closes.
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """
    Commit on success, roll back on any exception.
    Lists only flush; this scope owns the transaction.
    """

    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# --- Module Notes -----------------------------------------------------------
# add/remove on a list are not atomic with each other; wrap several calls in one
# `session_scope` when they must commit together.
