"""
tests.conftest

Shared fixtures: in-memory SQLite engine, session, type registry, flush spy.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import Engine
from sqlalchemy.orm import Session

from polyrel.db.base import Base
from polyrel.db.init_db import init_db
from polyrel.db.session import create_engine, create_sessionmaker
from polyrel.registry import TypeRegistry
from polyrel.settings import Settings
from tests import models  # noqa: F401  # ensure models are registered on Base.metadata


@pytest.fixture()
def settings() -> Settings:
    return Settings(env="test", database_url="sqlite://")


@pytest.fixture()
def engine(settings: Settings) -> Iterator[Engine]:
    engine = create_engine(settings)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine: Engine) -> Iterator[Session]:
    factory = create_sessionmaker(engine)
    with factory() as session:
        yield session
        session.rollback()


@pytest.fixture()
def registry() -> TypeRegistry:
    return TypeRegistry.from_base(Base)


@pytest.fixture()
def flushes(session: Session, monkeypatch: pytest.MonkeyPatch) -> list[int]:
    """Records one entry per `session.flush()` call made after the fixture is requested."""

    calls: list[int] = []
    original = session.flush

    def spy(*args, **kwargs):
        calls.append(1)
        return original(*args, **kwargs)

    monkeypatch.setattr(session, "flush", spy)
    return calls


# --- Module Notes -----------------------------------------------------------
# Each test gets a fresh in-memory database; nothing is committed.
