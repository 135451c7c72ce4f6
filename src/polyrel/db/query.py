"""
polyrel.db.query

Filter sink used by relation lists.

Responsibilities:
- Accumulate SQLAlchemy where clauses, optionally under a name so they can be replaced.
- Store named query params that lists read back later (owner class, relation name).
- Render `Select` statements for rows, single columns and counts.
"""

from __future__ import annotations

from itertools import count
from typing import Any

from sqlalchemy import ColumnElement, Select, func, select


class DataQuery:
    def __init__(self, entity: type) -> None:
        self._entity = entity
        self._where: dict[str, ColumnElement[bool]] = {}
        self._params: dict[str, Any] = {}
        self._anonymous = count()

    @property
    def entity(self) -> type:
        return self._entity

    def where(self, *clauses: ColumnElement[bool]) -> DataQuery:
        for clause in clauses:
            self._where[f"_{next(self._anonymous)}"] = clause
        return self

    def set_where(self, key: str, clause: ColumnElement[bool]) -> DataQuery:
        # Replacing keeps the original position so rendered SQL stays stable.
        self._where[key] = clause
        return self

    def remove_where(self, key: str) -> DataQuery:
        self._where.pop(key, None)
        return self

    def has_where(self, key: str) -> bool:
        return key in self._where

    def set_query_param(self, name: str, value: Any) -> DataQuery:
        self._params[name] = value
        return self

    def get_query_param(self, name: str, default: Any = None) -> Any:
        return self._params.get(name, default)

    @property
    def query_params(self) -> dict[str, Any]:
        return dict(self._params)

    def copy(self) -> DataQuery:
        clone = DataQuery(self._entity)
        clone._where = dict(self._where)
        clone._params = dict(self._params)
        clone._anonymous = count(len(self._where))
        return clone

    def statement(self, *columns: Any) -> Select[Any]:
        stmt = select(*columns) if columns else select(self._entity)
        return stmt.where(*self._where.values())

    def count_statement(self) -> Select[tuple[int]]:
        return select(func.count()).select_from(self.statement().subquery())


# --- Module Notes -----------------------------------------------------------
# Clauses are always SQLAlchemy expressions; no raw SQL strings are accepted.
