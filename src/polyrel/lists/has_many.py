"""
polyrel.lists.has_many

Has-many list keyed by a single owner id column.

Responsibilities:
- Lazily query related rows filtered by the owner id (one id, several, or none).
- Link/unlink related rows by writing the owner id column and flushing.
"""

from __future__ import annotations

import copy
import uuid
from collections.abc import Iterable, Iterator
from typing import Any, Self

from sqlalchemy import ColumnElement, Select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session

from polyrel.db.query import DataQuery
from polyrel.exceptions import NotFound, TypeMismatch
from polyrel.lists.fields import FieldAccessor
from polyrel.lists.types import (
    AddResult,
    Many,
    One,
    OwnerFilter,
    RemoveResult,
    Unset,
    owner_filter_for,
)
from polyrel.observability.logging import get_logger

FOREIGN_ID_FILTER = "foreign_id"

_IDENTIFIER_TYPES = (int, str, bytes, uuid.UUID)


class HasManyList:
    """
    Related rows of `related_type` whose `foreign_key` column points at an owner.

    A freshly built list has no owner filter; use `for_foreign_id` to obtain a
    list scoped to one or several owners.
    """

    def __init__(self, session: Session, related_type: type, foreign_key: str) -> None:
        self._session = session
        self._related_type = related_type
        self._foreign_key = FieldAccessor.resolve(related_type, foreign_key)
        self._owner_filter: OwnerFilter = Unset()
        self._query = DataQuery(related_type)

    @property
    def related_type(self) -> type:
        return self._related_type

    @property
    def foreign_key(self) -> str:
        return self._foreign_key.name

    @property
    def owner_filter(self) -> OwnerFilter:
        return self._owner_filter

    @property
    def data_query(self) -> DataQuery:
        return self._query

    def get_foreign_id(self) -> Any:
        """One id, a frozenset of ids, or None when no owner filter is set."""

        return self._owner_filter.value

    def for_foreign_id(self, value: Any) -> Self:
        clone = self._clone()
        clone._owner_filter = owner_filter_for(value)
        clause = clone._owner_filter.clause(self._foreign_key.attribute)
        if clause is None:
            clone._query.remove_where(FOREIGN_ID_FILTER)
        else:
            clone._query.set_where(FOREIGN_ID_FILTER, clause)
        return clone

    def filter(self, *clauses: ColumnElement[bool]) -> Self:
        clone = self._clone()
        clone._query.where(*clauses)
        return clone

    # --- reading ---------------------------------------------------------

    def statement(self) -> Select[Any]:
        return self._query.statement()

    def all(self) -> list[Any]:
        return list(self._session.scalars(self.statement()))

    def first(self) -> Any | None:
        return self._session.scalars(self.statement().limit(1)).first()

    def count(self) -> int:
        return self._session.scalar(self._query.count_statement()) or 0

    def exists(self) -> bool:
        return self.first() is not None

    def by_id(self, ident: Any) -> Any | None:
        pk = sa_inspect(self._related_type).primary_key[0]
        return self._session.scalars(self.statement().where(pk == ident).limit(1)).first()

    def column_values(self, column: str) -> list[Any]:
        attribute = FieldAccessor.resolve(self._related_type, column).attribute
        return list(self._session.scalars(self._query.statement(attribute)))

    def __iter__(self) -> Iterator[Any]:
        return iter(self.all())

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, self._related_type):
            return False
        identity = sa_inspect(self._related_type).primary_key_from_instance(item)
        if not identity or identity[0] is None:
            return False
        return self.by_id(identity[0]) is not None

    # --- writing ---------------------------------------------------------

    def add(self, item: Any) -> AddResult:
        item = self._resolve(item, "add")
        skipped = self._check_single_owner()
        if skipped is not None:
            return skipped

        self._foreign_key.set(item, self._owner_filter.value)
        self._write(item)
        self._log().debug("add.written", owner_id=self._owner_filter.value)
        return AddResult.added

    def remove(self, item: Any) -> RemoveResult:
        """Unlink `item` from its owner. The row itself is kept."""

        self._require_instance(item, "remove")
        if not self._owner_filter.contains(self._foreign_key.get(item)):
            return self._skip_remove(RemoveResult.skipped_owner)

        self._foreign_key.set(item, None)
        self._write(item)
        self._log().debug("remove.written")
        return RemoveResult.removed

    def remove_by_id(self, ident: Any) -> RemoveResult:
        return self.remove(self._resolve(ident, "remove_by_id"))

    def add_many(self, items: Iterable[Any]) -> list[AddResult]:
        return [self.add(item) for item in items]

    def remove_many(self, items: Iterable[Any]) -> list[RemoveResult]:
        return [self.remove(item) for item in items]

    def remove_all(self) -> int:
        # Materialize first; each remove changes what the query would return.
        results = self.remove_many(self.all())
        return sum(1 for result in results if result.ok)

    # --- helpers ---------------------------------------------------------

    def _clone(self) -> Self:
        clone = copy.copy(self)
        clone._query = self._query.copy()
        return clone

    def _log(self):
        return get_logger(__name__).bind(
            list=type(self).__name__,
            related_type=self._related_type.__name__,
            foreign_key=self._foreign_key.name,
        )

    def _resolve(self, item: Any, operation: str) -> Any:
        if isinstance(item, self._related_type):
            return item
        ident = self._coerce_identifier(item, operation)
        found = self._session.get(self._related_type, ident)
        if found is None:
            raise NotFound(
                f"no {self._related_type.__name__} with id {ident!r}",
                details={"type": self._related_type.__name__, "id": ident},
            )
        return found

    def _coerce_identifier(self, item: Any, operation: str) -> Any:
        # Numeric strings resolve against integer keys; any other value that
        # does not convert to the primary key type is not an identifier.
        mismatch = TypeMismatch(
            f"{type(self).__name__}.{operation}() expecting a "
            f"{self._related_type.__name__} object, or ID value",
            details={"expected": self._related_type.__name__, "got": type(item).__name__},
        )
        if item is None or isinstance(item, bool) or not isinstance(item, _IDENTIFIER_TYPES):
            raise mismatch
        primary_key = sa_inspect(self._related_type).primary_key
        if len(primary_key) != 1:
            return item
        try:
            python_type = primary_key[0].type.python_type
        except NotImplementedError:
            return item
        if isinstance(item, python_type):
            return item
        try:
            return python_type(item)
        except (AttributeError, TypeError, ValueError) as exc:
            raise mismatch from exc

    def _require_instance(self, item: Any, operation: str) -> None:
        if not isinstance(item, self._related_type):
            raise TypeMismatch(
                f"{type(self).__name__}.{operation}() expecting a "
                f"{self._related_type.__name__} object",
                details={"expected": self._related_type.__name__, "got": type(item).__name__},
            )

    def _check_single_owner(self) -> AddResult | None:
        match self._owner_filter:
            case One():
                return None
            case Many():
                result = AddResult.skipped_multi_filter
            case _:
                result = AddResult.skipped_unset_filter
        self._log().warning("add.skipped", reason=result.value)
        return result

    def _skip_remove(self, result: RemoveResult) -> RemoveResult:
        self._log().debug("remove.skipped", reason=result.value)
        return result

    def _write(self, item: Any) -> None:
        # Flush only; the caller's session scope decides when to commit.
        self._session.add(item)
        self._session.flush()


# --- Module Notes -----------------------------------------------------------
# Lists are cheap to build and copy; build one per owner access rather than
# sharing an instance across requests.
