"""
polyrel.lists.types

Value types shared by relation lists.

Responsibilities:
- Results of add/remove (`AddResult`, `RemoveResult`).
- Owner id filter variants (`Unset | One | Many`).
- Relation scope variants (`Unscoped | ScopedTo`).
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement


class AddResult(enum.StrEnum):
    added = "ADDED"
    # The list has no owner id, so there is nothing to link to.
    skipped_unset_filter = "SKIPPED_UNSET_FILTER"
    # The list spans several owners; linking to one of them would be a guess.
    skipped_multi_filter = "SKIPPED_MULTI_FILTER"

    @property
    def ok(self) -> bool:
        return self is AddResult.added


class RemoveResult(enum.StrEnum):
    removed = "REMOVED"
    skipped_class = "SKIPPED_CLASS"
    skipped_relation = "SKIPPED_RELATION"
    skipped_owner = "SKIPPED_OWNER"

    @property
    def ok(self) -> bool:
        return self is RemoveResult.removed


@dataclass(frozen=True, slots=True)
class Unset:
    """No owner id filter; every owner id matches."""

    @property
    def value(self) -> None:
        return None

    def contains(self, owner_id: Any) -> bool:
        return True

    def clause(self, column: Any) -> ColumnElement[bool] | None:
        return None


@dataclass(frozen=True, slots=True)
class One:
    id: Any

    @property
    def value(self) -> Any:
        return self.id

    def contains(self, owner_id: Any) -> bool:
        return owner_id == self.id

    def clause(self, column: Any) -> ColumnElement[bool] | None:
        return column == self.id


@dataclass(frozen=True, slots=True)
class Many:
    ids: frozenset[Any]

    @property
    def value(self) -> frozenset[Any]:
        return self.ids

    def contains(self, owner_id: Any) -> bool:
        return owner_id in self.ids

    def clause(self, column: Any) -> ColumnElement[bool] | None:
        return column.in_(list(self.ids))


OwnerFilter = Unset | One | Many


def owner_filter_for(value: Any) -> OwnerFilter:
    """
    Map a raw foreign id value onto a filter variant.

    None, 0 and empty collections are unset. Any other iterable (strings
    excluded) becomes `Many`, even with one member.
    """

    if value is None or value == 0:
        return Unset()
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return One(value)
    ids = frozenset(value)
    if not ids:
        return Unset()
    return Many(ids)


@dataclass(frozen=True, slots=True)
class Unscoped:
    @property
    def name(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class ScopedTo:
    name: str


RelationScope = Unscoped | ScopedTo


def scope_for(name: str | None) -> RelationScope:
    if not name:
        return Unscoped()
    return ScopedTo(name)
