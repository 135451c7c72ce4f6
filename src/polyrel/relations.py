"""
polyrel.relations

Owner-facing entry point for building relation lists.

Responsibilities:
- Build has-many and polymorphic has-many lists scoped to an owner instance.
- Apply settings (class name case policy) consistently to every list built.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session

from polyrel.exceptions import TypeMismatch
from polyrel.lists.has_many import HasManyList
from polyrel.lists.polymorphic import PolymorphicHasManyList
from polyrel.registry import TypeRegistry
from polyrel.settings import Settings, get_settings


class RelationFactory:
    def __init__(
        self,
        *,
        session: Session,
        registry: TypeRegistry,
        settings: Settings | None = None,
    ) -> None:
        self._session = session
        self._registry = registry
        self._settings = settings or get_settings()

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    def has_many(self, owner: Any, related_type: type, foreign_key: str) -> HasManyList:
        return HasManyList(self._session, related_type, foreign_key).for_foreign_id(
            self._owner_id(owner)
        )

    def polymorphic_has_many(
        self,
        owner: Any,
        related_type: type,
        foreign_field: str,
        *,
        relation_name: str | None = None,
    ) -> PolymorphicHasManyList:
        # The owner's concrete class is the one recorded on linked rows.
        lst = PolymorphicHasManyList(
            self._session,
            related_type,
            foreign_field,
            type(owner).__name__,
            registry=self._registry,
            relation_name=relation_name,
            case_matching=self._settings.class_case_matching,
        )
        return lst.for_foreign_id(self._owner_id(owner))

    @staticmethod
    def _owner_id(owner: Any) -> Any:
        mapper = sa_inspect(type(owner), raiseerr=False)
        if mapper is None:
            raise TypeMismatch(
                f"{type(owner).__name__} is not a mapped class",
                details={"type": type(owner).__name__},
            )
        identity = mapper.primary_key_from_instance(owner)
        if len(identity) != 1:
            raise TypeMismatch(
                f"{type(owner).__name__} must have a single-column primary key",
                details={"type": type(owner).__name__},
            )
        return identity[0]


# --- Module Notes -----------------------------------------------------------
# An owner that has not been flushed yet has no id; the resulting list has an
# unset owner filter and `add` reports `AddResult.skipped_unset_filter`.
