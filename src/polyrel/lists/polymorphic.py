"""
polyrel.lists.polymorphic

Has-many list linked through a polymorphic foreign key.

Responsibilities:
- Filter related rows by owner id, owner class (owner type plus sub-types) and,
  optionally, the owner-side relation name.
- Keep all three foreign key columns in step on add/remove.
"""

from __future__ import annotations

import warnings
from typing import Any

from sqlalchemy.orm import Session

from polyrel.db.mixins import foreign_field_names
from polyrel.exceptions import RelationScopeError
from polyrel.lists.fields import FieldAccessor
from polyrel.lists.has_many import HasManyList
from polyrel.lists.matching import class_clause, relation_clause, relation_matches
from polyrel.lists.types import AddResult, RelationScope, RemoveResult, ScopedTo, scope_for
from polyrel.registry import CaseMatching, TypeRegistry

FOREIGN_CLASS_PARAM = "Foreign.Class"
FOREIGN_RELATION_PARAM = "Foreign.Relation"

FOREIGN_CLASS_FILTER = "foreign_class"
FOREIGN_RELATION_FILTER = "foreign_relation"


class PolymorphicHasManyList(HasManyList):
    """
    Has-many list whose owner may be any sub-type of `owner_type`.

    `foreign_field` is the column prefix on `related_type`: "owner" means the
    columns `owner_id`, `owner_class` and `owner_relation`. Pass
    `relation_name` when the owner type has several has-many relations backed
    by the same columns.
    """

    def __init__(
        self,
        session: Session,
        related_type: type,
        foreign_field: str,
        owner_type: str,
        *,
        registry: TypeRegistry,
        relation_name: str | None = None,
        case_matching: CaseMatching = CaseMatching.exact,
    ) -> None:
        names = foreign_field_names(foreign_field)
        super().__init__(session, related_type, names.id)
        self._class_key = FieldAccessor.resolve(related_type, names.class_)
        self._relation_key = FieldAccessor.resolve(related_type, names.relation)
        self._case_matching = case_matching

        # Snapshot: sub-types registered later are not picked up by this list.
        self._owner_class_names = registry.subtypes_of(owner_type)
        self._query.set_query_param(FOREIGN_CLASS_PARAM, owner_type)
        self._query.set_where(
            FOREIGN_CLASS_FILTER,
            class_clause(self._class_key.attribute, self._owner_class_names, case_matching),
        )

        self._relation_scope: RelationScope = scope_for(relation_name)
        self._apply_relation_scope()

    def get_owner_type(self) -> str:
        return self._query.get_query_param(FOREIGN_CLASS_PARAM)

    def get_relation_name(self) -> str | None:
        return self._query.get_query_param(FOREIGN_RELATION_PARAM)

    def get_class_field_name(self) -> str:
        return self._class_key.name

    def get_relation_field_name(self) -> str:
        """Returned even when the list is not scoped to a relation name."""

        return self._relation_key.name

    @property
    def relation_scope(self) -> RelationScope:
        return self._relation_scope

    @property
    def owner_class_names(self) -> frozenset[str]:
        return self._owner_class_names

    @property
    def case_matching(self) -> CaseMatching:
        return self._case_matching

    def set_relation_name(self, name: str) -> PolymorphicHasManyList:
        """
        Scope this list to one relation name, in place.

        Deprecated: pass `relation_name` to the constructor instead. Scoping is
        one-way; a scoped list cannot be widened again.
        """

        warnings.warn(
            "set_relation_name() is deprecated; pass relation_name to the constructor",
            DeprecationWarning,
            stacklevel=2,
        )
        if not name:
            raise RelationScopeError("relation name must not be empty")
        if isinstance(self._relation_scope, ScopedTo):
            if self._relation_scope.name == name:
                return self
            raise RelationScopeError(
                f"list is already scoped to relation {self._relation_scope.name!r}",
                details={"current": self._relation_scope.name, "requested": name},
            )
        self._relation_scope = ScopedTo(name)
        self._apply_relation_scope()
        return self

    def add(self, item: Any) -> AddResult:
        """
        Link `item` (or the row with that id) to this list's single owner.

        The relation column is written only when the list is scoped. On an
        unscoped list an item that already carries a relation name keeps it,
        so it stays hidden from this list and a later `remove` reports
        `RemoveResult.skipped_relation`.
        """

        item = self._resolve(item, "add")
        skipped = self._check_single_owner()
        if skipped is not None:
            return skipped

        self._foreign_key.set(item, self._owner_filter.value)
        self._class_key.set(item, self.get_owner_type())
        relation_name = self.get_relation_name()
        if relation_name:
            self._relation_key.set(item, relation_name)

        self._write(item)
        self._log().debug(
            "add.written",
            owner_id=self._owner_filter.value,
            owner_type=self.get_owner_type(),
            relation=relation_name,
        )
        return AddResult.added

    def remove(self, item: Any) -> RemoveResult:
        """
        Unlink `item` from its owner, keeping the row.

        Items that do not belong to this list (other owner class, other
        relation name, other owner id) are left untouched and reported via the
        returned `RemoveResult`.
        """

        self._require_instance(item, "remove")

        if not self._case_matching.contains(self._owner_class_names, self._class_key.get(item)):
            return self._skip_remove(RemoveResult.skipped_class)

        relation_name = self.get_relation_name()
        if not relation_matches(self._relation_key.get(item), relation_name):
            return self._skip_remove(RemoveResult.skipped_relation)

        if not self._owner_filter.contains(self._foreign_key.get(item)):
            return self._skip_remove(RemoveResult.skipped_owner)

        if relation_name:
            self._relation_key.set(item, None)
        self._foreign_key.set(item, None)
        self._class_key.set(item, None)
        self._write(item)
        self._log().debug("remove.written", owner_type=self.get_owner_type())
        return RemoveResult.removed

    def _apply_relation_scope(self) -> None:
        name = self._relation_scope.name
        self._query.set_where(
            FOREIGN_RELATION_FILTER, relation_clause(self._relation_key.attribute, name)
        )
        self._query.set_query_param(FOREIGN_RELATION_PARAM, name)


# --- Module Notes -----------------------------------------------------------
# An unscoped list only sees rows whose relation column is NULL or empty; rows
# written through a scoped list stay invisible to it.
