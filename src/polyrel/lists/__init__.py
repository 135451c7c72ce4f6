"""
polyrel.lists

Relation list package.

Responsibilities:
- Export the has-many and polymorphic has-many lists plus their result types.
"""

from polyrel.lists.has_many import HasManyList
from polyrel.lists.matching import relation_matches
from polyrel.lists.polymorphic import PolymorphicHasManyList
from polyrel.lists.types import (
    AddResult,
    Many,
    One,
    OwnerFilter,
    RelationScope,
    RemoveResult,
    ScopedTo,
    Unscoped,
    Unset,
)

__all__ = [
    "AddResult",
    "HasManyList",
    "Many",
    "One",
    "OwnerFilter",
    "PolymorphicHasManyList",
    "RelationScope",
    "RemoveResult",
    "ScopedTo",
    "Unscoped",
    "Unset",
    "relation_matches",
]
