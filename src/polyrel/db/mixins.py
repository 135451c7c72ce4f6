"""
polyrel.db.mixins

Declarative mixins for polymorphic owner columns.

Responsibilities:
- Derive the id/class/relation column names from one foreign field prefix.
- Declare those three columns on a related model.
"""

from __future__ import annotations

from typing import NamedTuple

from sqlalchemy import Integer, String
from sqlalchemy.orm import mapped_column
from sqlalchemy.types import TypeEngine


class ForeignFieldNames(NamedTuple):
    id: str
    class_: str
    relation: str


def foreign_field_names(prefix: str) -> ForeignFieldNames:
    return ForeignFieldNames(
        id=f"{prefix}_id",
        class_=f"{prefix}_class",
        relation=f"{prefix}_relation",
    )


def polymorphic_owner(
    prefix: str,
    *,
    id_type: type[TypeEngine] | TypeEngine = Integer,
    name_length: int = 255,
) -> type:
    """
    Build a mixin declaring `<prefix>_id`, `<prefix>_class` and `<prefix>_relation`.

    Usage:
        class Attachment(polymorphic_owner("owner"), Base):
            __tablename__ = "attachments"
            ...

    All three columns are nullable; a NULL id/class means "not linked".
    """

    names = foreign_field_names(prefix)
    attrs = {
        names.id: mapped_column(id_type, nullable=True, index=True),
        names.class_: mapped_column(String(name_length), nullable=True, index=True),
        names.relation: mapped_column(String(name_length), nullable=True),
    }
    return type(f"PolymorphicOwner_{prefix}", (), attrs)


# --- Module Notes -----------------------------------------------------------
# mapped_column objects on mixins are copied per mapped subclass, so one mixin
# may be shared by several related tables.
