"""
polyrel.lists.fields

Column accessors resolved once when a list is built.

Responsibilities:
- Validate that a column name exists on the related mapped class.
- Read and write that column on instances through the mapped attribute.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import InstrumentedAttribute

from polyrel.exceptions import TypeMismatch, UnknownField


@dataclass(frozen=True, slots=True)
class FieldAccessor:
    name: str
    attribute: InstrumentedAttribute[Any]

    @classmethod
    def resolve(cls, entity: type, name: str) -> FieldAccessor:
        mapper = sa_inspect(entity, raiseerr=False)
        if mapper is None:
            raise TypeMismatch(
                f"{entity.__name__} is not a mapped class",
                details={"type": entity.__name__},
            )
        if name not in mapper.column_attrs:
            raise UnknownField(
                f"{entity.__name__} has no column {name!r}",
                details={"type": entity.__name__, "field": name},
            )
        return cls(name=name, attribute=mapper.column_attrs[name].class_attribute)

    def get(self, item: Any) -> Any:
        return self.attribute.__get__(item, type(item))

    def set(self, item: Any, value: Any) -> None:
        self.attribute.__set__(item, value)
