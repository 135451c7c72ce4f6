"""
polyrel.registry

Type registry for polymorphic owners.

Responsibilities:
- Record owner type names and their parent/child relationships.
- Answer "which concrete type names satisfy owner type X" (X plus all sub-types).
- Make the class-name case policy explicit (`CaseMatching`).
"""

from __future__ import annotations

import enum
from collections.abc import Iterable

from sqlalchemy.orm import DeclarativeBase

from polyrel.exceptions import RegistryError, UnknownType


class CaseMatching(enum.StrEnum):
    # Compare stored class names byte-for-byte, or after lower-casing both sides.
    exact = "exact"
    insensitive = "insensitive"

    def normalize(self, name: str) -> str:
        if self is CaseMatching.insensitive:
            return name.lower()
        return name

    def contains(self, names: Iterable[str], candidate: str | None) -> bool:
        if not candidate:
            return False
        wanted = self.normalize(candidate)
        return any(self.normalize(name) == wanted for name in names)


class TypeRegistry:
    """
    Single-inheritance tree of type names.

    Names are canonical as registered; lookups by name are always exact. Case
    folding applies only when comparing stored values via `CaseMatching`.
    """

    def __init__(self) -> None:
        self._parents: dict[str, str | None] = {}
        self._children: dict[str, list[str]] = {}

    def register(self, name: str, parent: str | None = None) -> None:
        if name in self._parents:
            raise RegistryError(
                f"type {name!r} is already registered", details={"type_name": name}
            )
        if parent is not None and parent not in self._parents:
            raise UnknownType(parent)
        self._parents[name] = parent
        self._children[name] = []
        if parent is not None:
            self._children[parent].append(name)

    def __contains__(self, name: object) -> bool:
        return name in self._parents

    def __len__(self) -> int:
        return len(self._parents)

    def parent_of(self, name: str) -> str | None:
        if name not in self._parents:
            raise UnknownType(name)
        return self._parents[name]

    def subtypes_of(self, name: str) -> frozenset[str]:
        if name not in self._parents:
            raise UnknownType(name)
        found = [name]
        pending = list(self._children[name])
        while pending:
            child = pending.pop()
            found.append(child)
            pending.extend(self._children[child])
        return frozenset(found)

    @classmethod
    def from_base(cls, base: type[DeclarativeBase]) -> TypeRegistry:
        """
        Build a registry from every class mapped on `base`.

        A class's parent is its nearest mapped ancestor, so plain mixins in the
        MRO are skipped.
        """

        registry = cls()
        mapped = {mapper.class_ for mapper in base.registry.mappers}
        seen: set[type] = set()

        def walk(klass: type, parent: str | None) -> None:
            for sub in klass.__subclasses__():
                if sub in seen:
                    continue
                seen.add(sub)
                if sub in mapped:
                    registry.register(sub.__name__, parent)
                    walk(sub, sub.__name__)
                else:
                    walk(sub, parent)

        walk(base, None)
        return registry


# --- Module Notes -----------------------------------------------------------
# Lists snapshot `subtypes_of` at construction; types registered afterwards are
# not visible to lists that already exist.
