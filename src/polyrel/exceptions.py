"""
polyrel.exceptions

Error types raised by relation lists and the type registry.

Responsibilities:
- Provide a single root (`PolyrelError`) carrying a message and structured details.
- Name each hard failure a caller may want to handle separately.
"""

from __future__ import annotations

from typing import Any


class PolyrelError(Exception):
    """Base exception for all polyrel errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TypeMismatch(PolyrelError):
    """An item or id does not resolve to the list's declared related type."""


class UnknownType(PolyrelError):
    """A type name is not present in the type registry."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f"unknown type {type_name!r}", details={"type_name": type_name})
        self.type_name = type_name


class UnknownField(PolyrelError):
    """A relation column name does not exist on the related type."""


class NotFound(PolyrelError):
    """No record exists for the given identifier."""


class RegistryError(PolyrelError):
    """The type registry was given an inconsistent registration."""


class RelationScopeError(PolyrelError):
    """A list already scoped to one relation name was asked to scope to another."""


# --- Module Notes -----------------------------------------------------------
# Storage errors are not wrapped: SQLAlchemy exceptions raised during flush reach
# the caller unchanged so the surrounding session scope can roll back.
