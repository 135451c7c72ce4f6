"""
polyrel.lists.matching

Comparison rules for the polymorphic foreign key.

Responsibilities:
- Decide whether a stored relation name matches a list's relation name, both in
  Python (`relation_matches`) and in SQL (`relation_clause`).
- Build the owner class filter under a given `CaseMatching` policy.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import ColumnElement, func, or_

from polyrel.registry import CaseMatching


def relation_matches(actual: str | None, expected: str | None) -> bool:
    """None and "" are the same empty value; two empties match."""

    return (not actual and not expected) or actual == expected


def relation_clause(column: Any, expected: str | None) -> ColumnElement[bool]:
    # Must agree with relation_matches for every (actual, expected) pair.
    if not expected:
        return or_(column.is_(None), column == "")
    return column == expected


def class_clause(
    column: Any, class_names: Iterable[str], case_matching: CaseMatching
) -> ColumnElement[bool]:
    names = sorted({case_matching.normalize(name) for name in class_names})
    if case_matching is CaseMatching.insensitive:
        return func.lower(column).in_(names)
    return column.in_(names)
