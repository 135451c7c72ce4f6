"""
tests.test_has_many

Single-column has-many list (owner id only).
"""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from polyrel.exceptions import NotFound, PolyrelError, TypeMismatch, UnknownField
from polyrel.lists import AddResult, HasManyList, Many, One, RemoveResult, Unset
from tests.models import Comment, Document


@pytest.fixture()
def documents(session: Session) -> tuple[Document, Document]:
    first, second = Document(title="first"), Document(title="second")
    session.add_all([first, second])
    session.flush()
    return first, second


def _comment(session: Session, body: str, document_id: int | None = None) -> Comment:
    comment = Comment(body=body, document_id=document_id)
    session.add(comment)
    session.flush()
    return comment


def test_unfiltered_list_has_no_foreign_id(session: Session) -> None:
    comments = HasManyList(session, Comment, "document_id")
    assert comments.owner_filter == Unset()
    assert comments.get_foreign_id() is None
    assert comments.foreign_key == "document_id"


def test_unknown_foreign_key(session: Session) -> None:
    with pytest.raises(UnknownField):
        HasManyList(session, Comment, "owner_id")


def test_for_foreign_id_returns_filtered_copy(session: Session, documents) -> None:
    first, second = documents
    c1 = _comment(session, "one", first.id)
    c2 = _comment(session, "two", second.id)
    _comment(session, "orphan")

    base = HasManyList(session, Comment, "document_id")
    scoped = base.for_foreign_id(first.id)
    both = base.for_foreign_id([first.id, second.id])

    assert base.count() == 3
    assert scoped.owner_filter == One(first.id)
    assert scoped.all() == [c1]
    assert {c.id for c in both} == {c1.id, c2.id}
    assert both.get_foreign_id() == frozenset({first.id, second.id})
    assert isinstance(both.owner_filter, Many)
    # Widening back to unset drops the id filter again.
    assert scoped.for_foreign_id(None).count() == 3


def test_reading_surface(session: Session, documents) -> None:
    first, _ = documents
    c1 = _comment(session, "alpha", first.id)
    c2 = _comment(session, "beta", first.id)
    outsider = _comment(session, "gamma")
    comments = HasManyList(session, Comment, "document_id").for_foreign_id(first.id)

    assert len(comments) == 2
    assert comments.exists()
    assert comments.first() in (c1, c2)
    assert comments.by_id(c2.id) is c2
    assert comments.by_id(outsider.id) is None
    assert c1 in comments
    assert outsider not in comments
    assert "alpha" not in comments
    assert sorted(comments.column_values("body")) == ["alpha", "beta"]
    assert [c.body for c in comments.filter(Comment.body == "beta")] == ["beta"]
    assert comments.count() == 2


def test_add_links_item_and_flushes(session: Session, documents, flushes: list[int]) -> None:
    first, _ = documents
    comment = _comment(session, "new")
    comments = HasManyList(session, Comment, "document_id").for_foreign_id(first.id)
    before = len(flushes)

    assert comments.add(comment) is AddResult.added
    assert comment.document_id == first.id
    assert len(flushes) == before + 1
    assert comments.all() == [comment]


def test_add_by_id(session: Session, documents) -> None:
    first, _ = documents
    comment = _comment(session, "by id")
    comments = HasManyList(session, Comment, "document_id").for_foreign_id(first.id)

    assert comments.add(comment.id).ok
    assert comment.document_id == first.id


def test_add_by_numeric_string_id(session: Session, documents) -> None:
    first, _ = documents
    comment = _comment(session, "by string id")
    comments = HasManyList(session, Comment, "document_id").for_foreign_id(first.id)

    assert comments.add(str(comment.id)).ok
    assert comment.document_id == first.id
    with pytest.raises(NotFound):
        comments.add("12345")


def test_storage_error_reaches_caller(session: Session, documents) -> None:
    first, _ = documents
    comment = _comment(session, "invalid", first.id)
    comments = HasManyList(session, Comment, "document_id").for_foreign_id(first.id)
    comment.body = None

    with pytest.raises(IntegrityError) as excinfo:
        comments.remove(comment)
    assert not isinstance(excinfo.value, PolyrelError)


def test_add_rejects_wrong_inputs(session: Session, documents) -> None:
    first, _ = documents
    comments = HasManyList(session, Comment, "document_id").for_foreign_id(first.id)

    with pytest.raises(NotFound):
        comments.add(12345)
    with pytest.raises(TypeMismatch):
        comments.add("twelve")
    with pytest.raises(TypeMismatch):
        comments.add(first)
    with pytest.raises(TypeMismatch):
        comments.add(True)


@pytest.mark.parametrize(
    ("foreign_id", "expected"),
    [(None, AddResult.skipped_unset_filter), ([1, 2], AddResult.skipped_multi_filter)],
)
def test_add_skips_without_single_owner(
    session: Session, flushes: list[int], foreign_id, expected: AddResult
) -> None:
    comment = _comment(session, "stray")
    comments = HasManyList(session, Comment, "document_id").for_foreign_id(foreign_id)
    before = len(flushes)

    assert comments.add(comment) is expected
    assert comment.document_id is None
    assert len(flushes) == before


def test_remove_unlinks_without_deleting(session: Session, documents) -> None:
    first, _ = documents
    comment = _comment(session, "bye", first.id)
    comments = HasManyList(session, Comment, "document_id").for_foreign_id(first.id)

    assert comments.remove(comment) is RemoveResult.removed
    assert comment.document_id is None
    assert comments.count() == 0
    assert session.get(Comment, comment.id) is comment


def test_remove_ignores_other_owner(session: Session, documents, flushes: list[int]) -> None:
    first, second = documents
    comment = _comment(session, "elsewhere", second.id)
    comments = HasManyList(session, Comment, "document_id").for_foreign_id(first.id)
    before = len(flushes)

    assert comments.remove(comment) is RemoveResult.skipped_owner
    assert comment.document_id == second.id
    assert len(flushes) == before


def test_remove_requires_related_instance(session: Session, documents) -> None:
    comments = HasManyList(session, Comment, "document_id")
    with pytest.raises(TypeMismatch):
        comments.remove(documents[0])


def test_remove_by_id_and_remove_all(session: Session, documents) -> None:
    first, second = documents
    c1 = _comment(session, "one", first.id)
    _comment(session, "two", first.id)
    kept = _comment(session, "three", second.id)
    comments = HasManyList(session, Comment, "document_id").for_foreign_id(first.id)

    assert comments.remove_by_id(c1.id).ok
    assert comments.count() == 1
    assert comments.remove_all() == 1
    assert comments.count() == 0
    assert kept.document_id == second.id


def test_add_many(session: Session, documents) -> None:
    first, _ = documents
    items = [_comment(session, str(i)) for i in range(3)]
    comments = HasManyList(session, Comment, "document_id").for_foreign_id(first.id)

    assert comments.add_many(items) == [AddResult.added] * 3
    assert comments.count() == 3
    assert comments.remove_many(items) == [RemoveResult.removed] * 3
