"""
Unit tests for MergePeopleUseCase
"""

from uuid import uuid4

import pytest

from liturgi.app.use_cases.people import MergePeopleUseCase
from liturgi.app.use_cases.people.merge_people_use_case import MOVED_RELATIONS
from liturgi.domain.entities import AuditAction, Person, PersonTag


@pytest.fixture
def source():
    return Person(
        id=uuid4(),
        first_name="Jon",
        last_name="Smith",
        email="jon@old.org",
        phone="555-0100",
        merged_from=["earlier-duplicate"],
    )


@pytest.fixture
def target():
    return Person(id=uuid4(), first_name="Jonathan", last_name="Smith", email="jonathan@grace.church")


@pytest.mark.asyncio
async def test_merge_folds_source_into_target(mock_uow, mock_scope, make_user, source, target):
    # Arrange
    people = {source.id: source, target.id: target}
    mock_scope.people.get.side_effect = lambda person_id: people.get(person_id)

    # Act
    result = await MergePeopleUseCase(mock_uow).execute(make_user(), source.id, target.id)

    # Assert
    assert result.is_ok()
    merged = result.value
    assert merged.email == "jonathan@grace.church"
    assert merged.phone == "555-0100"
    assert merged.merged_from == [str(source.id), "earlier-duplicate"]

    for name in MOVED_RELATIONS:
        getattr(mock_scope, name).update_where.assert_called_once_with(
            {"person_id": target.id}, person_id=source.id
        )
    mock_scope.people.delete.assert_called_once_with(source)

    audit = mock_scope.audit_logs.add.call_args[0][0]
    assert audit.action == AuditAction.merged
    assert audit.entity_id == target.id
    assert audit.diff["new"]["filled_fields"] == ["phone"]
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_merge_skips_tags_the_target_already_has(
    mock_uow, mock_scope, make_user, source, target
):
    # Arrange
    shared_tag, own_tag = uuid4(), uuid4()
    people = {source.id: source, target.id: target}
    mock_scope.people.get.side_effect = lambda person_id: people.get(person_id)

    duplicate = PersonTag(person_id=source.id, tag_id=shared_tag)
    movable = PersonTag(person_id=source.id, tag_id=own_tag)
    rows = {
        target.id: [PersonTag(person_id=target.id, tag_id=shared_tag)],
        source.id: [duplicate, movable],
    }
    mock_scope.person_tags.list.side_effect = lambda person_id: rows[person_id]

    # Act
    result = await MergePeopleUseCase(mock_uow).execute(make_user(), source.id, target.id)

    # Assert
    assert result.is_ok()
    mock_scope.person_tags.delete.assert_called_once_with(duplicate)
    mock_scope.person_tags.update.assert_called_once_with(movable)
    assert movable.person_id == target.id
    assert mock_scope.audit_logs.add.call_args[0][0].diff["new"]["moved"]["person_tags"] == 1


@pytest.mark.asyncio
async def test_merge_into_self_is_rejected(mock_uow, make_user):
    person_id = uuid4()

    result = await MergePeopleUseCase(mock_uow).execute(make_user(), person_id, person_id)

    assert result.error.code == "VALIDATION_FAILED"
    mock_uow.scoped.assert_not_called()


@pytest.mark.asyncio
async def test_merge_with_foreign_person_is_not_found(mock_uow, mock_scope, make_user, target):
    mock_scope.people.get.side_effect = lambda person_id: target if person_id == target.id else None

    result = await MergePeopleUseCase(mock_uow).execute(make_user(), uuid4(), target.id)

    assert result.error.code == "NOT_FOUND"
    mock_scope.people.delete.assert_not_called()
    mock_uow.commit.assert_not_called()
