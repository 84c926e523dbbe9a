"""
Unit tests for BulkPeopleUseCase
"""

from uuid import uuid4

import pytest

from liturgi.app.use_cases.people import BulkOperation, BulkPeopleUseCase
from liturgi.domain.entities import AuditAction, Person, PersonStatus, PersonTag, Role


@pytest.fixture
def people(mock_scope):
    rows = [
        Person(id=uuid4(), first_name="Ruth", last_name="Moab"),
        Person(id=uuid4(), first_name="Naomi", last_name="Moab"),
    ]
    by_id = {person.id: person for person in rows}
    mock_scope.people.get.side_effect = lambda person_id: by_id.get(person_id)
    return rows


@pytest.mark.asyncio
async def test_bulk_update_audits_each_person(mock_uow, mock_scope, make_user, people):
    # Act
    result = await BulkPeopleUseCase(mock_uow).execute(
        make_user(),
        BulkOperation.update,
        [person.id for person in people],
        changes={"status": PersonStatus.inactive},
    )

    # Assert
    assert result.value == 2
    assert {person.status for person in people} == {PersonStatus.inactive}
    audits = [call[0][0] for call in mock_scope.audit_logs.add.call_args_list]
    assert [(a.action, a.entity_id) for a in audits] == [
        (AuditAction.updated, people[0].id),
        (AuditAction.updated, people[1].id),
    ]
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_bulk_tag_skips_people_already_tagged(mock_uow, mock_scope, make_user, people):
    tag_id = uuid4()
    mock_scope.tags.get.return_value = object()
    existing = PersonTag(person_id=people[0].id, tag_id=tag_id)
    mock_scope.person_tags.get_by.side_effect = (
        lambda person_id, tag_id: existing if person_id == people[0].id else None
    )

    result = await BulkPeopleUseCase(mock_uow).execute(
        make_user(), BulkOperation.tag, [p.id for p in people], tag_id=tag_id
    )

    assert result.value == 1
    added = mock_scope.person_tags.add.call_args[0][0]
    assert (added.person_id, added.tag_id) == (people[1].id, tag_id)


@pytest.mark.asyncio
async def test_unknown_person_fails_whole_batch(mock_uow, mock_scope, make_user, people):
    result = await BulkPeopleUseCase(mock_uow).execute(
        make_user(), BulkOperation.update, [people[0].id, uuid4()], changes={"status": "inactive"}
    )

    assert result.is_err()
    assert result.error.message == "Some people not found"
    mock_scope.people.update.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_bulk_delete_needs_delete_permission(mock_uow, mock_scope, make_user, people):
    result = await BulkPeopleUseCase(mock_uow).execute(
        make_user(Role.leader), BulkOperation.delete, [people[0].id]
    )

    assert result.error.code == "PERMISSION_DENIED"
    mock_scope.people.delete.assert_not_called()


@pytest.mark.asyncio
async def test_tag_operations_need_a_tag(mock_uow, make_user, people):
    result = await BulkPeopleUseCase(mock_uow).execute(
        make_user(), BulkOperation.untag, [people[0].id]
    )

    assert result.error.code == "VALIDATION_FAILED"
    assert result.error.details == [{"field": "tag_id", "message": "Required for tag operations"}]
