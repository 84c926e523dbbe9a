"""
Bulk People Use Case

One action applied to a selection of people in a single transaction.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from liturgi.app.services.unit_of_work import TenantScope, UnitOfWork
from liturgi.app.use_cases.common import not_found, record_audit, snapshot
from liturgi.app.use_cases.common.crud import verify_references
from liturgi.domain.entities import AuditAction, Person, PersonTag, User
from liturgi.domain.rbac import Permission, get_org_filter, has_permission
from liturgi.libs.result import Error, Result, Return

from .person_use_cases import PERSON_REFERENCES, remove_person_rows

logger = logging.getLogger(__name__)


class BulkOperation(str, Enum):
    update = "update"
    tag = "tag"
    untag = "untag"
    delete = "delete"


def _invalid(field: str, message: str) -> Error:
    return Error("VALIDATION_FAILED", "Validation failed", [{"field": field, "message": message}])


class BulkPeopleUseCase:
    """
    Business Rules:
    - Every id must name a person of the caller's organization, otherwise
      nothing changes and NOT_FOUND is returned
    - update needs at least one field; tag and untag need a tag of the
      organization
    - tag skips people who already carry the tag, untag skips people who
      do not
    - delete additionally needs people:delete and removes every row the
      people own, like a single delete
    - Each affected person gets its own audit entry

    Returns the number of people changed.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        actor: User,
        operation: BulkOperation,
        person_ids: List[UUID],
        changes: Optional[Dict[str, Any]] = None,
        tag_id: Optional[UUID] = None,
    ) -> Result[int]:
        if operation == BulkOperation.delete and not has_permission(
            actor, Permission.people_delete
        ):
            return Return.err(
                Error("PERMISSION_DENIED", "You do not have permission to do this")
            )
        if operation == BulkOperation.update and not changes:
            return Return.err(_invalid("changes", "At least one field is required"))
        if operation in (BulkOperation.tag, BulkOperation.untag) and tag_id is None:
            return Return.err(_invalid("tag_id", "Required for tag operations"))

        person_ids = list(dict.fromkeys(person_ids))

        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))

            people = [await scope.people.get(person_id) for person_id in person_ids]
            if any(person is None for person in people):
                return Return.err(Error("NOT_FOUND", "Some people not found"))

            if operation == BulkOperation.update:
                error = await verify_references(scope, PERSON_REFERENCES, changes)
                if error:
                    return Return.err(error)
                affected = await self._update(scope, actor, people, changes)
            elif operation == BulkOperation.delete:
                affected = await self._delete(scope, actor, people)
            else:
                if await scope.tags.get(tag_id) is None:
                    return Return.err(not_found("Tag"))
                if operation == BulkOperation.tag:
                    affected = await self._tag(scope, actor, people, tag_id)
                else:
                    affected = await self._untag(scope, actor, people, tag_id)

            await self.uow.commit()

        logger.info(f"Bulk {operation.value} changed {affected} of {len(person_ids)} people")
        return Return.ok(affected)

    async def _update(
        self, scope: TenantScope, actor: User, people: List[Person], changes: Dict[str, Any]
    ) -> int:
        for person in people:
            old = snapshot(person)
            for field, value in changes.items():
                setattr(person, field, value)
            person = await scope.people.update(person)
            await record_audit(
                scope,
                actor.id,
                AuditAction.updated,
                "person",
                person.id,
                old=old,
                new=snapshot(person),
            )
        return len(people)

    async def _delete(self, scope: TenantScope, actor: User, people: List[Person]) -> int:
        for person in people:
            person_id, old = person.id, snapshot(person)
            await remove_person_rows(scope, person_id)
            await scope.people.delete(person)
            await record_audit(scope, actor.id, AuditAction.deleted, "person", person_id, old=old)
        return len(people)

    async def _tag(
        self, scope: TenantScope, actor: User, people: List[Person], tag_id: UUID
    ) -> int:
        affected = 0
        for person in people:
            if await scope.person_tags.get_by(person_id=person.id, tag_id=tag_id):
                continue
            assignment = await scope.person_tags.add(
                PersonTag(person_id=person.id, tag_id=tag_id)
            )
            await record_audit(
                scope,
                actor.id,
                AuditAction.created,
                "person_tag",
                assignment.id,
                new=snapshot(assignment),
            )
            affected += 1
        return affected

    async def _untag(
        self, scope: TenantScope, actor: User, people: List[Person], tag_id: UUID
    ) -> int:
        affected = 0
        for person in people:
            assignment = await scope.person_tags.get_by(person_id=person.id, tag_id=tag_id)
            if assignment is None:
                continue
            old = snapshot(assignment)
            await scope.person_tags.delete(assignment)
            await record_audit(
                scope, actor.id, AuditAction.deleted, "person_tag", assignment.id, old=old
            )
            affected += 1
        return affected
