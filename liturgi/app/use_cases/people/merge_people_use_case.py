"""
Merge People Use Case

Folds a duplicate person (source) into the surviving record (target).
"""

import logging
from typing import Dict, Sequence
from uuid import UUID

from liturgi.app.repositories.scoped_repository import IScopedRepository
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.common import not_found, record_audit, snapshot
from liturgi.domain.entities import MERGEABLE_FIELDS, AuditAction, Person, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

# Relations moved wholesale from source to target
MOVED_RELATIONS = (
    "person_phones",
    "person_emails",
    "person_addresses",
    "emergency_contacts",
    "person_notes",
    "attendance",
    "form_submissions",
)

# Relations moved only where the target has no row with the same key
DEDUPLICATED_RELATIONS = {
    "person_tags": ("tag_id",),
    "custom_field_values": ("field_id",),
    "group_memberships": ("group_id",),
    "meeting_attendance": ("meeting_id",),
    "service_assignments": ("service_plan_id", "role"),
}


def _is_blank(value) -> bool:
    return value is None or value == ""


async def _move_deduplicated(
    repository: IScopedRepository, key_fields: Sequence[str], source_id: UUID, target_id: UUID
) -> int:
    def key(row):
        return tuple(getattr(row, f) for f in key_fields)

    target_keys = {key(row) for row in await repository.list(person_id=target_id)}
    moved = 0
    for row in await repository.list(person_id=source_id):
        if key(row) in target_keys:
            await repository.delete(row)
            continue
        row.person_id = target_id
        await repository.update(row)
        target_keys.add(key(row))
        moved += 1
    return moved


class MergePeopleUseCase:
    """
    Business Rules:
    - Source and target must be different people of the caller's organization
    - Target keeps its own values; blank target fields take the source value
    - Every related row of the source moves to the target; tags, custom field
      values, group memberships, meeting attendance and service assignments
      are skipped (and the source row dropped) when the target already has
      one for the same key
    - Source id is appended to target.merged_from, source is deleted
    - One transaction, one "merged" audit entry
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, source_id: UUID, target_id: UUID) -> Result[Person]:
        if source_id == target_id:
            return Return.err(
                Error("VALIDATION_FAILED", "Cannot merge a person into themselves")
            )

        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))

            source = await scope.people.get(source_id)
            target = await scope.people.get(target_id)
            if source is None or target is None:
                return Return.err(not_found("Person"))

            source_snapshot = snapshot(source)
            target_snapshot = snapshot(target)

            filled = []
            for field in MERGEABLE_FIELDS:
                if _is_blank(getattr(target, field)) and not _is_blank(getattr(source, field)):
                    setattr(target, field, getattr(source, field))
                    filled.append(field)

            target.merged_from = [
                *(target.merged_from or []),
                str(source.id),
                *(source.merged_from or []),
            ]

            moved: Dict[str, int] = {}
            for name in MOVED_RELATIONS:
                moved[name] = await getattr(scope, name).update_where(
                    {"person_id": target.id}, person_id=source.id
                )
            for name, key_fields in DEDUPLICATED_RELATIONS.items():
                moved[name] = await _move_deduplicated(
                    getattr(scope, name), key_fields, source.id, target.id
                )

            target = await scope.people.update(target)
            await scope.people.delete(source)

            await record_audit(
                scope,
                actor.id,
                AuditAction.merged,
                "person",
                target.id,
                old={"source": source_snapshot, "target": target_snapshot},
                new={"target": snapshot(target), "filled_fields": filled, "moved": moved},
            )
            await self.uow.commit()

        logger.info(f"Merged person {source_id} into {target_id}")
        return Return.ok(target)
