from uuid import UUID

from liturgi.app.use_cases.common import CreateEntityUseCase, not_found, record_audit, snapshot
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.domain.entities import AuditAction, PersonTag, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Result, Return


class AssignTagUseCase(CreateEntityUseCase):
    """Person and tag must both belong to the caller's organization"""

    model = PersonTag
    repository = "person_tags"
    entity_name = "person_tag"
    references = {
        "person_id": ("people", "Person"),
        "tag_id": ("tags", "Tag"),
    }
    conflict_message = "This tag is already assigned to this person"


class UnassignTagUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, person_id: UUID, tag_id: UUID) -> Result[None]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            assignment = await scope.person_tags.get_by(person_id=person_id, tag_id=tag_id)
            if assignment is None:
                return Return.err(not_found("Tag assignment"))

            old = snapshot(assignment)
            await scope.person_tags.delete(assignment)
            await record_audit(
                scope, actor.id, AuditAction.deleted, "person_tag", assignment.id, old=old
            )
            await self.uow.commit()

        return Return.ok(None)
