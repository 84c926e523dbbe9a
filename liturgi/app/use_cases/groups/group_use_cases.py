from liturgi.app.services.unit_of_work import TenantScope
from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    GetEntityUseCase,
    ListEntitiesUseCase,
    UpdateEntityUseCase,
)
from liturgi.domain.entities import Group


class CreateGroupUseCase(CreateEntityUseCase):
    """
    Business Rules:
    - Counted against the groups plan limit
    """

    model = Group
    repository = "groups"
    entity_name = "group"
    plan_resource = "groups"


class UpdateGroupUseCase(UpdateEntityUseCase):
    model = Group
    repository = "groups"
    entity_name = "group"


class DeleteGroupUseCase(DeleteEntityUseCase):
    """Memberships and meetings go with the group; attendance records are kept unlinked"""

    model = Group
    repository = "groups"
    entity_name = "group"

    async def before_delete(self, scope: TenantScope, entity: Group) -> None:
        for meeting in await scope.group_meetings.list(group_id=entity.id):
            await scope.meeting_attendance.delete_where(meeting_id=meeting.id)
        await scope.group_meetings.delete_where(group_id=entity.id)
        await scope.group_memberships.delete_where(group_id=entity.id)
        await scope.attendance.update_where({"group_id": None}, group_id=entity.id)


class GetGroupUseCase(GetEntityUseCase):
    model = Group
    repository = "groups"
    entity_name = "group"


class ListGroupsUseCase(ListEntitiesUseCase):
    model = Group
    repository = "groups"
    entity_name = "group"
    order_by = "name"
