from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    ListEntitiesUseCase,
    UpdateEntityUseCase,
)
from liturgi.domain.entities import GroupMembership


class AddGroupMemberUseCase(CreateEntityUseCase):
    """Group and person must belong to the caller's organization"""

    model = GroupMembership
    repository = "group_memberships"
    entity_name = "group_membership"
    references = {
        "group_id": ("groups", "Group"),
        "person_id": ("people", "Person"),
    }
    conflict_message = "This person is already a member of this group"


class UpdateGroupMemberUseCase(UpdateEntityUseCase):
    model = GroupMembership
    repository = "group_memberships"
    entity_name = "group_membership"


class RemoveGroupMemberUseCase(DeleteEntityUseCase):
    model = GroupMembership
    repository = "group_memberships"
    entity_name = "group_membership"


class ListGroupMembersUseCase(ListEntitiesUseCase):
    model = GroupMembership
    repository = "group_memberships"
    entity_name = "group_membership"
    order_by = "created_at"
