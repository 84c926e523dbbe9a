from uuid import uuid4

import pytest

from liturgi.domain.entities import Role, User
from liturgi.domain.errors import PermissionDenied
from liturgi.domain.rbac import (
    ROLE_PERMISSIONS,
    Permission,
    get_org_filter,
    has_permission,
    require_permission,
)


def user_with(role: Role) -> User:
    return User(id=uuid4(), org_id=uuid4(), email=f"{role.value}@grace.church", role=role)


def test_every_role_has_a_permission_set():
    assert set(ROLE_PERMISSIONS) == set(Role)


def test_admin_holds_every_permission():
    admin = user_with(Role.admin)

    assert all(has_permission(admin, permission) for permission in Permission)


@pytest.mark.parametrize(
    "role,permission,allowed",
    [
        (Role.leader, Permission.people_write, True),
        (Role.leader, Permission.people_delete, False),
        (Role.leader, Permission.users_manage, False),
        (Role.member, Permission.settings_read, True),
        (Role.member, Permission.people_write, False),
        (Role.viewer, Permission.people_read, True),
        (Role.viewer, Permission.settings_read, False),
        (Role.viewer, Permission.services_write, False),
    ],
)
def test_role_permission_table(role, permission, allowed):
    assert has_permission(user_with(role), permission) is allowed


def test_require_permission_raises_for_missing_permission():
    viewer = user_with(Role.viewer)

    with pytest.raises(PermissionDenied) as exc_info:
        require_permission(viewer, Permission.people_write)

    assert exc_info.value.permission == "people:write"


def test_require_permission_passes_for_granted_permission():
    require_permission(user_with(Role.leader), Permission.groups_write)


def test_org_filter_uses_the_users_organization():
    user = user_with(Role.member)

    assert get_org_filter(user) == {"org_id": user.org_id}
