"""
Role-Based Access Control

Static role -> permission table. Lookups are pure; no I/O.
"""

from enum import Enum
from typing import Dict, FrozenSet
from uuid import UUID

from .entities.enums import Role
from .errors import PermissionDenied


class Permission(str, Enum):
    people_read = "people:read"
    people_write = "people:write"
    people_delete = "people:delete"
    services_read = "services:read"
    services_write = "services:write"
    services_delete = "services:delete"
    groups_read = "groups:read"
    groups_write = "groups:write"
    groups_delete = "groups:delete"
    settings_read = "settings:read"
    settings_write = "settings:write"
    users_manage = "users:manage"
    org_manage = "org:manage"


ROLE_PERMISSIONS: Dict[Role, FrozenSet[Permission]] = {
    Role.admin: frozenset(Permission),
    Role.leader: frozenset(
        {
            Permission.people_read,
            Permission.people_write,
            Permission.services_read,
            Permission.services_write,
            Permission.groups_read,
            Permission.groups_write,
            Permission.settings_read,
        }
    ),
    Role.member: frozenset(
        {
            Permission.people_read,
            Permission.services_read,
            Permission.groups_read,
            Permission.settings_read,
        }
    ),
    Role.viewer: frozenset(
        {
            Permission.people_read,
            Permission.services_read,
            Permission.groups_read,
        }
    ),
}



def has_permission(user, permission: Permission) -> bool:
    return permission in ROLE_PERMISSIONS.get(Role(user.role), frozenset())


def require_permission(user, permission: Permission) -> None:
    if not has_permission(user, permission):
        raise PermissionDenied(permission.value)


def get_org_filter(user) -> Dict[str, UUID]:
    """The single source of the tenant scoping predicate."""
    return {"org_id": user.org_id}
