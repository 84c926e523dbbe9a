"""
Liturgi Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class Role(str, Enum):
    """User role within an organization"""

    admin = "admin"
    leader = "leader"
    member = "member"
    viewer = "viewer"


class AccountStatus(str, Enum):
    """User account status"""

    active = "active"
    deactivated = "deactivated"
    deleted = "deleted"


class AuditAction(str, Enum):
    """Kind of mutation recorded in the audit log"""

    created = "created"
    updated = "updated"
    deleted = "deleted"
    merged = "merged"
    imported = "imported"


class PersonStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class GroupStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    archived = "archived"


class GroupVisibility(str, Enum):
    public = "public"
    private = "private"
    hidden = "hidden"


class GroupCategory(str, Enum):
    small_group = "small_group"
    ministry_team = "ministry_team"
    class_ = "class"
    committee = "committee"
    prayer_group = "prayer_group"
    bible_study = "bible_study"
    youth_group = "youth_group"
    kids_group = "kids_group"
    mens_group = "mens_group"
    womens_group = "womens_group"
    support_group = "support_group"
    service_team = "service_team"
    worship_team = "worship_team"
    other = "other"


class GroupMemberRole(str, Enum):
    leader = "leader"
    co_leader = "co_leader"
    member = "member"
    guest = "guest"


class GroupMemberStatus(str, Enum):
    active = "active"
    invited = "invited"
    requested = "requested"
    declined = "declined"


class ServicePlanStatus(str, Enum):
    draft = "draft"
    published = "published"
    archived = "archived"


class ServiceItemType(str, Enum):
    song = "song"
    element = "element"
    note = "note"


class AssignmentStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    declined = "declined"


class WorkflowStatus(str, Enum):
    active = "active"
    paused = "paused"
    completed = "completed"


class CustomFieldType(str, Enum):
    text = "text"
    number = "number"
    date = "date"
    boolean = "boolean"
    select = "select"


class HouseholdRelation(str, Enum):
    head = "head"
    spouse = "spouse"
    child = "child"
    other = "other"


class LoginFailReason(str, Enum):
    invalid_password = "invalid_password"
    account_inactive = "account_inactive"
    invalid_two_factor = "invalid_two_factor"
