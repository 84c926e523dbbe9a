"""
Group Use Cases
"""

from .group_use_cases import (
    CreateGroupUseCase,
    DeleteGroupUseCase,
    GetGroupUseCase,
    ListGroupsUseCase,
    UpdateGroupUseCase,
)
from .meeting_use_cases import (
    CreateGroupMeetingUseCase,
    DeleteGroupMeetingUseCase,
    GetGroupMeetingUseCase,
    ListGroupMeetingsUseCase,
    RecordMeetingAttendanceUseCase,
    UpdateGroupMeetingUseCase,
)
from .member_use_cases import (
    AddGroupMemberUseCase,
    ListGroupMembersUseCase,
    RemoveGroupMemberUseCase,
    UpdateGroupMemberUseCase,
)

__all__ = [
    "CreateGroupUseCase",
    "DeleteGroupUseCase",
    "GetGroupUseCase",
    "ListGroupsUseCase",
    "UpdateGroupUseCase",
    "CreateGroupMeetingUseCase",
    "DeleteGroupMeetingUseCase",
    "GetGroupMeetingUseCase",
    "ListGroupMeetingsUseCase",
    "RecordMeetingAttendanceUseCase",
    "UpdateGroupMeetingUseCase",
    "AddGroupMemberUseCase",
    "ListGroupMembersUseCase",
    "RemoveGroupMemberUseCase",
    "UpdateGroupMemberUseCase",
]
