from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from liturgi.api.error import unwrap
from liturgi.api.utils.schemas import dump, dump_all, non_nullable
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.groups import (
    AddGroupMemberUseCase,
    CreateGroupMeetingUseCase,
    CreateGroupUseCase,
    DeleteGroupMeetingUseCase,
    DeleteGroupUseCase,
    GetGroupMeetingUseCase,
    GetGroupUseCase,
    ListGroupMeetingsUseCase,
    ListGroupMembersUseCase,
    ListGroupsUseCase,
    RecordMeetingAttendanceUseCase,
    RemoveGroupMemberUseCase,
    UpdateGroupMeetingUseCase,
    UpdateGroupMemberUseCase,
    UpdateGroupUseCase,
)
from liturgi.depends import get_unit_of_work, require_permission
from liturgi.domain.entities import (
    GroupCategory,
    GroupMemberRole,
    GroupMemberStatus,
    GroupStatus,
    GroupVisibility,
    User,
)
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/groups", tags=["Groups"])

read_groups = require_permission(Permission.groups_read)
write_groups = require_permission(Permission.groups_write)
delete_groups = require_permission(Permission.groups_delete)


class CreateGroupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    category: GroupCategory = GroupCategory.small_group
    status: GroupStatus = GroupStatus.active
    visibility: GroupVisibility = GroupVisibility.public
    meeting_day: Optional[str] = Field(default=None, max_length=20)
    meeting_time: Optional[str] = Field(default=None, max_length=20)
    location: Optional[str] = Field(default=None, max_length=200)
    capacity: Optional[int] = Field(default=None, ge=1)


class UpdateGroupRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    category: Optional[GroupCategory] = None
    status: Optional[GroupStatus] = None
    visibility: Optional[GroupVisibility] = None
    meeting_day: Optional[str] = Field(default=None, max_length=20)
    meeting_time: Optional[str] = Field(default=None, max_length=20)
    location: Optional[str] = Field(default=None, max_length=200)
    capacity: Optional[int] = Field(default=None, ge=1)

    _required = non_nullable("name", "category", "status", "visibility")


@router.get("")
async def list_groups(
    status: Optional[GroupStatus] = None,
    actor: User = Depends(read_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    filters = {"status": status} if status else {}
    groups = unwrap(await ListGroupsUseCase(uow).execute(actor, **filters))
    return {"groups": dump_all(groups)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_group(
    request: CreateGroupRequest,
    actor: User = Depends(write_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Group

    Raises:
        - 403: PLAN_LIMIT_REACHED when the organization is at its groups limit
    """
    group = unwrap(await CreateGroupUseCase(uow).execute(actor, request.model_dump()))
    return {"group": dump(group)}


@router.get("/{group_id}")
async def get_group(
    group_id: UUID,
    actor: User = Depends(read_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    group = unwrap(await GetGroupUseCase(uow).execute(actor, group_id))
    return {"group": dump(group)}


@router.patch("/{group_id}")
async def update_group(
    group_id: UUID,
    request: UpdateGroupRequest,
    actor: User = Depends(write_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    group = unwrap(await UpdateGroupUseCase(uow).execute(actor, group_id, changes))
    return {"group": dump(group)}


@router.delete("/{group_id}")
async def delete_group(
    group_id: UUID,
    actor: User = Depends(delete_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await DeleteGroupUseCase(uow).execute(actor, group_id))
    return {"success": True}


# ============================================================================
# Members
# ============================================================================


class AddMemberRequest(BaseModel):
    person_id: UUID
    role: GroupMemberRole = GroupMemberRole.member
    status: GroupMemberStatus = GroupMemberStatus.active
    joined_at: Optional[date] = None


class UpdateMemberRequest(BaseModel):
    role: Optional[GroupMemberRole] = None
    status: Optional[GroupMemberStatus] = None
    joined_at: Optional[date] = None

    _required = non_nullable("role", "status")


@router.get("/{group_id}/members")
async def list_members(
    group_id: UUID,
    actor: User = Depends(read_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    members = unwrap(await ListGroupMembersUseCase(uow).execute(actor, group_id=group_id))
    return {"members": dump_all(members)}


@router.post("/{group_id}/members", status_code=status.HTTP_201_CREATED)
async def add_member(
    group_id: UUID,
    request: AddMemberRequest,
    actor: User = Depends(write_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Raises:
        - 400: CONFLICT when the person is already a member
        - 404: NOT_FOUND for an unknown group or person
    """
    data = {**request.model_dump(), "group_id": group_id}
    member = unwrap(await AddGroupMemberUseCase(uow).execute(actor, data))
    return {"member": dump(member)}


@router.patch("/{group_id}/members/{member_id}")
async def update_member(
    group_id: UUID,
    member_id: UUID,
    request: UpdateMemberRequest,
    actor: User = Depends(write_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    member = unwrap(
        await UpdateGroupMemberUseCase(uow).execute(actor, member_id, changes, group_id=group_id)
    )
    return {"member": dump(member)}


@router.delete("/{group_id}/members/{member_id}")
async def remove_member(
    group_id: UUID,
    member_id: UUID,
    actor: User = Depends(write_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await RemoveGroupMemberUseCase(uow).execute(actor, member_id, group_id=group_id))
    return {"success": True}


# ============================================================================
# Meetings
# ============================================================================


class CreateMeetingRequest(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    start_time: datetime
    end_time: Optional[datetime] = None
    location: Optional[str] = Field(default=None, max_length=200)
    is_recurring: bool = False
    notes: Optional[str] = Field(default=None, max_length=5000)


class UpdateMeetingRequest(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = Field(default=None, max_length=200)
    is_recurring: Optional[bool] = None
    is_cancelled: Optional[bool] = None
    notes: Optional[str] = Field(default=None, max_length=5000)

    _required = non_nullable("start_time", "is_recurring", "is_cancelled")


class AttendanceEntry(BaseModel):
    person_id: UUID
    attended: bool = True
    notes: Optional[str] = Field(default=None, max_length=2000)


class RecordMeetingAttendanceRequest(BaseModel):
    records: List[AttendanceEntry] = Field(..., min_length=1, max_length=500)


@router.get("/{group_id}/meetings")
async def list_meetings(
    group_id: UUID,
    actor: User = Depends(read_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    meetings = unwrap(await ListGroupMeetingsUseCase(uow).execute(actor, group_id))
    return {"meetings": meetings}


@router.post("/{group_id}/meetings", status_code=status.HTTP_201_CREATED)
async def create_meeting(
    group_id: UUID,
    request: CreateMeetingRequest,
    actor: User = Depends(write_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Raises:
        - 400: VALIDATION_FAILED when end_time is before start_time
        - 404: NOT_FOUND for an unknown group
    """
    data = {**request.model_dump(), "group_id": group_id}
    meeting = unwrap(await CreateGroupMeetingUseCase(uow).execute(actor, data))
    return {"meeting": dump(meeting)}


@router.get("/{group_id}/meetings/{meeting_id}")
async def get_meeting(
    group_id: UUID,
    meeting_id: UUID,
    actor: User = Depends(read_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    meeting = unwrap(await GetGroupMeetingUseCase(uow).execute(actor, group_id, meeting_id))
    return {"meeting": meeting}


@router.patch("/{group_id}/meetings/{meeting_id}")
async def update_meeting(
    group_id: UUID,
    meeting_id: UUID,
    request: UpdateMeetingRequest,
    actor: User = Depends(write_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    meeting = unwrap(
        await UpdateGroupMeetingUseCase(uow).execute(actor, meeting_id, changes, group_id=group_id)
    )
    return {"meeting": dump(meeting)}


@router.delete("/{group_id}/meetings/{meeting_id}")
async def delete_meeting(
    group_id: UUID,
    meeting_id: UUID,
    actor: User = Depends(write_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await DeleteGroupMeetingUseCase(uow).execute(actor, meeting_id, group_id=group_id))
    return {"success": True}


@router.put("/{group_id}/meetings/{meeting_id}/attendance")
async def record_meeting_attendance(
    group_id: UUID,
    meeting_id: UUID,
    request: RecordMeetingAttendanceRequest,
    actor: User = Depends(write_groups),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Record Meeting Attendance

    Upserts one row per person; sending a person again overwrites their row.

    Raises:
        - 400: VALIDATION_FAILED when a person is not a member of the group
        - 404: NOT_FOUND for an unknown meeting
    """
    records = [entry.model_dump() for entry in request.records]
    rows = unwrap(
        await RecordMeetingAttendanceUseCase(uow).execute(actor, group_id, meeting_id, records)
    )
    return {"attendance": dump_all(rows)}
