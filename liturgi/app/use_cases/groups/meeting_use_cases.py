"""
Group Meeting Use Cases

Meetings of a group and who attended them.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from liturgi.app.services.unit_of_work import TenantScope, UnitOfWork
from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    UpdateEntityUseCase,
    not_found,
    record_audit,
    snapshot,
)
from liturgi.domain.base import as_naive_utc
from liturgi.domain.entities import AuditAction, GroupMeeting, MeetingAttendance, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Error, Result, Return


def check_meeting_times(start_time: datetime, end_time: Optional[datetime]) -> Optional[Error]:
    if end_time is not None and as_naive_utc(end_time) < as_naive_utc(start_time):
        return Error(
            "VALIDATION_FAILED",
            "Validation failed",
            details=[{"field": "end_time", "message": "End time must not be before start time"}],
        )
    return None


class CreateGroupMeetingUseCase(CreateEntityUseCase):
    model = GroupMeeting
    repository = "group_meetings"
    entity_name = "group_meeting"
    references = {"group_id": ("groups", "Group")}

    async def prepare(self, actor, scope, data):
        return check_meeting_times(data["start_time"], data.get("end_time"))


class UpdateGroupMeetingUseCase(UpdateEntityUseCase):
    """Cancelling is a patch of is_cancelled"""

    model = GroupMeeting
    repository = "group_meetings"
    entity_name = "group_meeting"

    async def prepare(self, actor, scope, entity, changes):
        return check_meeting_times(
            changes.get("start_time", entity.start_time),
            changes.get("end_time", entity.end_time),
        )


class DeleteGroupMeetingUseCase(DeleteEntityUseCase):
    model = GroupMeeting
    repository = "group_meetings"
    entity_name = "group_meeting"

    async def before_delete(self, scope: TenantScope, entity: GroupMeeting) -> None:
        await scope.meeting_attendance.delete_where(meeting_id=entity.id)


class ListGroupMeetingsUseCase:
    """Newest first, each with the number of members marked as attended"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, group_id: UUID) -> Result[List[Dict[str, Any]]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            if await scope.groups.get(group_id) is None:
                return Return.err(not_found("Group"))

            meetings = []
            for meeting in await scope.group_meetings.list(
                order_by="-start_time", group_id=group_id
            ):
                row = meeting.model_dump(mode="json")
                row["attendance_count"] = await scope.meeting_attendance.count(
                    meeting_id=meeting.id, attended=True
                )
                meetings.append(row)
            return Return.ok(meetings)


class GetGroupMeetingUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor: User, group_id: UUID, meeting_id: UUID
    ) -> Result[Dict[str, Any]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            meeting = await scope.group_meetings.get_by(id=meeting_id, group_id=group_id)
            if meeting is None:
                return Return.err(not_found("Meeting"))

            details = meeting.model_dump(mode="json")
            details["attendance"] = [
                row.model_dump(mode="json")
                for row in await scope.meeting_attendance.list(
                    order_by="created_at", meeting_id=meeting_id
                )
            ]
            return Return.ok(details)


class RecordMeetingAttendanceUseCase:
    """
    Record attendance for one or more members at a meeting.

    Business Rules:
    - Every person must hold a membership in the meeting's group
    - One row per (meeting, person): an existing row is overwritten
    - All rows are written in one transaction, each with its own audit entry
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        actor: User,
        group_id: UUID,
        meeting_id: UUID,
        records: List[Dict[str, Any]],
    ) -> Result[List[MeetingAttendance]]:
        """
        Args:
            actor: Authenticated user recording attendance
            group_id: Group the meeting belongs to
            meeting_id: Meeting being recorded
            records: Items of {person_id, attended, notes}

        Returns:
            Result with the stored attendance rows, or Error
        """
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            meeting = await scope.group_meetings.get_by(id=meeting_id, group_id=group_id)
            if meeting is None:
                return Return.err(not_found("Meeting"))

            members = {
                membership.person_id
                for membership in await scope.group_memberships.list(group_id=group_id)
            }
            outsiders = [
                {
                    "field": f"records.{index}.person_id",
                    "message": "Person is not a member of this group",
                }
                for index, record in enumerate(records)
                if record["person_id"] not in members
            ]
            if outsiders:
                return Return.err(Error("VALIDATION_FAILED", "Validation failed", outsiders))

            stored = []
            for record in records:
                row = await scope.meeting_attendance.get_by(
                    meeting_id=meeting_id, person_id=record["person_id"]
                )
                if row is None:
                    row = await scope.meeting_attendance.add(
                        MeetingAttendance(meeting_id=meeting_id, **record)
                    )
                    await record_audit(
                        scope,
                        actor.id,
                        AuditAction.created,
                        "meeting_attendance",
                        row.id,
                        new=snapshot(row),
                    )
                else:
                    old = snapshot(row)
                    row.attended = record["attended"]
                    row.notes = record.get("notes")
                    row = await scope.meeting_attendance.update(row)
                    await record_audit(
                        scope,
                        actor.id,
                        AuditAction.updated,
                        "meeting_attendance",
                        row.id,
                        old=old,
                        new=snapshot(row),
                    )
                stored.append(row)

            await self.uow.commit()
            return Return.ok(stored)
