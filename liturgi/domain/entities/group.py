"""
Group Entities
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, Date, DateTime, Field, Index, SQLModel, UniqueConstraint

from liturgi.domain.base import utcnow
from .enums import (
    GroupCategory,
    GroupMemberRole,
    GroupMemberStatus,
    GroupStatus,
    GroupVisibility,
)


class Group(SQLModel, table=True):
    """
    Group entity - small groups, ministry teams, classes.

    Business Rules:
    - Counted against the organization's groups plan limit
    """

    __tablename__ = "groups"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)

    name: str = Field(max_length=200)
    description: Optional[str] = Field(default=None)
    category: GroupCategory = Field(default=GroupCategory.small_group)
    status: GroupStatus = Field(default=GroupStatus.active)
    visibility: GroupVisibility = Field(default=GroupVisibility.public)

    meeting_day: Optional[str] = Field(default=None, max_length=20)
    meeting_time: Optional[str] = Field(default=None, max_length=20)
    location: Optional[str] = Field(default=None, max_length=200)
    capacity: Optional[int] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_group_org_status", "org_id", "status"),)


class GroupMembership(SQLModel, table=True):
    """
    GroupMembership entity.

    Business Rules:
    - A person appears at most once per group
    """

    __tablename__ = "group_memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    group_id: UUID = Field(foreign_key="groups.id", nullable=False, index=True)
    person_id: UUID = Field(foreign_key="people.id", nullable=False, index=True)

    role: GroupMemberRole = Field(default=GroupMemberRole.member)
    status: GroupMemberStatus = Field(default=GroupMemberStatus.active)
    joined_at: Optional[date] = Field(default=None, sa_column=Column(Date))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("group_id", "person_id", name="uq_group_membership"),
    )


class GroupMeeting(SQLModel, table=True):
    """
    GroupMeeting entity - one gathering of a group.

    Business Rules:
    - end_time, when set, is not before start_time
    - A cancelled meeting keeps its attendance
    """

    __tablename__ = "group_meetings"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    group_id: UUID = Field(foreign_key="groups.id", nullable=False, index=True)

    title: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None)
    start_time: datetime = Field(sa_column=Column(DateTime, nullable=False))
    end_time: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    location: Optional[str] = Field(default=None, max_length=200)
    is_recurring: bool = Field(default=False)
    is_cancelled: bool = Field(default=False)
    notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_group_meeting_group_start", "group_id", "start_time"),)


class MeetingAttendance(SQLModel, table=True):
    """
    Attendance of one group member at one meeting.

    Business Rules:
    - One row per (meeting, person); recording again overwrites it
    - The person must be a member of the meeting's group when recorded
    """

    __tablename__ = "meeting_attendance"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    meeting_id: UUID = Field(foreign_key="group_meetings.id", nullable=False, index=True)
    person_id: UUID = Field(foreign_key="people.id", nullable=False, index=True)

    attended: bool = Field(default=True)
    notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("meeting_id", "person_id", name="uq_meeting_attendance"),
    )
