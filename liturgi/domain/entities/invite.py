"""
Invite Entity

Single-use registration grant for one email address.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from liturgi.domain.base import utcnow
from .enums import Role


class Invite(SQLModel, table=True):
    """
    Invite entity.

    States:
    - pending: not accepted and not expired
    - accepted: accepted_at is set (terminal)
    - expired: expires_at has passed (terminal, implicit)
    """

    __tablename__ = "invites"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    email: str = Field(max_length=255, nullable=False, index=True)
    role: Role = Field(default=Role.member)

    code: str = Field(unique=True, index=True, max_length=64)
    invited_by: Optional[UUID] = Field(default=None, foreign_key="users.id")

    expires_at: datetime = Field(sa_column=Column(DateTime))
    accepted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_invite_org_email", "org_id", "email"),)

    def status(self, now: datetime) -> str:
        if self.accepted_at is not None:
            return "accepted"
        if self.expires_at < now:
            return "expired"
        return "pending"
