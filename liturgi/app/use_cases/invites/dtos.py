from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from config import ApplicationConfig
from liturgi.domain.base import utcnow
from liturgi.domain.entities import Invite, Role


def invite_url(code: str) -> str:
    return f"{ApplicationConfig.APP_URL}/register?invite={code}"


class InviteDTO(BaseModel):
    id: UUID
    email: str
    role: str
    status: str
    invite_url: str
    expires_at: datetime
    accepted_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, invite: Invite) -> "InviteDTO":
        return cls(
            id=invite.id,
            email=invite.email,
            role=Role(invite.role).value,
            status=invite.status(utcnow()),
            invite_url=invite_url(invite.code),
            expires_at=invite.expires_at,
            accepted_at=invite.accepted_at,
            created_at=invite.created_at,
        )


class PublicInviteDTO(BaseModel):
    """What an invitee sees before registering"""

    email: str
    role: str
    organization_name: str
    expires_at: datetime
