from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from liturgi.app.repositories.invite_repository import IInviteRepository
from liturgi.domain.entities import Invite


class InviteRepository(IInviteRepository):
    """Invite repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_code(self, code: str) -> Optional[Invite]:
        stmt = select(Invite).where(Invite.code == code)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def find_pending(
        self, org_id: UUID, email: str, now: datetime
    ) -> Optional[Invite]:
        stmt = select(Invite).where(
            Invite.org_id == org_id,
            Invite.email == email.lower(),
            Invite.accepted_at.is_(None),
            Invite.expires_at > now,
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def update(self, invite: Invite) -> Invite:
        self.session.add(invite)
        await self.session.flush()
        await self.session.refresh(invite)
        return invite
