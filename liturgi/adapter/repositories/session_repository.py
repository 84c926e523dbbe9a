from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from liturgi.app.repositories.session_repository import ISessionRepository
from liturgi.domain.entities import Session


class SessionRepository(ISessionRepository):
    """Login sessions keyed by the SHA-256 of their cookie token"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _save(self, login_session: Session) -> Session:
        self.session.add(login_session)
        await self.session.flush()
        await self.session.refresh(login_session)
        return login_session

    async def _delete_where(self, *conditions) -> int:
        result = await self.session.execute(delete(Session).where(*conditions))
        await self.session.flush()
        return result.rowcount

    async def get_by_token_hash(self, token_hash: str) -> Optional[Session]:
        result = await self.session.exec(select(Session).where(Session.token_hash == token_hash))
        return result.one_or_none()

    async def get_by_user_id(self, user_id: UUID) -> List[Session]:
        """Newest first"""
        stmt = (
            select(Session)
            .where(Session.user_id == user_id)
            .order_by(Session.created_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, login_session: Session) -> Session:
        return await self._save(login_session)

    async def update(self, login_session: Session) -> Session:
        return await self._save(login_session)

    async def delete(self, login_session: Session) -> None:
        await self.session.delete(login_session)
        await self.session.flush()

    async def delete_by_id_for_user(self, session_id: UUID, user_id: UUID) -> bool:
        return await self._delete_where(Session.id == session_id, Session.user_id == user_id) > 0

    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        return await self._delete_where(Session.user_id == user_id)

    async def delete_all_except(self, user_id: UUID, session_id: UUID) -> int:
        return await self._delete_where(Session.user_id == user_id, Session.id != session_id)

    async def delete_expired(self, now: datetime) -> int:
        return await self._delete_where(Session.expires_at < now)
