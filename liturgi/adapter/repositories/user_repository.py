from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from liturgi.app.repositories.user_repository import IUserRepository
from liturgi.domain.entities import AccountStatus, Role, User


class UserRepository(IUserRepository):
    """Cross-organization user lookups backed by SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _first(self, *conditions) -> Optional[User]:
        result = await self.session.exec(select(User).where(*conditions))
        return result.one_or_none()

    async def _save(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self._first(User.email == email.strip().lower())

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        return await self._first(User.id == user_id)

    async def create(self, user: User) -> User:
        user.email = user.email.strip().lower()
        return await self._save(user)

    async def update(self, user: User) -> User:
        return await self._save(user)

    async def count_active_admins(self, org_id: UUID) -> int:
        """Admins of an organization who can still sign in"""
        stmt = (
            select(func.count())
            .select_from(User)
            .where(
                User.org_id == org_id,
                User.role == Role.admin,
                User.account_status == AccountStatus.active,
            )
        )
        result = await self.session.exec(stmt)
        return result.one()
