from typing import Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from liturgi.app.repositories.token_repository import (
    IEmailVerificationRepository,
    IPasswordResetRepository,
)
from liturgi.domain.entities import EmailVerification, PasswordReset


class PasswordResetRepository(IPasswordResetRepository):
    """PasswordReset repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, reset: PasswordReset) -> PasswordReset:
        self.session.add(reset)
        await self.session.flush()
        await self.session.refresh(reset)
        return reset

    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordReset]:
        stmt = select(PasswordReset).where(PasswordReset.token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(self, reset: PasswordReset) -> PasswordReset:
        self.session.add(reset)
        await self.session.flush()
        await self.session.refresh(reset)
        return reset

    async def delete_by_user_id(self, user_id: UUID) -> int:
        result = await self.session.execute(
            delete(PasswordReset).where(PasswordReset.user_id == user_id)
        )
        await self.session.flush()
        return result.rowcount


class EmailVerificationRepository(IEmailVerificationRepository):
    """EmailVerification repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, verification: EmailVerification) -> EmailVerification:
        self.session.add(verification)
        await self.session.flush()
        await self.session.refresh(verification)
        return verification

    async def get_by_token_hash(self, token_hash: str) -> Optional[EmailVerification]:
        stmt = select(EmailVerification).where(
            EmailVerification.token_hash == token_hash
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(self, verification: EmailVerification) -> EmailVerification:
        self.session.add(verification)
        await self.session.flush()
        await self.session.refresh(verification)
        return verification

    async def delete_by_user_id(self, user_id: UUID) -> int:
        result = await self.session.execute(
            delete(EmailVerification).where(EmailVerification.user_id == user_id)
        )
        await self.session.flush()
        return result.rowcount
