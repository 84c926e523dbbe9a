"""
Authenticate Session Use Case

Resolves a session cookie to its user. Expired sessions are deleted on sight.
"""

from typing import Optional

from liturgi.app.services.tokens import hash_token
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.domain.base import utcnow
from liturgi.domain.entities import AccountStatus
from liturgi.libs.result import Error, Result, Return

from .dtos import SessionContext

UNAUTHORIZED = Error("UNAUTHORIZED", "Unauthorized")


class AuthenticateSessionUseCase:
    """
    Business Rules:
    - Missing, unknown or expired token -> UNAUTHORIZED (same message for all)
    - An expired session row is deleted as part of the lookup
    - The user must still exist and be active
    - last_accessed_at is refreshed on every successful lookup
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: Optional[str]) -> Result[SessionContext]:
        if not token:
            return Return.err(UNAUTHORIZED)

        async with self.uow:
            session = await self.uow.sessions.get_by_token_hash(hash_token(token))
            if session is None:
                return Return.err(UNAUTHORIZED)

            now = utcnow()
            if session.is_expired(now):
                await self.uow.sessions.delete(session)
                await self.uow.commit()
                return Return.err(UNAUTHORIZED)

            user = await self.uow.users.get_by_id(session.user_id)
            if user is None or user.account_status != AccountStatus.active:
                return Return.err(UNAUTHORIZED)

            session.last_accessed_at = now
            await self.uow.sessions.update(session)
            await self.uow.commit()

            return Return.ok(SessionContext(user=user, session=session))
