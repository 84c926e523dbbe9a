"""
Session Management Use Cases

A user can list and revoke their own sessions only.
"""

from typing import List, Tuple
from uuid import UUID

from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.auth.dtos import SessionDTO
from liturgi.domain.entities import LoginHistory, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Error, Result, Return


class ListSessionsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, current_session_id: UUID) -> Result[List[SessionDTO]]:
        async with self.uow:
            sessions = await self.uow.sessions.get_by_user_id(actor.id)
            return Return.ok(
                [SessionDTO.from_entity(s, current_session_id) for s in sessions]
            )


class RevokeSessionUseCase:
    """Another user's session id is reported as NOT_FOUND"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, session_id: UUID) -> Result[None]:
        async with self.uow:
            deleted = await self.uow.sessions.delete_by_id_for_user(session_id, actor.id)
            if not deleted:
                return Return.err(Error("NOT_FOUND", "Session not found"))
            await self.uow.commit()
        return Return.ok(None)


class RevokeAllSessionsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor: User, current_session_id: UUID, keep_current: bool = True
    ) -> Result[int]:
        """
        Returns:
            Result with the number of sessions deleted
        """
        async with self.uow:
            if keep_current:
                deleted = await self.uow.sessions.delete_all_except(
                    actor.id, current_session_id
                )
            else:
                deleted = await self.uow.sessions.delete_all_by_user_id(actor.id)
            await self.uow.commit()
        return Return.ok(deleted)


class ListLoginHistoryUseCase:
    """The caller's own sign-in attempts, newest first"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor: User, limit: int = 50, offset: int = 0
    ) -> Result[Tuple[List[LoginHistory], int]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            entries = await scope.login_history.list(
                order_by="-created_at", limit=limit, offset=offset, user_id=actor.id
            )
            total = await scope.login_history.count(user_id=actor.id)
            return Return.ok((entries, total))
