from typing import Optional

from liturgi.app.services.tokens import hash_token
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.libs.result import Result, Return


class LogoutUseCase:
    """Deletes the session behind the cookie. Succeeds even without one."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: Optional[str]) -> Result[None]:
        if not token:
            return Return.ok(None)

        async with self.uow:
            session = await self.uow.sessions.get_by_token_hash(hash_token(token))
            if session is not None:
                await self.uow.sessions.delete(session)
                await self.uow.commit()

        return Return.ok(None)
