import logging

from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.domain.base import utcnow
from liturgi.libs.result import Result, Return

logger = logging.getLogger(__name__)


class SweepExpiredSessionsUseCase:
    """Deletes every expired session regardless of whether it is ever presented."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[int]:
        async with self.uow:
            deleted = await self.uow.sessions.delete_expired(utcnow())
            await self.uow.commit()

        logger.info(f"Session sweep deleted {deleted} expired sessions")
        return Return.ok(deleted)
