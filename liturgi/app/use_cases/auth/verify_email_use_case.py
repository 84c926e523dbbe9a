"""
Verify Email Use Case
"""

from liturgi.app.services.tokens import hash_token
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.common import record_audit
from liturgi.domain.base import utcnow
from liturgi.domain.entities import AuditAction
from liturgi.libs.result import Error, Result, Return

from .dtos import MessageResponse


class VerifyEmailUseCase:
    """
    Business Rules:
    - Token must exist, be unverified and unexpired
    - User flag and token consumption commit together
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[MessageResponse]:
        async with self.uow:
            verification = await self.uow.email_verifications.get_by_token_hash(
                hash_token(token)
            )
            if verification is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid verification token"))

            now = utcnow()
            if verification.verified_at is not None:
                return Return.err(
                    Error("TOKEN_ALREADY_USED", "This verification link has already been used")
                )
            if verification.expires_at < now:
                return Return.err(
                    Error("TOKEN_EXPIRED", "This verification link has expired")
                )

            user = await self.uow.users.get_by_id(verification.user_id)
            if user is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid verification token"))

            user.email_verified = True
            user.email_verified_at = now
            await self.uow.users.update(user)

            verification.verified_at = now
            await self.uow.email_verifications.update(verification)

            await record_audit(
                self.uow.scoped(user.org_id),
                user.id,
                AuditAction.updated,
                "user",
                user.id,
                new={"email_verified": True},
            )
            await self.uow.commit()

        return Return.ok(MessageResponse(message="Email verified"))
