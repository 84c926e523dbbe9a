"""
Reset Password Use Case

Sets a new password from a reset token.
"""

import logging

from liturgi.app.services.passwords import hash_password, validate_password
from liturgi.app.services.tokens import hash_token
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.common import record_audit
from liturgi.domain.base import utcnow
from liturgi.domain.entities import AuditAction
from liturgi.libs.result import Error, Result, Return

from .dtos import MessageResponse

logger = logging.getLogger(__name__)


class ResetPasswordUseCase:
    """
    Business Rules:
    - New password must satisfy the password policy
    - Token must exist, be unused and unexpired
    - In one transaction: password replaced, token consumed, every session of
      the user deleted, audit entry written
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str, password: str) -> Result[MessageResponse]:
        policy_error = validate_password(password)
        if policy_error:
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    policy_error,
                    details=[{"field": "password", "message": policy_error}],
                )
            )

        async with self.uow:
            reset = await self.uow.password_resets.get_by_token_hash(hash_token(token))
            if reset is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid reset token"))

            now = utcnow()
            if reset.used_at is not None:
                return Return.err(
                    Error("TOKEN_ALREADY_USED", "This reset link has already been used")
                )
            if reset.expires_at < now:
                return Return.err(Error("TOKEN_EXPIRED", "This reset link has expired"))

            user = await self.uow.users.get_by_id(reset.user_id)
            if user is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid reset token"))

            user.password_hash = hash_password(password)
            await self.uow.users.update(user)

            reset.used_at = now
            await self.uow.password_resets.update(reset)

            revoked = await self.uow.sessions.delete_all_by_user_id(user.id)

            await record_audit(
                self.uow.scoped(user.org_id),
                user.id,
                AuditAction.updated,
                "user",
                user.id,
                new={"password_reset": True, "sessions_revoked": revoked},
            )

            await self.uow.commit()

        logger.info(f"Password reset for user {user.id}, {revoked} sessions revoked")
        return Return.ok(MessageResponse(message="Password has been reset"))
