"""
Request Password Reset Use Case

Issues a single-use reset token and mails the link.
"""

import logging
from datetime import timedelta

from config import ApplicationConfig
from liturgi.app.services.mailer import Mailer
from liturgi.app.services.tokens import generate_token, hash_token
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.domain.base import utcnow
from liturgi.domain.entities import AccountStatus, PasswordReset
from liturgi.libs.result import Result, Return

from .dtos import ClientMeta, MessageResponse

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "If an account exists for this email, a reset link has been sent"


class RequestPasswordResetUseCase:
    """
    Business Rules:
    - Always answers with the same message (no account enumeration)
    - Token expires after PASSWORD_RESET_TTL_MINUTES and is stored hashed
    - Only active accounts receive a link
    """

    def __init__(self, uow: UnitOfWork, mailer: Mailer):
        self.uow = uow
        self.mailer = mailer

    async def execute(self, email: str, client: ClientMeta) -> Result[MessageResponse]:
        email = email.strip().lower()
        token = None

        async with self.uow:
            user = await self.uow.users.get_by_email(email)
            if user is not None and user.account_status == AccountStatus.active:
                token = generate_token()
                await self.uow.password_resets.create(
                    PasswordReset(
                        user_id=user.id,
                        token_hash=hash_token(token),
                        ip_address=client.ip_address,
                        expires_at=utcnow()
                        + timedelta(minutes=ApplicationConfig.PASSWORD_RESET_TTL_MINUTES),
                    )
                )
                await self.uow.commit()

        if token is not None:
            link = f"{ApplicationConfig.APP_URL}/reset-password?token={token}"
            await self.mailer.send(
                email,
                "Reset your password",
                "Use the link below to choose a new password. It expires in one hour.",
                link,
            )
        else:
            logger.info("Password reset requested for unknown or inactive account")

        return Return.ok(MessageResponse(message=GENERIC_MESSAGE))
