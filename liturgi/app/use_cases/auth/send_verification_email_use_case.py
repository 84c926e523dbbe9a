from datetime import timedelta

from config import ApplicationConfig
from liturgi.app.services.mailer import Mailer
from liturgi.app.services.tokens import generate_token, hash_token
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.domain.base import utcnow
from liturgi.domain.entities import EmailVerification, User
from liturgi.libs.result import Result, Return

from .dtos import MessageResponse


class SendVerificationEmailUseCase:
    """
    Business Rules:
    - No-op for already verified addresses
    - Token expires after EMAIL_VERIFICATION_TTL_HOURS and is stored hashed
    """

    def __init__(self, uow: UnitOfWork, mailer: Mailer):
        self.uow = uow
        self.mailer = mailer

    async def execute(self, actor: User) -> Result[MessageResponse]:
        if actor.email_verified:
            return Return.ok(MessageResponse(message="Email is already verified"))

        token = generate_token()
        async with self.uow:
            await self.uow.email_verifications.create(
                EmailVerification(
                    user_id=actor.id,
                    token_hash=hash_token(token),
                    expires_at=utcnow()
                    + timedelta(hours=ApplicationConfig.EMAIL_VERIFICATION_TTL_HOURS),
                )
            )
            await self.uow.commit()

        await self.mailer.send(
            actor.email,
            "Verify your email address",
            "Confirm your email address using the link below.",
            f"{ApplicationConfig.APP_URL}/verify-email?token={token}",
        )
        return Return.ok(MessageResponse(message="Verification email sent"))
