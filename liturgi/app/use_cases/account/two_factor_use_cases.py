"""
Two-Factor Authentication Use Cases

setup -> verify (enables, issues backup codes) -> disable
"""

import logging

from liturgi.app.services.passwords import verify_password
from liturgi.app.services.two_factor import (
    generate_backup_codes,
    generate_secret,
    provisioning_uri,
    verify_totp,
)
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.auth.dtos import BackupCodesResponse, TwoFactorSetupResponse
from liturgi.app.use_cases.common import record_audit
from liturgi.domain.entities import AuditAction, User
from liturgi.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class SetupTwoFactorUseCase:
    """
    Business Rules:
    - Generates a new secret; 2FA stays disabled until a code is verified
    - Refused while 2FA is already enabled
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User) -> Result[TwoFactorSetupResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(actor.id)
            if user.two_factor_enabled:
                return Return.err(
                    Error("VALIDATION_FAILED", "Two-factor authentication is already enabled")
                )

            secret = generate_secret()
            user.two_factor_secret = secret
            await self.uow.users.update(user)
            await self.uow.commit()

        return Return.ok(
            TwoFactorSetupResponse(
                secret=secret, otpauth_url=provisioning_uri(secret, user.email)
            )
        )


class EnableTwoFactorUseCase:
    """
    Business Rules:
    - Requires a pending secret from setup and a valid TOTP code for it
    - Issues 10 backup codes, shown once and stored as SHA-256 hashes
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, code: str) -> Result[BackupCodesResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(actor.id)
            if user.two_factor_enabled:
                return Return.err(
                    Error("VALIDATION_FAILED", "Two-factor authentication is already enabled")
                )
            if not user.two_factor_secret:
                return Return.err(
                    Error("VALIDATION_FAILED", "Two-factor setup has not been started")
                )
            if not verify_totp(user.two_factor_secret, code):
                return Return.err(
                    Error(
                        "VALIDATION_FAILED",
                        "Invalid verification code",
                        details=[{"field": "code", "message": "Invalid verification code"}],
                    )
                )

            codes, hashes = generate_backup_codes()
            user.two_factor_enabled = True
            user.two_factor_backup_codes = hashes
            await self.uow.users.update(user)

            await record_audit(
                self.uow.scoped(user.org_id),
                user.id,
                AuditAction.updated,
                "user",
                user.id,
                new={"two_factor_enabled": True},
            )
            await self.uow.commit()

        logger.info(f"Two-factor authentication enabled for user {user.id}")
        return Return.ok(BackupCodesResponse(backup_codes=codes))


class DisableTwoFactorUseCase:
    """Requires the account password. Clears secret and backup codes."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, password: str) -> Result[None]:
        async with self.uow:
            user = await self.uow.users.get_by_id(actor.id)
            if not verify_password(user.password_hash, password):
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid password"))
            if not user.two_factor_enabled:
                return Return.err(
                    Error("VALIDATION_FAILED", "Two-factor authentication is not enabled")
                )

            user.two_factor_enabled = False
            user.two_factor_secret = None
            user.two_factor_backup_codes = None
            await self.uow.users.update(user)

            await record_audit(
                self.uow.scoped(user.org_id),
                user.id,
                AuditAction.updated,
                "user",
                user.id,
                new={"two_factor_enabled": False},
            )
            await self.uow.commit()

        logger.info(f"Two-factor authentication disabled for user {user.id}")
        return Return.ok(None)
