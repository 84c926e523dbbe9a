"""
Profile and Account Lifecycle Use Cases
"""

import logging
from datetime import timedelta
from typing import Any, Dict

from config import ApplicationConfig
from liturgi.app.services.passwords import verify_password
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.auth.dtos import UserDTO
from liturgi.app.use_cases.common import record_audit, snapshot
from liturgi.domain.base import utcnow
from liturgi.domain.entities import AccountStatus, AuditAction, Role, User
from liturgi.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = "DELETE"


async def _is_last_admin(uow: UnitOfWork, user: User) -> bool:
    if user.role != Role.admin:
        return False
    return await uow.users.count_active_admins(user.org_id) <= 1


class UpdateProfileUseCase:
    """Name and phone only; email and role are changed elsewhere."""

    EDITABLE_FIELDS = {"first_name", "last_name", "phone_number"}

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, changes: Dict[str, Any]) -> Result[UserDTO]:
        async with self.uow:
            user = await self.uow.users.get_by_id(actor.id)
            old = snapshot(user)
            for field, value in changes.items():
                if field in self.EDITABLE_FIELDS:
                    setattr(user, field, value)
            await self.uow.users.update(user)

            await record_audit(
                self.uow.scoped(user.org_id),
                user.id,
                AuditAction.updated,
                "user",
                user.id,
                old=old,
                new=snapshot(user),
            )
            await self.uow.commit()

        return Return.ok(UserDTO.from_entity(user))


class DeactivateAccountUseCase:
    """
    Business Rules:
    - Requires the account password
    - The last active admin of an organization cannot deactivate
    - All sessions are deleted
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, password: str) -> Result[None]:
        async with self.uow:
            user = await self.uow.users.get_by_id(actor.id)
            if not verify_password(user.password_hash, password):
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid password"))

            if await _is_last_admin(self.uow, user):
                return Return.err(
                    Error(
                        "VALIDATION_FAILED",
                        "Cannot deactivate the last admin. Promote another admin first.",
                    )
                )

            user.account_status = AccountStatus.deactivated
            await self.uow.users.update(user)
            await self.uow.sessions.delete_all_by_user_id(user.id)

            await record_audit(
                self.uow.scoped(user.org_id),
                user.id,
                AuditAction.updated,
                "user",
                user.id,
                new={"account_status": AccountStatus.deactivated.value},
            )
            await self.uow.commit()

        logger.info(f"User {user.id} deactivated their account")
        return Return.ok(None)


class DeleteAccountUseCase:
    """
    Business Rules:
    - Requires the account password and the literal confirmation "DELETE"
    - The last active admin of an organization cannot delete
    - The row is kept for ACCOUNT_RETENTION_DAYS with personal data removed:
      email anonymised, names and phone cleared, credentials and 2FA cleared
    - Sessions, reset tokens and verification tokens are deleted
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, password: str, confirmation: str) -> Result[None]:
        if confirmation != DELETE_CONFIRMATION:
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    'Type "DELETE" to confirm account deletion',
                    details=[{"field": "confirmation", "message": 'Must be "DELETE"'}],
                )
            )

        async with self.uow:
            user = await self.uow.users.get_by_id(actor.id)
            if not verify_password(user.password_hash, password):
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid password"))

            if await _is_last_admin(self.uow, user):
                return Return.err(
                    Error(
                        "VALIDATION_FAILED",
                        "Cannot delete the last admin account. Promote another admin first.",
                    )
                )

            now = utcnow()
            user.email = f"deleted_{user.id}@deleted.local"
            user.first_name = None
            user.last_name = None
            user.phone_number = None
            user.password_hash = ""
            user.two_factor_enabled = False
            user.two_factor_secret = None
            user.two_factor_backup_codes = None
            user.account_status = AccountStatus.deleted
            user.deleted_at = now
            user.data_retention_until = now + timedelta(
                days=ApplicationConfig.ACCOUNT_RETENTION_DAYS
            )
            await self.uow.users.update(user)

            await self.uow.sessions.delete_all_by_user_id(user.id)
            await self.uow.password_resets.delete_by_user_id(user.id)
            await self.uow.email_verifications.delete_by_user_id(user.id)

            await record_audit(
                self.uow.scoped(user.org_id),
                user.id,
                AuditAction.deleted,
                "user",
                user.id,
                old={"id": str(user.id)},
            )
            await self.uow.commit()

        logger.info(f"User {user.id} deleted their account")
        return Return.ok(None)
