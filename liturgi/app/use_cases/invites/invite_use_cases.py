"""
Invite Use Cases

pending -> accepted (terminal, on registration) | expired (terminal, by time)
"""

import logging
from datetime import timedelta
from typing import List
from uuid import UUID

from config import ApplicationConfig
from liturgi.app.services.mailer import Mailer
from liturgi.app.services.tokens import generate_invite_code
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.common import not_found, record_audit, snapshot
from liturgi.domain.base import utcnow
from liturgi.domain.entities import AuditAction, Invite, Role, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Error, Result, Return

from .dtos import InviteDTO, PublicInviteDTO, invite_url

logger = logging.getLogger(__name__)


class CreateInviteUseCase:
    """
    Business Rules:
    - Fails if a user with the email already exists in the organization
    - Fails if a pending, unexpired invite for the email already exists
    - Code is a 128-bit random hex token; expires after INVITE_TTL_DAYS
    - The invite link is mailed after commit
    """

    def __init__(self, uow: UnitOfWork, mailer: Mailer):
        self.uow = uow
        self.mailer = mailer

    async def execute(self, actor: User, email: str, role: Role) -> Result[InviteDTO]:
        email = email.strip().lower()

        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))

            if await scope.users.get_by(email=email) is not None:
                return Return.err(
                    Error("CONFLICT", "A user with this email already exists in this organization")
                )

            now = utcnow()
            if await self.uow.invites.find_pending(actor.org_id, email, now) is not None:
                return Return.err(
                    Error("CONFLICT", "A pending invite already exists for this email")
                )

            invite = await scope.invites.add(
                Invite(
                    email=email,
                    role=role,
                    code=generate_invite_code(),
                    invited_by=actor.id,
                    expires_at=now + timedelta(days=ApplicationConfig.INVITE_TTL_DAYS),
                )
            )
            await record_audit(
                scope, actor.id, AuditAction.created, "invite", invite.id,
                new=snapshot(invite),
            )
            await self.uow.commit()

        await self.mailer.send(
            email,
            "You have been invited to Liturgi",
            f"You have been invited to join as {role.value}.",
            invite_url(invite.code),
        )
        return Return.ok(InviteDTO.from_entity(invite))


class ListInvitesUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User) -> Result[List[InviteDTO]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            invites = await scope.invites.list(order_by="-created_at")
            return Return.ok([InviteDTO.from_entity(i) for i in invites])


class GetInviteByCodeUseCase:
    """Public lookup used by the registration page"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, code: str) -> Result[PublicInviteDTO]:
        async with self.uow:
            invite = await self.uow.invites.get_by_code(code)
            if invite is None:
                return Return.err(Error("INVALID_INVITE", "Invalid invite"))
            if invite.accepted_at is not None:
                return Return.err(
                    Error("INVITE_ALREADY_USED", "This invite has already been used")
                )
            if invite.expires_at < utcnow():
                return Return.err(Error("INVITE_EXPIRED", "This invite has expired"))

            organization = await self.uow.organizations.get_by_id(invite.org_id)

            return Return.ok(
                PublicInviteDTO(
                    email=invite.email,
                    role=Role(invite.role).value,
                    organization_name=organization.name,
                    expires_at=invite.expires_at,
                )
            )


class RevokeInviteUseCase:
    """Deletes a pending invite. Accepted invites are kept as history."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, invite_id: UUID) -> Result[None]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            invite = await scope.invites.get(invite_id)
            if invite is None:
                return Return.err(not_found("Invite"))
            if invite.accepted_at is not None:
                return Return.err(
                    Error("VALIDATION_FAILED", "Accepted invites cannot be revoked")
                )

            old = snapshot(invite)
            await scope.invites.delete(invite)
            await record_audit(
                scope, actor.id, AuditAction.deleted, "invite", invite_id, old=old
            )
            await self.uow.commit()

        logger.info(f"Invite {invite_id} revoked by user {actor.id}")
        return Return.ok(None)
