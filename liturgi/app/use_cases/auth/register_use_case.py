"""
Register Use Case

Bootstraps the first organization, or redeems an invite.
"""

import logging
import re
from datetime import timedelta

from sqlalchemy.exc import IntegrityError

from config import ApplicationConfig
from liturgi.app.services.passwords import hash_password, validate_password
from liturgi.app.services.rate_limiter import RateLimiter
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.common import record_audit, snapshot
from liturgi.domain.base import utcnow
from liturgi.domain.entities import AuditAction, Organization, Role, User
from liturgi.libs.result import Error, Result, Return

from .dtos import AuthResult, ClientMeta, OrganizationDTO, RegisterCommand, UserDTO
from .rate_limit import enforce_rate_limit
from .session_factory import open_session

logger = logging.getLogger(__name__)

SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


class RegisterUseCase:
    """
    Use case for account registration.

    Business Rules:
    - At most REGISTER_MAX_ATTEMPTS attempts per IP per REGISTER_WINDOW_SECONDS
    - Password must satisfy the password policy
    - With zero organizations in the system, creates the organization and its
      first admin (trial plan, TRIAL_DAYS expiry); never reachable afterwards
    - Otherwise an invite code is mandatory:
      - unknown code or email mismatch -> INVALID_INVITE (indistinguishable)
      - accepted -> INVITE_ALREADY_USED
      - expired -> INVITE_EXPIRED
    - Invite is marked accepted in the same transaction that creates the user
    - Opens a session for the new user
    """

    def __init__(self, uow: UnitOfWork, rate_limiter: RateLimiter):
        self.uow = uow
        self.rate_limiter = rate_limiter

    async def execute(self, command: RegisterCommand, client: ClientMeta) -> Result[AuthResult]:
        """
        Execute register use case.

        Args:
            command: Registration details
            client: IP address and user agent of the caller

        Returns:
            Result with AuthResult (user, organization, session token), or Error
        """
        rate_error = await enforce_rate_limit(
            self.rate_limiter,
            f"register:{client.ip_address}",
            ApplicationConfig.REGISTER_MAX_ATTEMPTS,
            ApplicationConfig.REGISTER_WINDOW_SECONDS,
        )
        if rate_error:
            return Return.err(rate_error)

        policy_error = validate_password(command.password)
        if policy_error:
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    policy_error,
                    details=[{"field": "password", "message": policy_error}],
                )
            )

        email = command.email.strip().lower()

        async with self.uow:
            organization_count = await self.uow.organizations.count()

            try:
                if organization_count == 0:
                    result = await self._bootstrap(command, email)
                else:
                    result = await self._redeem_invite(command, email)

                if result.is_err():
                    return result

                user, organization = result.value
                session, token = await open_session(self.uow, user, client)
                await self.uow.commit()
            except IntegrityError:
                return Return.err(
                    Error("CONFLICT", "An account with this email already exists")
                )

            logger.info(f"Registered user {user.id} in organization {organization.id}")

            return Return.ok(
                AuthResult(
                    user=UserDTO.from_entity(user),
                    organization=OrganizationDTO.from_entity(organization),
                    session_token=token,
                    expires_at=session.expires_at,
                )
            )

    async def _bootstrap(self, command: RegisterCommand, email: str) -> Result:
        if not command.org_name or not command.subdomain:
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    "Organization name and subdomain are required",
                    details=[
                        {"field": "org_name", "message": "Required for first registration"},
                        {"field": "subdomain", "message": "Required for first registration"},
                    ],
                )
            )

        subdomain = command.subdomain.strip().lower()
        if not SUBDOMAIN_PATTERN.match(subdomain):
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    "Subdomain may only contain lowercase letters, numbers and hyphens",
                    details=[{"field": "subdomain", "message": "Invalid subdomain"}],
                )
            )

        now = utcnow()
        organization = await self.uow.organizations.create(
            Organization(
                name=command.org_name.strip(),
                subdomain=subdomain,
                plan="trial",
                plan_limits=dict(ApplicationConfig.TRIAL_PLAN_LIMITS),
                trial_end_at=now + timedelta(days=ApplicationConfig.TRIAL_DAYS),
            )
        )

        user = await self.uow.users.create(
            User(
                org_id=organization.id,
                email=email,
                password_hash=hash_password(command.password),
                role=Role.admin,
                first_name=command.first_name,
                last_name=command.last_name,
            )
        )

        scope = self.uow.scoped(organization.id)
        await record_audit(
            scope, user.id, AuditAction.created, "organization", organization.id,
            new=snapshot(organization),
        )
        await record_audit(
            scope, user.id, AuditAction.created, "user", user.id, new=snapshot(user)
        )
        logger.info(f"Bootstrapped organization {organization.subdomain}")
        return Return.ok((user, organization))

    async def _redeem_invite(self, command: RegisterCommand, email: str) -> Result:
        if not command.invite_code:
            return Return.err(
                Error("REGISTRATION_CLOSED", "Registration requires an invite")
            )

        invite = await self.uow.invites.get_by_code(command.invite_code)
        if invite is None or invite.email.lower() != email:
            return Return.err(Error("INVALID_INVITE", "Invalid invite"))

        now = utcnow()
        if invite.accepted_at is not None:
            return Return.err(
                Error("INVITE_ALREADY_USED", "This invite has already been used")
            )
        if invite.expires_at < now:
            return Return.err(Error("INVITE_EXPIRED", "This invite has expired"))

        if await self.uow.users.get_by_email(email) is not None:
            return Return.err(
                Error("CONFLICT", "An account with this email already exists")
            )

        organization = await self.uow.organizations.get_by_id(invite.org_id)
        if organization is None:
            return Return.err(Error("INVALID_INVITE", "Invalid invite"))

        user = await self.uow.users.create(
            User(
                org_id=invite.org_id,
                email=email,
                password_hash=hash_password(command.password),
                role=invite.role,
                first_name=command.first_name,
                last_name=command.last_name,
                email_verified=True,
                email_verified_at=now,
            )
        )

        invite.accepted_at = now
        await self.uow.invites.update(invite)

        await record_audit(
            self.uow.scoped(invite.org_id),
            user.id,
            AuditAction.created,
            "user",
            user.id,
            new=snapshot(user),
        )
        logger.info(f"Invite {invite.id} accepted by user {user.id}")
        return Return.ok((user, organization))
