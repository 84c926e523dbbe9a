"""
Login Use Case

Verifies credentials (and the second factor when enabled) and opens a session.
"""

import logging
from typing import Optional

from config import ApplicationConfig
from liturgi.app.services.passwords import burn_verification, verify_password
from liturgi.app.services.rate_limiter import RateLimiter
from liturgi.app.services.tokens import hash_token
from liturgi.app.services.two_factor import consume_backup_code, verify_totp
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.domain.entities import AccountStatus, LoginFailReason, LoginHistory, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Error, Result, Return

from .dtos import AuthResult, ClientMeta, OrganizationDTO, UserDTO
from .rate_limit import enforce_rate_limit
from .session_factory import open_session

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for user login.

    Business Rules:
    - At most LOGIN_MAX_ATTEMPTS attempts per (IP, email) per LOGIN_WINDOW_SECONDS;
      the counter resets on success
    - Unknown email and wrong password are indistinguishable, in message and timing
    - Account must be active
    - With 2FA enabled a TOTP code or an unused backup code is required;
      a backup code is consumed on use
    - Creates a fresh session; the session behind the cookie the client still
      sends (expired or not) is deleted in the same transaction
    - Updates user.last_login_at
    - Every attempt against an existing account is written to its login
      history, failed ones included
    """

    def __init__(self, uow: UnitOfWork, rate_limiter: RateLimiter):
        self.uow = uow
        self.rate_limiter = rate_limiter

    async def execute(
        self,
        email: str,
        password: str,
        client: ClientMeta,
        two_factor_code: str = None,
        previous_token: Optional[str] = None,
    ) -> Result[AuthResult]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password
            client: IP address and user agent of the caller
            two_factor_code: TOTP or backup code, required when 2FA is enabled
            previous_token: Session cookie presented with the request, if any

        Returns:
            Result with AuthResult, or Error
        """
        email = email.strip().lower()
        rate_key = f"login:{client.ip_address}:{email}"

        rate_error = await enforce_rate_limit(
            self.rate_limiter,
            rate_key,
            ApplicationConfig.LOGIN_MAX_ATTEMPTS,
            ApplicationConfig.LOGIN_WINDOW_SECONDS,
        )
        if rate_error:
            return Return.err(rate_error)

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                burn_verification(password)
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid email or password")
                )

            if not verify_password(user.password_hash, password):
                return await self._fail(
                    user,
                    client,
                    LoginFailReason.invalid_password,
                    Error("INVALID_CREDENTIALS", "Invalid email or password"),
                )

            if user.account_status != AccountStatus.active:
                return await self._fail(
                    user,
                    client,
                    LoginFailReason.account_inactive,
                    Error("ACCOUNT_INACTIVE", "Account is not active"),
                )

            if user.two_factor_enabled:
                if not two_factor_code:
                    return Return.err(
                        Error("TWO_FACTOR_REQUIRED", "Two-factor authentication code required")
                    )

                if not verify_totp(user.two_factor_secret, two_factor_code):
                    matched, remaining = consume_backup_code(
                        user.two_factor_backup_codes, two_factor_code
                    )
                    if not matched:
                        return await self._fail(
                            user,
                            client,
                            LoginFailReason.invalid_two_factor,
                            Error("INVALID_CREDENTIALS", "Invalid two-factor code"),
                        )
                    user.two_factor_backup_codes = remaining
                    logger.info(
                        f"Backup code used by user {user.id}, {len(remaining)} remaining"
                    )

            if previous_token:
                await self._discard_previous_session(previous_token)

            session, token = await open_session(self.uow, user, client)
            await self._record_attempt(user, client)
            organization = await self.uow.organizations.get_by_id(user.org_id)

            await self.uow.commit()

        await self.rate_limiter.reset(rate_key)

        return Return.ok(
            AuthResult(
                user=UserDTO.from_entity(user),
                organization=(
                    OrganizationDTO.from_entity(organization) if organization else None
                ),
                session_token=token,
                expires_at=session.expires_at,
            )
        )

    async def _discard_previous_session(self, token: str) -> None:
        previous = await self.uow.sessions.get_by_token_hash(hash_token(token))
        if previous is None:
            return
        await self.uow.sessions.delete(previous)
        logger.info(f"Replaced session {previous.id} of user {previous.user_id} on login")

    async def _record_attempt(
        self, user: User, client: ClientMeta, fail_reason: Optional[LoginFailReason] = None
    ) -> None:
        scope = self.uow.scoped(**get_org_filter(user))
        await scope.login_history.add(
            LoginHistory(
                user_id=user.id,
                ip_address=client.ip_address,
                user_agent=client.user_agent,
                success=fail_reason is None,
                fail_reason=fail_reason.value if fail_reason else None,
            )
        )

    async def _fail(
        self, user: User, client: ClientMeta, reason: LoginFailReason, error: Error
    ) -> Result[AuthResult]:
        """The failed attempt is committed on its own; nothing else has changed"""
        await self._record_attempt(user, client, reason)
        await self.uow.commit()
        logger.info(f"Failed login for user {user.id}: {reason.value}")
        return Return.err(error)
