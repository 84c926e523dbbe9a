from datetime import timedelta
from typing import Tuple

from config import ApplicationConfig
from liturgi.app.services.tokens import generate_token, hash_token
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.domain.base import utcnow
from liturgi.domain.entities import Session, User

from .dtos import ClientMeta


async def open_session(
    uow: UnitOfWork, user: User, client: ClientMeta
) -> Tuple[Session, str]:
    """
    Persist a new session for user and stamp last_login_at.

    Returns:
        (session row, raw token for the cookie)
    """
    now = utcnow()
    token = generate_token()
    session = Session(
        user_id=user.id,
        org_id=user.org_id,
        token_hash=hash_token(token),
        ip_address=client.ip_address,
        user_agent=(client.user_agent or "")[:500] or None,
        created_at=now,
        last_accessed_at=now,
        expires_at=now + timedelta(days=ApplicationConfig.SESSION_TTL_DAYS),
    )
    session = await uow.sessions.create(session)

    user.last_login_at = now
    await uow.users.update(user)

    return session, token
