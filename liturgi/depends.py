from typing import Callable, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from liturgi.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from liturgi.api.error import unwrap
from liturgi.app.services.mailer import Mailer
from liturgi.app.services.rate_limiter import RateLimiter
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.auth import AuthenticateSessionUseCase, ClientMeta, SessionContext
from liturgi.domain import rbac
from liturgi.domain.entities import User

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def init_db() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def get_client_meta(request: Request) -> ClientMeta:
    """
    Caller address and user agent.

    X-Forwarded-For is client controlled and only honoured behind a trusted proxy.
    """
    ip_address = request.client.host if request.client else None
    if ApplicationConfig.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            ip_address = forwarded.split(",")[0].strip()
    return ClientMeta(ip_address=ip_address, user_agent=request.headers.get("user-agent"))


async def get_session_context(
    request: Request, uow: UnitOfWork = Depends(get_unit_of_work)
) -> SessionContext:
    """
    Resolve the session cookie to the signed-in user.

    Raises:
        ClientError: 401 if the cookie is missing, unknown or expired
    """
    token = request.cookies.get(ApplicationConfig.SESSION_COOKIE_NAME)
    result = await AuthenticateSessionUseCase(uow).execute(token)
    return unwrap(result)


async def get_current_user(context: SessionContext = Depends(get_session_context)) -> User:
    return context.user


def require_permission(permission: rbac.Permission) -> Callable:
    """
    Dependency factory: authenticated user holding the given permission.

    Authentication runs first, then the permission check, both before the
    route body executes.
    """

    async def dependency(user: User = Depends(get_current_user)) -> User:
        rbac.require_permission(user, permission)
        return user

    return dependency


async def get_optional_user(
    request: Request, uow: UnitOfWork = Depends(get_unit_of_work)
) -> Optional[User]:
    """Signed-in user when the cookie resolves, None otherwise"""
    token = request.cookies.get(ApplicationConfig.SESSION_COOKIE_NAME)
    if not token:
        return None
    result = await AuthenticateSessionUseCase(uow).execute(token)
    return result.value.user if result.is_ok() else None
