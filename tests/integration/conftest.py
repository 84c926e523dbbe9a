from datetime import timedelta
from typing import List

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from liturgi.adapter.services.rate_limiter import InMemoryRateLimiter
from liturgi.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from liturgi.app.services.mailer import Mailer
from liturgi.app.services.passwords import hash_password
from liturgi.app.services.tokens import generate_token, hash_token
from liturgi.depends import get_mailer, get_unit_of_work
from liturgi.domain.base import utcnow
from liturgi.domain.entities import Organization, Role, Session, User
from tests.fixtures.json_loader import TestDataLoader

PASSWORD = "Secret123"


class OutboxMailer(Mailer):
    """Keeps sent mail in memory for assertions"""

    def __init__(self):
        self.sent: List[dict] = []

    async def send(self, to: str, subject: str, body: str, link: str) -> None:
        self.sent.append({"to": to, "subject": subject, "body": body, "link": link})


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    session_factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
def outbox():
    return OutboxMailer()


@pytest_asyncio.fixture
async def client(db_session, outbox):
    from liturgi.api.app import create_app

    app = create_app(ApplicationConfig)
    app.state.rate_limiter = InMemoryRateLimiter()

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_mailer] = lambda: outbox

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture
def create_organization(db_session):
    async def factory(subdomain: str = "grace", **fields) -> Organization:
        organization = Organization(
            name=fields.pop("name", subdomain.capitalize()),
            subdomain=subdomain,
            plan_limits=fields.pop(
                "plan_limits", {"people": 100, "groups": 10, "servicePlans": 10}
            ),
            **fields,
        )
        db_session.add(organization)
        await db_session.commit()
        return organization

    return factory


@pytest_asyncio.fixture
def create_user(db_session):
    async def factory(organization: Organization, role: Role = Role.admin, **fields) -> User:
        user = User(
            org_id=organization.id,
            email=fields.pop("email", f"{role.value}@{organization.subdomain}.church"),
            password_hash=hash_password(fields.pop("password", PASSWORD)),
            role=role,
            **fields,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return factory


@pytest_asyncio.fixture
def sign_in(client, db_session):
    """Open a session row directly and make the client send its cookie"""

    async def factory(user: User, expires_in: timedelta = timedelta(days=7)) -> str:
        token = generate_token()
        now = utcnow()
        db_session.add(
            Session(
                user_id=user.id,
                org_id=user.org_id,
                token_hash=hash_token(token),
                created_at=now,
                last_accessed_at=now,
                expires_at=now + expires_in,
            )
        )
        await db_session.commit()
        client.cookies.clear()
        client.cookies.set(ApplicationConfig.SESSION_COOKIE_NAME, token, domain="testserver.local")
        return token

    return factory


@pytest_asyncio.fixture
async def organization(create_organization):
    return await create_organization("grace", name="Grace Church")


@pytest_asyncio.fixture
async def admin(organization, create_user):
    return await create_user(organization, Role.admin)


@pytest_asyncio.fixture
async def signed_in_admin(admin, sign_in):
    await sign_in(admin)
    return admin
