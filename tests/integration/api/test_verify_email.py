from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlmodel import select

from liturgi.app.services.tokens import generate_token, hash_token
from liturgi.domain.base import utcnow
from liturgi.domain.entities import EmailVerification, User


async def request_verification_link(client: AsyncClient, outbox) -> str:
    response = await client.post("/api/auth/verify-email/send")
    assert response.status_code == 200
    assert response.json()["message"] == "Verification email sent"
    return outbox.sent[-1]["link"].split("token=")[1]


@pytest.mark.asyncio
async def test_verify_email_flow(client: AsyncClient, signed_in_admin, outbox, db_session):
    """Email verification

    Given I am signed in with an unverified address
    When I request a verification email and open the link
    Then my address is verified and the token is consumed
    """
    user_id = signed_in_admin.id
    token = await request_verification_link(client, outbox)
    assert outbox.sent[0]["to"] == signed_in_admin.email

    response = await client.post("/api/auth/verify-email", json={"token": token})

    assert response.status_code == 200
    assert response.json()["message"] == "Email verified"
    me = (await client.get("/api/auth/me")).json()
    assert me["user"]["email_verified"] is True

    verification = (
        await db_session.exec(
            select(EmailVerification).where(EmailVerification.token_hash == hash_token(token))
        )
    ).one()
    assert verification.verified_at is not None
    user = (await db_session.exec(select(User).where(User.id == user_id))).one()
    assert user.email_verified_at is not None


@pytest.mark.asyncio
async def test_verification_link_is_single_use(client: AsyncClient, signed_in_admin, outbox):
    token = await request_verification_link(client, outbox)
    await client.post("/api/auth/verify-email", json={"token": token})

    again = await client.post("/api/auth/verify-email", json={"token": token})

    assert again.status_code == 400
    assert again.json() == {
        "error": "This verification link has already been used",
        "code": "TOKEN_ALREADY_USED",
    }


@pytest.mark.asyncio
async def test_expired_verification_link(client: AsyncClient, signed_in_admin, db_session):
    token = generate_token()
    db_session.add(
        EmailVerification(
            user_id=signed_in_admin.id,
            token_hash=hash_token(token),
            expires_at=utcnow() - timedelta(minutes=5),
        )
    )
    await db_session.commit()

    response = await client.post("/api/auth/verify-email", json={"token": token})

    assert response.status_code == 400
    assert response.json()["code"] == "TOKEN_EXPIRED"
    me = (await client.get("/api/auth/me")).json()
    assert me["user"]["email_verified"] is False


@pytest.mark.asyncio
async def test_unknown_verification_token(client: AsyncClient):
    response = await client.post("/api/auth/verify-email", json={"token": "not-a-real-token"})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_no_email_sent_when_already_verified(client: AsyncClient, organization, create_user, sign_in, outbox):
    user = await create_user(organization, email="verified@grace.church", email_verified=True)
    await sign_in(user)

    response = await client.post("/api/auth/verify-email/send")

    assert response.status_code == 200
    assert response.json()["message"] == "Email is already verified"
    assert outbox.sent == []


@pytest.mark.asyncio
async def test_sending_verification_requires_session(client: AsyncClient):
    response = await client.post("/api/auth/verify-email/send")

    assert response.status_code == 401
