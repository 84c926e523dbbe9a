import pytest
from httpx import AsyncClient
from sqlmodel import select

from liturgi.domain.entities import User


def invite_code(response) -> str:
    return response.json()["invite"]["invite_url"].split("invite=")[1]


@pytest.mark.asyncio
async def test_invite_is_single_use(client: AsyncClient, signed_in_admin, outbox, db_session):
    """Invite redemption

    Given an admin invites new@grace.church as leader
    When the invitee registers with the code
    Then they join the inviting organization as leader with a verified email
    And a second registration with the same code fails with INVITE_ALREADY_USED
    """
    created = await client.post("/api/invites", json={"email": "new@grace.church", "role": "leader"})
    assert created.status_code == 201
    assert created.json()["invite"]["status"] == "pending"
    assert outbox.sent[0]["to"] == "new@grace.church"
    code = invite_code(created)

    public = await client.get(f"/api/invites/{code}")
    assert public.status_code == 200
    assert public.json()["invite"]["organization_name"] == "Grace Church"

    client.cookies.clear()
    registered = await client.post(
        "/api/auth/register",
        json={"email": "new@grace.church", "password": "Secret123", "invite_code": code},
    )
    assert registered.status_code == 201
    assert registered.json()["user"]["role"] == "leader"
    assert registered.json()["user"]["org_id"] == str(signed_in_admin.org_id)
    assert registered.json()["user"]["email_verified"] is True

    client.cookies.clear()
    again = await client.post(
        "/api/auth/register",
        json={"email": "new@grace.church", "password": "Secret123", "invite_code": code},
    )
    assert again.status_code == 400
    assert again.json()["code"] == "INVITE_ALREADY_USED"

    users = (await db_session.exec(select(User).where(User.email == "new@grace.church"))).all()
    assert len(users) == 1


@pytest.mark.asyncio
async def test_invite_email_mismatch_is_invalid(client: AsyncClient, signed_in_admin):
    created = await client.post("/api/invites", json={"email": "new@grace.church"})
    client.cookies.clear()

    response = await client.post(
        "/api/auth/register",
        json={"email": "other@grace.church", "password": "Secret123", "invite_code": invite_code(created)},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_INVITE"


@pytest.mark.asyncio
async def test_duplicate_pending_invite_conflicts(client: AsyncClient, signed_in_admin):
    await client.post("/api/invites", json={"email": "new@grace.church"})

    response = await client.post("/api/invites", json={"email": "new@grace.church"})

    assert response.status_code == 400
    assert response.json()["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_revoked_invite_cannot_be_redeemed(client: AsyncClient, signed_in_admin):
    created = await client.post("/api/invites", json={"email": "new@grace.church"})
    invite_id = created.json()["invite"]["id"]

    revoked = await client.delete(f"/api/invites/{invite_id}")
    assert revoked.status_code == 200

    client.cookies.clear()
    response = await client.post(
        "/api/auth/register",
        json={"email": "new@grace.church", "password": "Secret123", "invite_code": invite_code(created)},
    )
    assert response.json()["code"] == "INVALID_INVITE"
