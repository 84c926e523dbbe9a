from datetime import timedelta

import pyotp
import pytest
from httpx import AsyncClient
from sqlmodel import select

from config import ApplicationConfig
from liturgi.domain.entities import Role, Session

ADMIN_HEADERS = {"X-Admin-API-Key": ApplicationConfig.ADMIN_API_KEY}


@pytest.mark.asyncio
async def test_two_factor_enrollment_and_login(client: AsyncClient, signed_in_admin):
    """Two-factor authentication

    Given I enrolled a TOTP authenticator
    When I log in with only my password
    Then I am asked for the second factor
    And logging in with a current code succeeds
    """
    setup = await client.post("/api/user/2fa/setup")
    assert setup.status_code == 200
    secret = setup.json()["secret"]
    assert setup.json()["otpauth_url"].startswith("otpauth://totp/")

    verified = await client.post("/api/user/2fa/verify", json={"code": pyotp.TOTP(secret).now()})
    assert verified.status_code == 200
    assert len(verified.json()["backup_codes"]) == 10

    client.cookies.clear()
    credentials = {"email": signed_in_admin.email, "password": "Secret123"}
    without_code = await client.post("/api/auth/login", json=credentials)
    with_code = await client.post(
        "/api/auth/login", json={**credentials, "two_factor_code": pyotp.TOTP(secret).now()}
    )

    assert without_code.status_code == 401
    assert without_code.json()["code"] == "TWO_FACTOR_REQUIRED"
    assert with_code.status_code == 200
    assert with_code.json()["user"]["two_factor_enabled"] is True


@pytest.mark.asyncio
async def test_revoke_other_sessions_keeps_current(client: AsyncClient, admin, sign_in, db_session):
    await sign_in(admin)
    await sign_in(admin)
    await sign_in(admin)

    listed = await client.get("/api/user/sessions")
    assert len(listed.json()["sessions"]) == 3
    assert sum(s["current"] for s in listed.json()["sessions"]) == 1

    revoked = await client.delete("/api/user/sessions", params={"keepCurrent": "true"})

    assert revoked.json() == {"revoked": 2}
    remaining = (await db_session.exec(select(Session))).all()
    assert len(remaining) == 1
    assert (await client.get("/api/auth/me")).status_code == 200


@pytest.mark.asyncio
async def test_profile_update(client: AsyncClient, signed_in_admin):
    response = await client.patch("/api/user/profile", json={"first_name": "Grace", "phone_number": "555-0199"})

    assert response.status_code == 200
    profile = (await client.get("/api/user/profile")).json()["user"]
    assert profile["first_name"] == "Grace"
    assert profile["phone_number"] == "555-0199"


@pytest.mark.asyncio
async def test_account_delete_requires_confirmation(client: AsyncClient, signed_in_admin):
    response = await client.post(
        "/api/user/account/delete", json={"password": "Secret123", "confirmation": "delete"}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_FAILED"


@pytest.mark.asyncio
async def test_deactivated_member_is_signed_out(client: AsyncClient, organization, create_user, sign_in, db_session):
    member = await create_user(organization, Role.member)
    await sign_in(member)

    response = await client.post("/api/user/account/deactivate", json={"password": "Secret123"})

    assert response.status_code == 200
    assert (await client.get("/api/auth/me")).status_code == 401
    login = await client.post("/api/auth/login", json={"email": member.email, "password": "Secret123"})
    assert login.json()["code"] == "ACCOUNT_INACTIVE"


@pytest.mark.asyncio
async def test_sweep_deletes_only_expired_sessions(client: AsyncClient, admin, sign_in, db_session):
    await sign_in(admin, expires_in=-timedelta(hours=1))
    await sign_in(admin, expires_in=-timedelta(days=2))
    await sign_in(admin)

    unauthorized = await client.post("/api/admin/sessions/sweep")
    response = await client.post("/api/admin/sessions/sweep", headers=ADMIN_HEADERS)

    assert unauthorized.status_code == 401
    assert response.status_code == 200
    assert response.json() == {"deleted": 2}
    assert len((await db_session.exec(select(Session))).all()) == 1


@pytest.mark.asyncio
async def test_login_history_records_failed_and_successful_attempts(client: AsyncClient, admin):
    """Login history

    Given I mistype my password once
    When I log in and open my login history
    Then both attempts are listed, newest first, with the failure reason
    """
    wrong = await client.post("/api/auth/login", json={"email": admin.email, "password": "Wrong1234"})
    unknown = await client.post("/api/auth/login", json={"email": "nobody@grace.church", "password": "Secret123"})
    login = await client.post(
        "/api/auth/login",
        json={"email": admin.email, "password": "Secret123"},
        headers={"User-Agent": "Psalter/1.0"},
    )
    assert (wrong.status_code, unknown.status_code, login.status_code) == (401, 401, 200)

    response = await client.get("/api/user/login-history")

    assert response.status_code == 200
    body = response.json()
    assert (body["total"], body["has_more"]) == (2, False)
    latest, earlier = body["history"]
    assert (latest["success"], latest["fail_reason"], latest["user_agent"]) == (True, None, "Psalter/1.0")
    assert (earlier["success"], earlier["fail_reason"]) == (False, "invalid_password")

    page = (await client.get("/api/user/login-history", params={"limit": 1})).json()
    assert [entry["id"] for entry in page["history"]] == [latest["id"]]
    assert page["has_more"] is True
