"""
Multi-step mutations commit as a unit.

Each test makes the final audit write fail after every other statement of the
mutation has been flushed, then checks that none of it is visible.
"""

from uuid import UUID

import pytest
from httpx import AsyncClient
from sqlmodel import select

from liturgi.domain.entities import AuditLog, EmailVerification, Person, PersonPhone, Session, User


@pytest.fixture
def failing_audit(monkeypatch):
    """Make record_audit raise inside the given use case module"""

    async def fail(*args, **kwargs):
        raise RuntimeError("audit log unavailable")

    def install(module_path: str):
        monkeypatch.setattr(f"{module_path}.record_audit", fail)

    return install


async def audit_count(db_session) -> int:
    return len((await db_session.exec(select(AuditLog))).all())


@pytest.mark.asyncio
async def test_failed_merge_leaves_both_people_untouched(
    client: AsyncClient, signed_in_admin, db_session, failing_audit
):
    source = (await client.post("/api/people", json={"first_name": "Jon", "last_name": "Smith", "phone": "555-0100"})).json()["person"]
    target = (await client.post("/api/people", json={"first_name": "Jonathan", "last_name": "Smith"})).json()["person"]
    await client.post(f"/api/people/{source['id']}/phones", json={"number": "555-1111"})
    audits_before = await audit_count(db_session)

    failing_audit("liturgi.app.use_cases.people.merge_people_use_case")
    with pytest.raises(RuntimeError):
        await client.post(
            "/api/people/merge", json={"source_id": source["id"], "target_id": target["id"]}
        )

    people = (await db_session.exec(select(Person).order_by(Person.first_name))).all()
    assert [(p.first_name, p.phone, p.merged_from) for p in people] == [
        ("Jon", "555-0100", []),
        ("Jonathan", None, []),
    ]
    phones = (await db_session.exec(select(PersonPhone))).all()
    assert [phone.person_id for phone in phones] == [UUID(source["id"])]
    assert await audit_count(db_session) == audits_before


@pytest.mark.asyncio
async def test_failed_reorder_keeps_previous_positions(
    client: AsyncClient, signed_in_admin, test_data, failing_audit
):
    plan = (await client.post("/api/services", json=test_data.get_copy("service_plan"))).json()["service_plan"]
    for item in test_data.get_copy("service_items"):
        await client.post(f"/api/services/{plan['id']}/items", json=item)
    items = (await client.get(f"/api/services/{plan['id']}")).json()["service_plan"]["items"]

    failing_audit("liturgi.app.use_cases.services.item_use_cases")
    with pytest.raises(RuntimeError):
        await client.post(
            f"/api/services/{plan['id']}/items/reorder",
            json={"item_id": items[3]["id"], "new_position": 0},
        )

    after = (await client.get(f"/api/services/{plan['id']}")).json()["service_plan"]["items"]
    assert [(i["position"], i["title"]) for i in after] == [
        (0, "Opening Song"),
        (1, "Welcome"),
        (2, "Sermon"),
        (3, "Closing Song"),
    ]


@pytest.mark.asyncio
async def test_failed_password_reset_changes_nothing(
    client: AsyncClient, admin, sign_in, outbox, db_session, failing_audit, monkeypatch
):
    email, user_id = admin.email, admin.id
    await sign_in(admin)
    client.cookies.clear()
    await client.post("/api/auth/forgot-password", json={"email": email})
    token = outbox.sent[0]["link"].split("token=")[1]

    failing_audit("liturgi.app.use_cases.auth.reset_password_use_case")
    with pytest.raises(RuntimeError):
        await client.post("/api/auth/reset-password", json={"token": token, "password": "NewSecret456"})

    sessions = (await db_session.exec(select(Session).where(Session.user_id == user_id))).all()
    assert len(sessions) == 1
    old_password = await client.post("/api/auth/login", json={"email": email, "password": "Secret123"})
    assert old_password.status_code == 200

    # The token was not consumed and still works once the audit log is back
    monkeypatch.undo()
    retry = await client.post("/api/auth/reset-password", json={"token": token, "password": "NewSecret456"})
    assert retry.status_code == 200


@pytest.mark.asyncio
async def test_failed_email_verification_keeps_token_and_flag(
    client: AsyncClient, signed_in_admin, outbox, db_session, failing_audit, monkeypatch
):
    user_id = signed_in_admin.id
    await client.post("/api/auth/verify-email/send")
    token = outbox.sent[0]["link"].split("token=")[1]

    failing_audit("liturgi.app.use_cases.auth.verify_email_use_case")
    with pytest.raises(RuntimeError):
        await client.post("/api/auth/verify-email", json={"token": token})

    user = (await db_session.exec(select(User).where(User.id == user_id))).one()
    assert user.email_verified is False
    verification = (await db_session.exec(select(EmailVerification))).one()
    assert verification.verified_at is None

    monkeypatch.undo()
    retry = await client.post("/api/auth/verify-email", json={"token": token})
    assert retry.status_code == 200
