"""
Rows of one organization are invisible to members of another: lists never
include them and direct access by id answers 404 NOT_FOUND.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlmodel import select

from liturgi.domain.entities import Person, Role


@pytest_asyncio.fixture
async def other_admin(create_organization, create_user):
    other = await create_organization("hope", name="Hope Chapel")
    return await create_user(other, Role.admin)


@pytest_asyncio.fixture
async def grace_person(client: AsyncClient, signed_in_admin, test_data):
    response = await client.post("/api/people", json=test_data.get_copy("person"))
    assert response.status_code == 201
    return response.json()["person"]


@pytest.mark.asyncio
async def test_people_of_other_organization_are_invisible(
    client: AsyncClient, grace_person, other_admin, sign_in
):
    await sign_in(other_admin)

    listed = await client.get("/api/people")
    fetched = await client.get(f"/api/people/{grace_person['id']}")

    assert listed.status_code == 200
    assert listed.json() == {"people": [], "total": 0}
    assert fetched.status_code == 404
    assert fetched.json() == {"error": "Person not found", "code": "NOT_FOUND"}


@pytest.mark.asyncio
async def test_foreign_rows_cannot_be_modified(
    client: AsyncClient, grace_person, other_admin, sign_in, db_session
):
    await sign_in(other_admin)

    patched = await client.patch(f"/api/people/{grace_person['id']}", json={"first_name": "Hacked"})
    deleted = await client.delete(f"/api/people/{grace_person['id']}")

    assert patched.status_code == 404
    assert deleted.status_code == 404
    person = (await db_session.exec(select(Person))).one()
    assert person.first_name == "Ruth"


@pytest.mark.asyncio
async def test_foreign_references_are_not_found(
    client: AsyncClient, grace_person, other_admin, sign_in
):
    """A group of Hope cannot take a person of Grace as member"""
    await sign_in(other_admin)
    group = await client.post("/api/groups", json={"name": "Hope Choir"})
    assert group.status_code == 201

    response = await client.post(
        f"/api/groups/{group.json()['group']['id']}/members",
        json={"person_id": grace_person["id"]},
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Person not found"


@pytest.mark.asyncio
async def test_organization_settings_are_per_tenant(
    client: AsyncClient, signed_in_admin, other_admin, sign_in
):
    grace = await client.get("/api/organization/settings")
    await sign_in(other_admin)
    hope = await client.get("/api/organization/settings")

    assert grace.json()["organization"]["name"] == "Grace Church"
    assert hope.json()["organization"]["name"] == "Hope Chapel"


@pytest.mark.asyncio
async def test_audit_logs_are_per_tenant(client: AsyncClient, grace_person, other_admin, sign_in):
    grace = await client.get("/api/audit-logs")
    await sign_in(other_admin)
    hope = await client.get("/api/audit-logs")

    assert [entry["entity"] for entry in grace.json()["logs"]] == ["person"]
    assert hope.json()["logs"] == []
