import pytest
from httpx import AsyncClient
from sqlmodel import func, select

from liturgi.domain.entities import AuditLog, Person, Role


@pytest.mark.asyncio
async def test_viewer_cannot_create_people(
    client: AsyncClient, organization, create_user, sign_in, db_session, test_data
):
    """Permission gating

    Given I am signed in as a viewer
    When I try to create a person
    Then I get 403 PERMISSION_DENIED
    And neither a person nor an audit entry is written
    """
    viewer = await create_user(organization, Role.viewer)
    await sign_in(viewer)

    response = await client.post("/api/people", json=test_data.get_copy("person"))

    assert response.status_code == 403
    assert response.json() == {
        "error": "You do not have permission to do this",
        "code": "PERMISSION_DENIED",
    }
    assert (await db_session.exec(select(Person))).all() == []
    assert (await db_session.exec(select(AuditLog))).all() == []


@pytest.mark.asyncio
async def test_permission_is_checked_before_payload_validation(
    client: AsyncClient, organization, create_user, sign_in
):
    viewer = await create_user(organization, Role.viewer)
    await sign_in(viewer)

    response = await client.post("/api/people", json={"first_name": ""})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unauthenticated_request_is_rejected_first(client: AsyncClient):
    response = await client.post("/api/people", json={"first_name": ""})

    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "role,method,path,expected",
    [
        (Role.viewer, "get", "/api/people", 200),
        (Role.viewer, "get", "/api/organization/settings", 403),
        (Role.member, "get", "/api/organization/settings", 200),
        (Role.member, "post", "/api/groups", 403),
        (Role.leader, "get", "/api/users", 403),
        (Role.leader, "get", "/api/audit-logs", 403),
        (Role.admin, "get", "/api/users", 200),
    ],
)
async def test_role_permission_matrix(
    client: AsyncClient, organization, create_user, sign_in, role, method, path, expected
):
    user = await create_user(organization, role)
    await sign_in(user)

    if method == "get":
        response = await client.get(path)
    else:
        response = await client.post(path, json={"name": "Choir"})

    assert response.status_code == expected


@pytest.mark.asyncio
async def test_people_plan_limit(
    client: AsyncClient, create_organization, create_user, sign_in, db_session
):
    """Plan limit

    Given my organization's plan allows 2 people and already has 2
    When I create a third person
    Then I get 403 PLAN_LIMIT_REACHED naming the limit
    And the organization still has exactly 2 people
    """
    organization = await create_organization(
        "small", plan_limits={"people": 2, "groups": 1, "servicePlans": 1}
    )
    await sign_in(await create_user(organization, Role.admin))

    for name in ("First", "Second"):
        created = await client.post("/api/people", json={"first_name": name, "last_name": "Person"})
        assert created.status_code == 201

    response = await client.post("/api/people", json={"first_name": "Third", "last_name": "Person"})

    assert response.status_code == 403
    body = response.json()
    assert body["code"] == "PLAN_LIMIT_REACHED"
    assert "2" in body["error"]

    count = (await db_session.exec(select(func.count()).select_from(Person))).one()
    assert count == 2

    settings = await client.get("/api/organization/settings")
    assert settings.json()["usage"]["people"] == 2


@pytest.mark.asyncio
async def test_import_over_plan_limit_is_refused_as_a_whole(
    client: AsyncClient, create_organization, create_user, sign_in, db_session, test_data
):
    organization = await create_organization(
        "small", plan_limits={"people": 1, "groups": 1, "servicePlans": 1}
    )
    await sign_in(await create_user(organization, Role.admin))

    response = await client.post(
        "/api/people/import",
        files=test_data.csv_upload("people_csv"),
    )

    assert response.status_code == 403
    assert response.json()["code"] == "PLAN_LIMIT_REACHED"
    assert (await db_session.exec(select(Person))).all() == []


@pytest.mark.asyncio
async def test_last_admin_cannot_be_demoted(client: AsyncClient, signed_in_admin):
    response = await client.patch(
        f"/api/users/{signed_in_admin.id}/role", json={"role": "member"}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_FAILED"
