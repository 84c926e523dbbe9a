import pytest
import pytest_asyncio
from httpx import AsyncClient

from liturgi.domain.entities import Role


@pytest_asyncio.fixture
async def person(client: AsyncClient, signed_in_admin, test_data):
    response = await client.post("/api/people", json=test_data.get_copy("person"))
    return response.json()["person"]


@pytest.mark.asyncio
async def test_group_membership_lifecycle(client: AsyncClient, person):
    group = (await client.post("/api/groups", json={"name": "Choir", "category": "worship_team"})).json()["group"]
    members_path = f"/api/groups/{group['id']}/members"

    added = await client.post(members_path, json={"person_id": person["id"], "role": "leader"})
    duplicate = await client.post(members_path, json={"person_id": person["id"]})

    assert added.status_code == 201
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "This person is already a member of this group"

    member_id = added.json()["member"]["id"]
    updated = await client.patch(f"{members_path}/{member_id}", json={"role": "co_leader"})
    assert updated.json()["member"]["role"] == "co_leader"

    listed = await client.get(members_path)
    assert [m["person_id"] for m in listed.json()["members"]] == [person["id"]]

    removed = await client.delete(f"{members_path}/{member_id}")
    assert removed.status_code == 200
    assert (await client.get(members_path)).json()["members"] == []


@pytest.mark.asyncio
async def test_group_plan_limit(client: AsyncClient, create_organization, create_user, sign_in):
    organization = await create_organization("tiny", plan_limits={"people": 1, "groups": 1, "servicePlans": 1})
    await sign_in(await create_user(organization, Role.admin))

    first = await client.post("/api/groups", json={"name": "One"})
    second = await client.post("/api/groups", json={"name": "Two"})

    assert first.status_code == 201
    assert second.status_code == 403
    assert second.json() == {"error": "Plan limit reached: maximum 1 groups", "code": "PLAN_LIMIT_REACHED"}


@pytest.mark.asyncio
async def test_public_form_accepts_anonymous_submission(client: AsyncClient, signed_in_admin):
    """Public form

    Given an active public form with a required name field
    When an anonymous visitor submits it
    Then the submission is stored under the form's organization
    And staff can list it
    """
    form = await client.post(
        "/api/forms",
        json={
            "title": "Connect card",
            "is_public": True,
            "fields": [{"name": "name", "label": "Your name", "required": True}],
        },
    )
    form_id = form.json()["form"]["id"]

    client.cookies.clear()
    missing = await client.post(f"/api/forms/{form_id}/submissions", json={"data": {}})
    submitted = await client.post(
        f"/api/forms/{form_id}/submissions", json={"data": {"name": "First-time guest"}}
    )

    assert missing.status_code == 400
    assert missing.json()["details"] == [{"field": "name", "message": "Your name is required"}]
    assert submitted.status_code == 201
    assert submitted.json()["submission"]["org_id"] == str(signed_in_admin.org_id)

    anonymous_list = await client.get(f"/api/forms/{form_id}/submissions")
    assert anonymous_list.status_code == 401


@pytest.mark.asyncio
async def test_private_form_hidden_from_anonymous_callers(client: AsyncClient, signed_in_admin):
    form = await client.post("/api/forms", json={"title": "Staff only"})
    form_id = form.json()["form"]["id"]

    client.cookies.clear()
    response = await client.post(f"/api/forms/{form_id}/submissions", json={"data": {}})

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_attendance_is_recorded_against_a_person(client: AsyncClient, person):
    recorded = await client.post(
        "/api/attendance",
        json={"person_id": person["id"], "attendance_date": "2026-11-01"},
    )

    assert recorded.status_code == 201
    listed = await client.get("/api/attendance", params={"person_id": person["id"]})
    assert [a["person_id"] for a in listed.json()["attendance"]] == [person["id"]]


@pytest.mark.asyncio
async def test_workflows_crud(client: AsyncClient, signed_in_admin):
    created = await client.post("/api/workflows", json={"name": "Newcomer follow-up", "trigger": "person_created"})
    assert created.status_code == 201
    workflow_id = created.json()["workflow"]["id"]

    updated = await client.patch(f"/api/workflows/{workflow_id}", json={"status": "paused"})
    assert updated.json()["workflow"]["status"] == "paused"

    deleted = await client.delete(f"/api/workflows/{workflow_id}")
    assert deleted.status_code == 200
    assert (await client.get("/api/workflows")).json()["workflows"] == []
