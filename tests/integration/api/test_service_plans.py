import pytest
import pytest_asyncio
from httpx import AsyncClient


@pytest_asyncio.fixture
async def plan(client: AsyncClient, signed_in_admin, test_data):
    response = await client.post("/api/services", json=test_data.get_copy("service_plan"))
    assert response.status_code == 201
    plan = response.json()["service_plan"]

    for item in test_data.get_copy("service_items"):
        created = await client.post(f"/api/services/{plan['id']}/items", json=item)
        assert created.status_code == 201
    return plan


async def item_titles(client: AsyncClient, plan_id: str):
    details = (await client.get(f"/api/services/{plan_id}")).json()["service_plan"]
    return [(item["position"], item["title"]) for item in details["items"]]


@pytest.mark.asyncio
async def test_items_are_appended_in_order(client: AsyncClient, plan):
    details = (await client.get(f"/api/services/{plan['id']}")).json()["service_plan"]

    assert [item["position"] for item in details["items"]] == [0, 1, 2, 3]
    assert details["total_duration"] == 240 + 120 + 1800 + 240


@pytest.mark.asyncio
async def test_reorder_keeps_positions_contiguous(client: AsyncClient, plan):
    """Reorder

    Given a plan with items at positions 0..3
    When I move the sermon (position 2) to position 0
    Then the order is Sermon, Opening Song, Welcome, Closing Song
    And positions are exactly 0..3
    """
    details = (await client.get(f"/api/services/{plan['id']}")).json()["service_plan"]
    sermon = details["items"][2]

    response = await client.post(
        f"/api/services/{plan['id']}/items/reorder",
        json={"item_id": sermon["id"], "new_position": 0},
    )

    assert response.status_code == 200
    assert [(i["position"], i["title"]) for i in response.json()["items"]] == [
        (0, "Sermon"),
        (1, "Opening Song"),
        (2, "Welcome"),
        (3, "Closing Song"),
    ]
    assert await item_titles(client, plan["id"]) == [
        (0, "Sermon"),
        (1, "Opening Song"),
        (2, "Welcome"),
        (3, "Closing Song"),
    ]


@pytest.mark.asyncio
async def test_reorder_past_the_end_is_rejected(client: AsyncClient, plan):
    details = (await client.get(f"/api/services/{plan['id']}")).json()["service_plan"]

    response = await client.post(
        f"/api/services/{plan['id']}/items/reorder",
        json={"item_id": details["items"][0]["id"], "new_position": 4},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_FAILED"
    assert response.json()["details"] == [
        {"field": "new_position", "message": "Position must be between 0 and 3"}
    ]


@pytest.mark.asyncio
async def test_deleting_an_item_compacts_positions(client: AsyncClient, plan):
    details = (await client.get(f"/api/services/{plan['id']}")).json()["service_plan"]
    welcome = details["items"][1]

    response = await client.delete(f"/api/services/{plan['id']}/items/{welcome['id']}")

    assert response.status_code == 200
    assert await item_titles(client, plan["id"]) == [
        (0, "Opening Song"),
        (1, "Sermon"),
        (2, "Closing Song"),
    ]


@pytest.mark.asyncio
async def test_plan_from_template_copies_items(client: AsyncClient, plan, test_data):
    template = await client.post(
        f"/api/services/{plan['id']}/template", json={"name": "Sunday default"}
    )
    assert template.status_code == 201
    assert len(template.json()["template"]["items"]) == 4

    payload = {**test_data.get_copy("service_plan"), "template_id": template.json()["template"]["id"]}
    created = await client.post("/api/services", json=payload)

    assert created.status_code == 201
    assert await item_titles(client, created.json()["service_plan"]["id"]) == [
        (0, "Opening Song"),
        (1, "Welcome"),
        (2, "Sermon"),
        (3, "Closing Song"),
    ]


@pytest.mark.asyncio
async def test_duplicate_plan_copies_items_as_draft(client: AsyncClient, plan):
    response = await client.post(f"/api/services/{plan['id']}/duplicate", json={})

    assert response.status_code == 201
    copy = response.json()["service_plan"]
    assert copy["title"] == "Sunday Morning (copy)"
    assert copy["status"] == "draft"
    assert len(await item_titles(client, copy["id"])) == 4


@pytest.mark.asyncio
async def test_person_holds_a_role_once_per_plan(client: AsyncClient, plan, test_data):
    person = (await client.post("/api/people", json=test_data.get_copy("person"))).json()["person"]
    assignment = {"person_id": person["id"], "role": "Worship Leader"}

    first = await client.post(f"/api/services/{plan['id']}/assignments", json=assignment)
    second = await client.post(f"/api/services/{plan['id']}/assignments", json=assignment)
    other_role = await client.post(
        f"/api/services/{plan['id']}/assignments",
        json={"person_id": person["id"], "role": "Vocals"},
    )

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json() == {
        "error": "This person is already assigned to this role",
        "code": "CONFLICT",
    }
    assert other_role.status_code == 201


@pytest.mark.asyncio
async def test_deleting_plan_removes_items(client: AsyncClient, plan):
    deleted = await client.delete(f"/api/services/{plan['id']}")

    assert deleted.status_code == 200
    assert (await client.get(f"/api/services/{plan['id']}")).status_code == 404
    assert (await client.get("/api/services")).json() == {"service_plans": []}


@pytest.mark.asyncio
async def test_song_items_reference_the_song_library(client: AsyncClient, plan):
    song = await client.post("/api/songs", json={"title": "Amazing Grace", "artist": "John Newton"})
    assert song.status_code == 201
    song_id = song.json()["song"]["id"]

    item = await client.post(
        f"/api/services/{plan['id']}/items",
        json={"type": "song", "title": "Amazing Grace", "song_id": song_id},
    )
    found = await client.get("/api/songs", params={"search": "grace"})

    assert item.status_code == 201
    assert item.json()["item"]["position"] == 4
    assert [s["id"] for s in found.json()["songs"]] == [song_id]


@pytest.mark.asyncio
async def test_same_day_assignments_are_reported_as_conflicts(client: AsyncClient, plan, test_data):
    """Assignment conflicts

    Given Ruth serves at the early service on Sunday
    When I check her for the late service that same Sunday
    Then the early service is reported as a conflict
    And a declined assignment or a plan on another day is not
    """
    person = (await client.post("/api/people", json=test_data.get_copy("person"))).json()["person"]
    late = (await client.post("/api/services", json={"title": "Late Service", "service_date": "2026-11-01T18:00:00"})).json()["service_plan"]
    monday = (await client.post("/api/services", json={"title": "Prayer Night", "service_date": "2026-11-02T19:00:00"})).json()["service_plan"]
    await client.post(f"/api/services/{plan['id']}/assignments", json={"person_id": person["id"], "role": "Vocals"})
    await client.post(f"/api/services/{monday['id']}/assignments", json={"person_id": person["id"], "role": "Vocals"})

    response = await client.get(
        f"/api/services/{late['id']}/assignments/conflicts", params={"person_id": person["id"]}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["has_conflicts"] is True
    assert [(c["service_plan_id"], c["role"], c["message"]) for c in body["conflicts"]] == [
        (plan["id"], "Vocals", "Already assigned to Sunday Morning")
    ]

    assignment = (await client.get(f"/api/services/{plan['id']}")).json()["service_plan"]["assignments"][0]
    await client.patch(
        f"/api/services/{plan['id']}/assignments/{assignment['id']}", json={"status": "declined"}
    )
    cleared = await client.get(
        f"/api/services/{late['id']}/assignments/conflicts", params={"person_id": person["id"]}
    )
    assert cleared.json() == {"has_conflicts": False, "conflicts": []}


@pytest.mark.asyncio
async def test_conflict_check_on_unknown_plan(client: AsyncClient, plan, test_data):
    person = (await client.post("/api/people", json=test_data.get_copy("person"))).json()["person"]

    response = await client.get(
        "/api/services/00000000-0000-0000-0000-000000000000/assignments/conflicts",
        params={"person_id": person["id"]},
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Service plan not found", "code": "NOT_FOUND"}
