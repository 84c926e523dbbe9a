import pytest
import pytest_asyncio
from httpx import AsyncClient


@pytest_asyncio.fixture
async def ministries(client: AsyncClient, signed_in_admin):
    response = await client.post("/api/tags/categories", json={"name": "Ministries", "color": "#3366ff"})
    assert response.status_code == 201
    return response.json()["category"]


@pytest.mark.asyncio
async def test_tags_grouped_by_category(client: AsyncClient, ministries):
    """Tag categories

    Given a Ministries category
    When I create two tags in it and one without a category
    Then the category counts two tags
    And filtering tags by the category returns only those two
    """
    for name in ("Choir", "Ushers"):
        created = await client.post("/api/tags", json={"name": name, "category_id": ministries["id"]})
        assert created.status_code == 201
    await client.post("/api/tags", json={"name": "Visitor"})

    categories = (await client.get("/api/tags/categories")).json()["categories"]
    filtered = (await client.get("/api/tags", params={"category_id": ministries["id"]})).json()["tags"]

    assert [(c["name"], c["tag_count"]) for c in categories] == [("Ministries", 2)]
    assert sorted(tag["name"] for tag in filtered) == ["Choir", "Ushers"]
    assert len((await client.get("/api/tags")).json()["tags"]) == 3


@pytest.mark.asyncio
async def test_duplicate_category_name(client: AsyncClient, ministries):
    response = await client.post("/api/tags/categories", json={"name": "Ministries"})

    assert response.status_code == 400
    assert response.json() == {
        "error": "A tag category with this name already exists",
        "code": "CONFLICT",
    }


@pytest.mark.asyncio
async def test_deleting_category_keeps_its_tags(client: AsyncClient, ministries):
    tag = (await client.post("/api/tags", json={"name": "Choir", "category_id": ministries["id"]})).json()["tag"]

    response = await client.delete(f"/api/tags/categories/{ministries['id']}")

    assert response.status_code == 200
    tags = (await client.get("/api/tags")).json()["tags"]
    assert [(t["id"], t["category_id"]) for t in tags] == [(tag["id"], None)]
    assert (await client.get("/api/tags/categories")).json()["categories"] == []


@pytest.mark.asyncio
async def test_tag_in_unknown_category(client: AsyncClient, signed_in_admin):
    response = await client.post(
        "/api/tags", json={"name": "Choir", "category_id": "00000000-0000-0000-0000-000000000000"}
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Tag category not found", "code": "NOT_FOUND"}
