import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlmodel import select

from liturgi.domain.entities import Arrangement


@pytest_asyncio.fixture
async def song(client: AsyncClient, signed_in_admin):
    response = await client.post("/api/songs", json={"title": "Amazing Grace", "default_key": "G"})
    assert response.status_code == 201
    return response.json()["song"]


@pytest.mark.asyncio
async def test_song_arrangements(client: AsyncClient, song):
    """Arrangements

    Given a song
    When I add an acoustic and a full band arrangement
    Then both are listed by name
    And a patch changes only the fields sent
    """
    path = f"/api/songs/{song['id']}/arrangements"
    full = await client.post(path, json={"name": "Full Band", "key": "A", "bpm": 72})
    acoustic = await client.post(path, json={"name": "Acoustic", "key": "G"})
    assert full.status_code == acoustic.status_code == 201

    listed = (await client.get(path)).json()["arrangements"]
    assert [(a["name"], a["key"]) for a in listed] == [("Acoustic", "G"), ("Full Band", "A")]

    arrangement_id = full.json()["arrangement"]["id"]
    updated = await client.patch(f"{path}/{arrangement_id}", json={"key": "Bb"})
    assert updated.json()["arrangement"]["key"] == "Bb"
    assert updated.json()["arrangement"]["bpm"] == 72

    removed = await client.delete(f"{path}/{arrangement_id}")
    assert removed.status_code == 200
    assert [a["name"] for a in (await client.get(path)).json()["arrangements"]] == ["Acoustic"]


@pytest.mark.asyncio
async def test_arrangement_of_another_song_is_not_found(client: AsyncClient, song):
    other = (await client.post("/api/songs", json={"title": "Be Thou My Vision"})).json()["song"]
    arrangement = (
        await client.post(f"/api/songs/{song['id']}/arrangements", json={"name": "Choir", "key": "D"})
    ).json()["arrangement"]

    response = await client.patch(
        f"/api/songs/{other['id']}/arrangements/{arrangement['id']}", json={"key": "E"}
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Arrangement not found", "code": "NOT_FOUND"}


@pytest.mark.asyncio
async def test_arrangements_of_unknown_song(client: AsyncClient, signed_in_admin):
    path = "/api/songs/00000000-0000-0000-0000-000000000000/arrangements"

    listed = await client.get(path)
    created = await client.post(path, json={"name": "Acoustic", "key": "G"})

    for response in (listed, created):
        assert response.status_code == 404
        assert response.json() == {"error": "Song not found", "code": "NOT_FOUND"}


@pytest.mark.asyncio
async def test_deleting_song_removes_arrangements(client: AsyncClient, song, db_session):
    await client.post(f"/api/songs/{song['id']}/arrangements", json={"name": "Acoustic", "key": "G"})

    response = await client.delete(f"/api/songs/{song['id']}")

    assert response.status_code == 200
    assert (await db_session.exec(select(Arrangement))).all() == []
