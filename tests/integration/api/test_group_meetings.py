import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlmodel import select

from liturgi.domain.entities import GroupMeeting, MeetingAttendance


async def add_person(client: AsyncClient, first_name: str) -> dict:
    response = await client.post("/api/people", json={"first_name": first_name, "last_name": "Moab"})
    assert response.status_code == 201
    return response.json()["person"]


@pytest_asyncio.fixture
async def group(client: AsyncClient, signed_in_admin):
    response = await client.post("/api/groups", json={"name": "Tuesday Bible Study"})
    assert response.status_code == 201
    return response.json()["group"]


@pytest_asyncio.fixture
async def members(client: AsyncClient, group):
    people = [await add_person(client, name) for name in ("Ruth", "Naomi")]
    for person in people:
        added = await client.post(f"/api/groups/{group['id']}/members", json={"person_id": person["id"]})
        assert added.status_code == 201
    return people


@pytest_asyncio.fixture
async def meeting(client: AsyncClient, group):
    response = await client.post(
        f"/api/groups/{group['id']}/meetings",
        json={
            "title": "Week 1",
            "start_time": "2026-11-03T19:00:00",
            "end_time": "2026-11-03T20:30:00",
            "location": "Fellowship Hall",
        },
    )
    assert response.status_code == 201
    return response.json()["meeting"]


@pytest.mark.asyncio
async def test_record_meeting_attendance(client: AsyncClient, group, members, meeting):
    """Meeting attendance

    Given a meeting of a group with two members
    When I record Ruth as present and Naomi as absent
    And then record Naomi again as present
    Then Naomi's row is overwritten rather than duplicated
    And the meeting list counts two attendees
    """
    ruth, naomi = members
    path = f"/api/groups/{group['id']}/meetings/{meeting['id']}"

    first = await client.put(
        f"{path}/attendance",
        json={"records": [{"person_id": ruth["id"]}, {"person_id": naomi["id"], "attended": False}]},
    )
    again = await client.put(
        f"{path}/attendance",
        json={"records": [{"person_id": naomi["id"], "attended": True, "notes": "Arrived late"}]},
    )

    assert first.status_code == again.status_code == 200
    details = (await client.get(path)).json()["meeting"]
    assert {(a["person_id"], a["attended"], a["notes"]) for a in details["attendance"]} == {
        (ruth["id"], True, None),
        (naomi["id"], True, "Arrived late"),
    }

    listed = (await client.get(f"/api/groups/{group['id']}/meetings")).json()["meetings"]
    assert [(m["title"], m["attendance_count"]) for m in listed] == [("Week 1", 2)]


@pytest.mark.asyncio
async def test_attendance_only_for_group_members(client: AsyncClient, group, members, meeting):
    visitor = await add_person(client, "Orpah")

    response = await client.put(
        f"/api/groups/{group['id']}/meetings/{meeting['id']}/attendance",
        json={"records": [{"person_id": members[0]["id"]}, {"person_id": visitor["id"]}]},
    )

    assert response.status_code == 400
    assert response.json()["details"] == [
        {"field": "records.1.person_id", "message": "Person is not a member of this group"}
    ]
    details = (await client.get(f"/api/groups/{group['id']}/meetings/{meeting['id']}")).json()["meeting"]
    assert details["attendance"] == []


@pytest.mark.asyncio
async def test_meeting_cannot_end_before_it_starts(client: AsyncClient, group, meeting):
    created = await client.post(
        f"/api/groups/{group['id']}/meetings",
        json={"start_time": "2026-11-10T19:00:00", "end_time": "2026-11-10T18:00:00"},
    )
    moved = await client.patch(
        f"/api/groups/{group['id']}/meetings/{meeting['id']}",
        json={"start_time": "2026-11-03T21:00:00"},
    )

    for response in (created, moved):
        assert response.status_code == 400
        assert response.json()["details"] == [
            {"field": "end_time", "message": "End time must not be before start time"}
        ]


@pytest.mark.asyncio
async def test_cancel_meeting(client: AsyncClient, group, meeting):
    response = await client.patch(
        f"/api/groups/{group['id']}/meetings/{meeting['id']}", json={"is_cancelled": True}
    )
    cleared = await client.patch(
        f"/api/groups/{group['id']}/meetings/{meeting['id']}", json={"is_cancelled": None}
    )

    assert response.status_code == 200
    assert response.json()["meeting"]["is_cancelled"] is True
    assert cleared.status_code == 400


@pytest.mark.asyncio
async def test_deleting_group_removes_meetings(client: AsyncClient, group, members, meeting, db_session):
    await client.put(
        f"/api/groups/{group['id']}/meetings/{meeting['id']}/attendance",
        json={"records": [{"person_id": members[0]["id"]}]},
    )

    response = await client.delete(f"/api/groups/{group['id']}")

    assert response.status_code == 200
    assert (await db_session.exec(select(GroupMeeting))).all() == []
    assert (await db_session.exec(select(MeetingAttendance))).all() == []


@pytest.mark.asyncio
async def test_meetings_of_unknown_group(client: AsyncClient, signed_in_admin):
    group_id = "00000000-0000-0000-0000-000000000000"

    listed = await client.get(f"/api/groups/{group_id}/meetings")
    created = await client.post(f"/api/groups/{group_id}/meetings", json={"start_time": "2026-11-03T19:00:00"})

    for response in (listed, created):
        assert response.status_code == 404
        assert response.json() == {"error": "Group not found", "code": "NOT_FOUND"}
