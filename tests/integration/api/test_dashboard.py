from datetime import timedelta

import pytest
from httpx import AsyncClient

from liturgi.domain.base import utcnow
from liturgi.domain.entities import Role


def days_from_now(days: int) -> str:
    return (utcnow() + timedelta(days=days)).replace(microsecond=0).isoformat()


@pytest.mark.asyncio
async def test_dashboard_stats(client: AsyncClient, signed_in_admin, organization, create_user, sign_in):
    """Dashboard

    Given three people, one group with two members and a past and an upcoming plan
    When an admin opens the dashboard
    Then the counts reflect the organization
    And recent activity lists the latest changes
    """
    people = []
    for first_name, status in (("Ruth", "active"), ("Naomi", "active"), ("Orpah", "inactive")):
        response = await client.post(
            "/api/people", json={"first_name": first_name, "last_name": "Moab", "status": status}
        )
        people.append(response.json()["person"])
    group = (await client.post("/api/groups", json={"name": "Choir"})).json()["group"]
    for person in people[:2]:
        await client.post(f"/api/groups/{group['id']}/members", json={"person_id": person["id"]})
    await client.post("/api/services", json={"title": "Last Sunday", "service_date": days_from_now(-7)})
    upcoming = (await client.post("/api/services", json={"title": "Next Sunday", "service_date": days_from_now(7)})).json()["service_plan"]
    await client.post(f"/api/services/{upcoming['id']}/assignments", json={"person_id": people[0]["id"], "role": "Vocals"})

    response = await client.get("/api/dashboard/stats")

    assert response.status_code == 200
    stats = response.json()
    assert stats["people"] == {"total": 3, "active": 2, "inactive": 1}
    assert stats["groups"] == {"total": 1, "total_members": 2, "avg_size": 2.0}
    assert stats["services"] == {"total": 2, "upcoming": 1, "upcoming_assignments": 1}
    assert stats["users"] == {"total": 1}
    assert 0 < len(stats["recent_activity"]) <= 10
    assert "service_assignment" in {entry["entity"] for entry in stats["recent_activity"]}

    await sign_in(await create_user(organization, Role.member))
    member_view = (await client.get("/api/dashboard/stats")).json()

    assert member_view["people"]["total"] == 3
    assert member_view["users"] == {"total": 2}
    assert member_view["recent_activity"] == []


@pytest.mark.asyncio
async def test_dashboard_requires_session(client: AsyncClient):
    response = await client.get("/api/dashboard/stats")

    assert response.status_code == 401
