import csv
import io
import json
from uuid import UUID

import pytest
from httpx import AsyncClient
from sqlmodel import select

from liturgi.domain.entities import AuditAction, AuditLog, Person, PersonPhone, Role


async def create_person(client: AsyncClient, **fields) -> dict:
    response = await client.post("/api/people", json=fields)
    assert response.status_code == 201
    return response.json()["person"]


@pytest.mark.asyncio
async def test_person_detail_includes_contact_rows(client: AsyncClient, signed_in_admin, test_data):
    person = await create_person(client, **test_data.get_copy("person"))
    base = f"/api/people/{person['id']}"

    first = await client.post(f"{base}/phones", json={"number": "555-0101", "is_primary": True})
    second = await client.post(f"{base}/phones", json={"number": "555-0202", "is_primary": True})
    email = await client.post(f"{base}/emails", json={"address": "ruth@home.org"})
    address = await client.post(f"{base}/addresses", json={"street": "1 Field Rd", "city": "Bethlehem"})
    contact = await client.post(f"{base}/emergency-contacts", json={"name": "Naomi", "phone": "555-0303"})
    note = await client.post(f"{base}/notes", json={"content": "New member class", "is_private": True})

    assert {r.status_code for r in (first, second, email, address, contact, note)} == {201}

    details = (await client.get(base)).json()["person"]
    phones = {p["number"]: p["is_primary"] for p in details["phones"]}
    assert phones == {"555-0101": False, "555-0202": True}
    assert [e["address"] for e in details["emails"]] == ["ruth@home.org"]
    assert details["addresses"][0]["city"] == "Bethlehem"
    assert details["emergency_contacts"][0]["name"] == "Naomi"
    assert details["person_notes"][0]["author_id"] == str(signed_in_admin.id)

    removed = await client.delete(f"{base}/phones/{first.json()['phone']['id']}")
    assert removed.status_code == 200
    assert len((await client.get(base)).json()["person"]["phones"]) == 1


@pytest.mark.asyncio
async def test_search_and_status_filters(client: AsyncClient, signed_in_admin):
    await create_person(client, first_name="Ruth", last_name="Moab")
    await create_person(client, first_name="Naomi", last_name="Bethlehem", status="inactive")
    await create_person(client, first_name="Boaz", last_name="Bethlehem")

    by_name = await client.get("/api/people", params={"search": "bethlehem"})
    inactive = await client.get("/api/people", params={"status": "inactive"})

    assert by_name.json()["total"] == 2
    assert {p["first_name"] for p in by_name.json()["people"]} == {"Naomi", "Boaz"}
    assert [p["first_name"] for p in inactive.json()["people"]] == ["Naomi"]


@pytest.mark.asyncio
async def test_patch_cannot_null_required_fields(client: AsyncClient, signed_in_admin):
    person = await create_person(client, first_name="Ruth", last_name="Moab")

    response = await client.patch(f"/api/people/{person['id']}", json={"last_name": None})

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "last_name"


@pytest.mark.asyncio
async def test_merge_moves_everything_to_target(client: AsyncClient, signed_in_admin, db_session):
    """Merge

    Given two records of the same person, each with phones, tags and a group
    When I merge source into target
    Then every phone, tag and group membership of the source belongs to the target
    And duplicate tags are not doubled
    And blank target fields are filled from the source
    And the source is gone and one merged audit entry exists
    """
    source = await create_person(client, first_name="Jon", last_name="Smith", phone="555-0100")
    target = await create_person(client, first_name="Jonathan", last_name="Smith")

    await client.post(f"/api/people/{source['id']}/phones", json={"number": "555-1111"})
    await client.post(f"/api/people/{target['id']}/phones", json={"number": "555-2222"})

    choir = (await client.post("/api/tags", json={"name": "Choir"})).json()["tag"]
    greeter = (await client.post("/api/tags", json={"name": "Greeter"})).json()["tag"]
    for person in (source, target):
        await client.post(f"/api/people/{person['id']}/tags", json={"tag_id": choir["id"]})
    await client.post(f"/api/people/{source['id']}/tags", json={"tag_id": greeter["id"]})

    group = (await client.post("/api/groups", json={"name": "Men's Breakfast"})).json()["group"]
    await client.post(f"/api/groups/{group['id']}/members", json={"person_id": source["id"]})

    response = await client.post(
        "/api/people/merge", json={"source_id": source["id"], "target_id": target["id"]}
    )

    assert response.status_code == 200
    merged = response.json()["person"]
    assert merged["phone"] == "555-0100"
    assert merged["merged_from"] == [source["id"]]

    assert (await client.get(f"/api/people/{source['id']}")).status_code == 404

    details = (await client.get(f"/api/people/{target['id']}")).json()["person"]
    assert {p["number"] for p in details["phones"]} == {"555-1111", "555-2222"}
    assert sorted(t["name"] for t in details["tags"]) == ["Choir", "Greeter"]
    assert [m["group_id"] for m in details["group_memberships"]] == [group["id"]]

    orphans = (await db_session.exec(select(PersonPhone).where(PersonPhone.person_id == UUID(source["id"])))).all()
    assert orphans == []
    merges = (await db_session.exec(select(AuditLog).where(AuditLog.action == AuditAction.merged))).all()
    assert len(merges) == 1


@pytest.mark.asyncio
async def test_csv_import_reports_row_errors(client: AsyncClient, signed_in_admin, db_session, test_data):
    response = await client.post(
        "/api/people/import",
        files=test_data.csv_upload("people_csv"),
    )

    assert response.status_code == 200
    summary = response.json()
    assert summary["imported"] == 2
    assert summary["errored"] == 1
    assert summary["errors"][0]["row"] == 3

    people = (await db_session.exec(select(Person))).all()
    assert {p.first_name for p in people} == {"Ruth", "Naomi"}

    tags = (await client.get("/api/tags")).json()["tags"]
    assert [t["name"] for t in tags] == ["Choir"]


@pytest.mark.asyncio
async def test_csv_export_round_trips_through_import(client: AsyncClient, signed_in_admin, test_data):
    await client.post(
        "/api/people/import",
        files=test_data.csv_upload("people_csv"),
    )

    response = await client.get("/api/people/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]
    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert [(r["firstName"], r["status"]) for r in rows] == [("Naomi", "inactive"), ("Ruth", "active")]
    assert json.loads(rows[1]["tags"]) == ["Choir"]


@pytest.mark.asyncio
async def test_custom_field_values_are_typed(client: AsyncClient, signed_in_admin):
    person = await create_person(client, first_name="Ruth", last_name="Moab")
    field = await client.post(
        "/api/custom-fields",
        json={"name": "Shirt size", "field_type": "select", "options": ["S", "M", "L"]},
    )
    field_id = field.json()["custom_field"]["id"]
    path = f"/api/people/{person['id']}/custom-fields/{field_id}"

    rejected = await client.put(path, json={"value": "XL"})
    accepted = await client.put(path, json={"value": "M"})

    assert rejected.status_code == 400
    assert rejected.json()["code"] == "VALIDATION_FAILED"
    assert accepted.status_code == 200
    details = (await client.get(f"/api/people/{person['id']}")).json()["person"]
    assert details["custom_fields"] == [{"field_id": field_id, "name": "Shirt size", "value": "M"}]


@pytest.mark.asyncio
async def test_delete_person_requires_delete_permission(
    client: AsyncClient, organization, create_user, sign_in, signed_in_admin
):
    person = await create_person(client, first_name="Ruth", last_name="Moab")
    leader = await create_user(organization, Role.leader)
    await sign_in(leader)

    response = await client.delete(f"/api/people/{person['id']}")

    assert response.status_code == 403
