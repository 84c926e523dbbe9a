"""
Person Use Cases

CRUD over the people directory.
"""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from liturgi.app.services.unit_of_work import TenantScope, UnitOfWork
from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    UpdateEntityUseCase,
    not_found,
)
from liturgi.domain.entities import Person, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Result, Return

# Rows owned by a person; removed with it, reassigned by a merge
PERSON_OWNED_REPOSITORIES = (
    "person_phones",
    "person_emails",
    "person_addresses",
    "emergency_contacts",
    "person_notes",
    "person_tags",
    "custom_field_values",
    "group_memberships",
    "meeting_attendance",
    "service_assignments",
    "attendance",
)


PERSON_REFERENCES = {"household_id": ("households", "Household")}


class CreatePersonUseCase(CreateEntityUseCase):
    """
    Business Rules:
    - Counted against the people plan limit
    """

    model = Person
    repository = "people"
    entity_name = "person"
    plan_resource = "people"
    references = PERSON_REFERENCES


class UpdatePersonUseCase(UpdateEntityUseCase):
    model = Person
    repository = "people"
    entity_name = "person"
    references = PERSON_REFERENCES


async def remove_person_rows(scope: TenantScope, person_id: UUID) -> None:
    """Delete every row a person owns; form submissions are kept unlinked."""
    for name in PERSON_OWNED_REPOSITORIES:
        await getattr(scope, name).delete_where(person_id=person_id)
    await scope.form_submissions.update_where({"person_id": None}, person_id=person_id)


class DeletePersonUseCase(DeleteEntityUseCase):
    """Deletes the person with every row it owns; form submissions are kept unlinked."""

    model = Person
    repository = "people"
    entity_name = "person"

    async def before_delete(self, scope: TenantScope, entity: Person) -> None:
        await remove_person_rows(scope, entity.id)


class GetPersonUseCase:
    """Person with contact rows, tags, custom field values and group memberships"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, person_id: UUID) -> Result[Dict[str, Any]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            person = await scope.people.get(person_id)
            if person is None:
                return Return.err(not_found("Person"))

            def dump(rows) -> List[Dict[str, Any]]:
                return [row.model_dump(mode="json") for row in rows]

            notes = [
                note
                for note in await scope.person_notes.list(
                    order_by="-created_at", person_id=person_id
                )
                if not note.is_private or note.author_id == actor.id
            ]

            tag_ids = {pt.tag_id for pt in await scope.person_tags.list(person_id=person_id)}
            tags = [tag for tag in await scope.tags.list(order_by="name") if tag.id in tag_ids]

            fields = {f.id: f for f in await scope.custom_fields.list()}
            custom_fields = [
                {
                    "field_id": str(value.field_id),
                    "name": fields[value.field_id].name if value.field_id in fields else None,
                    "value": value.value,
                }
                for value in await scope.custom_field_values.list(person_id=person_id)
            ]

            details = person.model_dump(mode="json")
            details.update(
                phones=dump(await scope.person_phones.list(person_id=person_id)),
                emails=dump(await scope.person_emails.list(person_id=person_id)),
                addresses=dump(await scope.person_addresses.list(person_id=person_id)),
                emergency_contacts=dump(
                    await scope.emergency_contacts.list(person_id=person_id)
                ),
                person_notes=dump(notes),
                tags=dump(tags),
                custom_fields=custom_fields,
                group_memberships=dump(
                    await scope.group_memberships.list(person_id=person_id)
                ),
            )
            return Return.ok(details)


class ListPeopleUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        actor: User,
        search: Optional[str] = None,
        status: Optional[str] = None,
        tag_id: Optional[UUID] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Result[Tuple[List[Person], int]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            people, total = await scope.people.search(
                query=search, status=status, tag_id=tag_id, limit=limit, offset=offset
            )
            return Return.ok((people, total))
