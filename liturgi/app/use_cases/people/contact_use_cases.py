"""
Person Contact Use Cases

Phones, emails, addresses, emergency contacts and notes hang off a person.
Every create verifies the person belongs to the caller's organization.
"""

from typing import Any, Dict, Optional

from liturgi.app.services.unit_of_work import TenantScope
from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
)
from liturgi.domain.entities import (
    EmergencyContact,
    PersonAddress,
    PersonEmail,
    PersonNote,
    PersonPhone,
    User,
)
from liturgi.libs.result import Error

PERSON_REFERENCE = {"person_id": ("people", "Person")}


class _PrimaryContactMixin:
    """Setting is_primary clears the flag on the person's other rows of the same kind"""

    async def prepare(
        self, actor: User, scope: TenantScope, data: Dict[str, Any]
    ) -> Optional[Error]:
        if data.get("is_primary"):
            await getattr(scope, self.repository).update_where(
                {"is_primary": False}, person_id=data["person_id"]
            )
        return None


class CreatePersonPhoneUseCase(_PrimaryContactMixin, CreateEntityUseCase):
    model = PersonPhone
    repository = "person_phones"
    entity_name = "person_phone"
    references = PERSON_REFERENCE


class DeletePersonPhoneUseCase(DeleteEntityUseCase):
    model = PersonPhone
    repository = "person_phones"
    entity_name = "person_phone"


class CreatePersonEmailUseCase(_PrimaryContactMixin, CreateEntityUseCase):
    model = PersonEmail
    repository = "person_emails"
    entity_name = "person_email"
    references = PERSON_REFERENCE


class DeletePersonEmailUseCase(DeleteEntityUseCase):
    model = PersonEmail
    repository = "person_emails"
    entity_name = "person_email"


class CreatePersonAddressUseCase(_PrimaryContactMixin, CreateEntityUseCase):
    model = PersonAddress
    repository = "person_addresses"
    entity_name = "person_address"
    references = PERSON_REFERENCE


class DeletePersonAddressUseCase(DeleteEntityUseCase):
    model = PersonAddress
    repository = "person_addresses"
    entity_name = "person_address"


class CreateEmergencyContactUseCase(CreateEntityUseCase):
    model = EmergencyContact
    repository = "emergency_contacts"
    entity_name = "emergency_contact"
    references = PERSON_REFERENCE


class DeleteEmergencyContactUseCase(DeleteEntityUseCase):
    model = EmergencyContact
    repository = "emergency_contacts"
    entity_name = "emergency_contact"


class CreatePersonNoteUseCase(CreateEntityUseCase):
    model = PersonNote
    repository = "person_notes"
    entity_name = "person_note"
    references = PERSON_REFERENCE

    async def prepare(
        self, actor: User, scope: TenantScope, data: Dict[str, Any]
    ) -> Optional[Error]:
        data["author_id"] = actor.id
        return None


class DeletePersonNoteUseCase(DeleteEntityUseCase):
    model = PersonNote
    repository = "person_notes"
    entity_name = "person_note"
