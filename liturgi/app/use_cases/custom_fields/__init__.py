"""
Custom Field Definition Use Cases
"""

from typing import Any, Dict, Optional

from liturgi.app.services.unit_of_work import TenantScope
from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    ListEntitiesUseCase,
    UpdateEntityUseCase,
)
from liturgi.domain.entities import CustomField, CustomFieldType, User
from liturgi.libs.result import Error

DUPLICATE_FIELD = "A custom field with this name already exists"


def _check_options(field_type, options) -> Optional[Error]:
    if field_type == CustomFieldType.select and not options:
        return Error(
            "VALIDATION_FAILED",
            "Select fields need at least one option",
            details=[{"field": "options", "message": "Required for select fields"}],
        )
    return None


class CreateCustomFieldUseCase(CreateEntityUseCase):
    model = CustomField
    repository = "custom_fields"
    entity_name = "custom_field"
    conflict_message = DUPLICATE_FIELD

    async def prepare(
        self, actor: User, scope: TenantScope, data: Dict[str, Any]
    ) -> Optional[Error]:
        return _check_options(data.get("field_type"), data.get("options"))


class UpdateCustomFieldUseCase(UpdateEntityUseCase):
    model = CustomField
    repository = "custom_fields"
    entity_name = "custom_field"
    conflict_message = DUPLICATE_FIELD

    async def prepare(
        self, actor: User, scope: TenantScope, entity: CustomField, changes: Dict[str, Any]
    ) -> Optional[Error]:
        return _check_options(
            changes.get("field_type", entity.field_type),
            changes.get("options", entity.options),
        )


class DeleteCustomFieldUseCase(DeleteEntityUseCase):
    """Deletes every stored value of the field"""

    model = CustomField
    repository = "custom_fields"
    entity_name = "custom_field"

    async def before_delete(self, scope: TenantScope, entity: CustomField) -> None:
        await scope.custom_field_values.delete_where(field_id=entity.id)


class ListCustomFieldsUseCase(ListEntitiesUseCase):
    model = CustomField
    repository = "custom_fields"
    entity_name = "custom_field"
    order_by = "name"


__all__ = [
    "CreateCustomFieldUseCase",
    "UpdateCustomFieldUseCase",
    "DeleteCustomFieldUseCase",
    "ListCustomFieldsUseCase",
]
