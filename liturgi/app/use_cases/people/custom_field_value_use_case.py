"""
Set Custom Field Value Use Case

Upserts a person's value for one custom field, validated against the field type.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.common import not_found, record_audit, snapshot
from liturgi.domain.entities import (
    AuditAction,
    CustomField,
    CustomFieldType,
    CustomFieldValue,
    User,
)
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Error, Result, Return

BOOLEAN_VALUES = {"true", "false"}


def validate_value(field: CustomField, value: Optional[str]) -> Optional[str]:
    """
    Returns:
        None when value fits the field, otherwise a message
    """
    if value is None or value == "":
        return f"{field.name} is required" if field.required else None

    if field.field_type == CustomFieldType.number:
        try:
            float(value)
        except ValueError:
            return f"{field.name} must be a number"
    elif field.field_type == CustomFieldType.date:
        try:
            date.fromisoformat(value)
        except ValueError:
            return f"{field.name} must be a date (YYYY-MM-DD)"
    elif field.field_type == CustomFieldType.boolean:
        if value.lower() not in BOOLEAN_VALUES:
            return f"{field.name} must be true or false"
    elif field.field_type == CustomFieldType.select:
        if value not in (field.options or []):
            return f"{field.name} must be one of: {', '.join(field.options or [])}"
    return None


class SetCustomFieldValueUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor: User, person_id: UUID, field_id: UUID, value: Optional[str]
    ) -> Result[CustomFieldValue]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))

            if await scope.people.get(person_id) is None:
                return Return.err(not_found("Person"))
            field = await scope.custom_fields.get(field_id)
            if field is None:
                return Return.err(not_found("Custom field"))

            message = validate_value(field, value)
            if message:
                return Return.err(
                    Error(
                        "VALIDATION_FAILED",
                        message,
                        details=[{"field": "value", "message": message}],
                    )
                )

            existing = await scope.custom_field_values.get_by(
                person_id=person_id, field_id=field_id
            )
            if existing is None:
                entity = await scope.custom_field_values.add(
                    CustomFieldValue(person_id=person_id, field_id=field_id, value=value)
                )
                await record_audit(
                    scope, actor.id, AuditAction.created, "custom_field_value", entity.id,
                    new=snapshot(entity),
                )
            else:
                old = snapshot(existing)
                existing.value = value
                entity = await scope.custom_field_values.update(existing)
                await record_audit(
                    scope, actor.id, AuditAction.updated, "custom_field_value", entity.id,
                    old=old, new=snapshot(entity),
                )

            await self.uow.commit()
            return Return.ok(entity)
