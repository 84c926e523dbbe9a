"""
Service Template Use Cases

Items arrive as TemplateItem models and are stored as plain dicts.
"""

from typing import Any, Dict, Optional

from liturgi.app.services.unit_of_work import TenantScope
from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    GetEntityUseCase,
    ListEntitiesUseCase,
    UpdateEntityUseCase,
)
from liturgi.domain.entities import ServiceTemplate, TemplateItem, User
from liturgi.libs.result import Error


def _store_items(data: Dict[str, Any]) -> None:
    if data.get("items") is None:
        return
    data["items"] = [
        TemplateItem.model_validate(item).model_dump(mode="json") for item in data["items"]
    ]


async def _clear_default(scope: TenantScope, keep_id=None) -> None:
    for template in await scope.service_templates.list(is_default=True):
        if template.id != keep_id:
            template.is_default = False
            await scope.service_templates.update(template)


class CreateTemplateUseCase(CreateEntityUseCase):
    """
    Business Rules:
    - At most one template per organization is the default
    """

    model = ServiceTemplate
    repository = "service_templates"
    entity_name = "service_template"

    async def prepare(
        self, actor: User, scope: TenantScope, data: Dict[str, Any]
    ) -> Optional[Error]:
        _store_items(data)
        if data.get("is_default"):
            await _clear_default(scope)
        return None


class UpdateTemplateUseCase(UpdateEntityUseCase):
    model = ServiceTemplate
    repository = "service_templates"
    entity_name = "service_template"

    async def prepare(
        self, actor: User, scope: TenantScope, entity: ServiceTemplate, changes: Dict[str, Any]
    ) -> Optional[Error]:
        _store_items(changes)
        if changes.get("is_default"):
            await _clear_default(scope, keep_id=entity.id)
        return None


class DeleteTemplateUseCase(DeleteEntityUseCase):
    model = ServiceTemplate
    repository = "service_templates"
    entity_name = "service_template"


class GetTemplateUseCase(GetEntityUseCase):
    model = ServiceTemplate
    repository = "service_templates"
    entity_name = "service_template"


class ListTemplatesUseCase(ListEntitiesUseCase):
    model = ServiceTemplate
    repository = "service_templates"
    entity_name = "service_template"
    order_by = "name"


__all__ = [
    "CreateTemplateUseCase",
    "UpdateTemplateUseCase",
    "DeleteTemplateUseCase",
    "GetTemplateUseCase",
    "ListTemplatesUseCase",
]
