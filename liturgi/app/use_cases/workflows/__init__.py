"""
Workflow Use Cases
"""

from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    GetEntityUseCase,
    ListEntitiesUseCase,
    UpdateEntityUseCase,
)
from liturgi.domain.entities import Workflow


class CreateWorkflowUseCase(CreateEntityUseCase):
    model = Workflow
    repository = "workflows"
    entity_name = "workflow"


class UpdateWorkflowUseCase(UpdateEntityUseCase):
    model = Workflow
    repository = "workflows"
    entity_name = "workflow"


class DeleteWorkflowUseCase(DeleteEntityUseCase):
    model = Workflow
    repository = "workflows"
    entity_name = "workflow"


class GetWorkflowUseCase(GetEntityUseCase):
    model = Workflow
    repository = "workflows"
    entity_name = "workflow"


class ListWorkflowsUseCase(ListEntitiesUseCase):
    model = Workflow
    repository = "workflows"
    entity_name = "workflow"
    order_by = "name"


__all__ = [
    "CreateWorkflowUseCase",
    "UpdateWorkflowUseCase",
    "DeleteWorkflowUseCase",
    "GetWorkflowUseCase",
    "ListWorkflowsUseCase",
]
