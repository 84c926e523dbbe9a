"""
Service Planning Use Cases
"""

from .assignment_use_cases import (
    CheckAssignmentConflictsUseCase,
    CreateAssignmentUseCase,
    DeleteAssignmentUseCase,
    UpdateAssignmentUseCase,
)
from .item_use_cases import (
    CreateServiceItemUseCase,
    DeleteServiceItemUseCase,
    ReorderServiceItemsUseCase,
    UpdateServiceItemUseCase,
)
from .service_plan_use_cases import (
    CreateServicePlanUseCase,
    CreateTemplateFromPlanUseCase,
    DeleteServicePlanUseCase,
    DuplicateServicePlanUseCase,
    GetServicePlanUseCase,
    ListServicePlansUseCase,
    UpdateServicePlanUseCase,
)

__all__ = [
    "CheckAssignmentConflictsUseCase",
    "CreateAssignmentUseCase",
    "DeleteAssignmentUseCase",
    "UpdateAssignmentUseCase",
    "CreateServiceItemUseCase",
    "DeleteServiceItemUseCase",
    "ReorderServiceItemsUseCase",
    "UpdateServiceItemUseCase",
    "CreateServicePlanUseCase",
    "CreateTemplateFromPlanUseCase",
    "DeleteServicePlanUseCase",
    "DuplicateServicePlanUseCase",
    "GetServicePlanUseCase",
    "ListServicePlansUseCase",
    "UpdateServicePlanUseCase",
]
