"""
Shared building blocks for tenant-scoped use cases.
"""

from .audit import record_audit, snapshot
from .crud import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    GetEntityUseCase,
    ListEntitiesUseCase,
    UpdateEntityUseCase,
    not_found,
)
from .plan_limits import check_plan_limit

__all__ = [
    "record_audit",
    "snapshot",
    "check_plan_limit",
    "not_found",
    "CreateEntityUseCase",
    "UpdateEntityUseCase",
    "DeleteEntityUseCase",
    "GetEntityUseCase",
    "ListEntitiesUseCase",
]
