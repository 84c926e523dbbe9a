"""
Service Item Use Cases

Items of a plan always carry a contiguous 0..N-1 position.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from liturgi.app.services.unit_of_work import TenantScope, UnitOfWork
from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    UpdateEntityUseCase,
    not_found,
    record_audit,
)
from liturgi.domain.entities import AuditAction, ServiceItem, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


def move_item(items: List[ServiceItem], item_id: UUID, new_position: int) -> List[ServiceItem]:
    """Remove the item from its slot and reinsert it at new_position"""
    ordered = list(items)
    index = next(i for i, item in enumerate(ordered) if item.id == item_id)
    ordered.insert(new_position, ordered.pop(index))
    return ordered


async def _renumber(scope: TenantScope, items: List[ServiceItem]) -> None:
    for position, item in enumerate(items):
        if item.position != position:
            item.position = position
            await scope.service_items.update(item)


class CreateServiceItemUseCase(CreateEntityUseCase):
    """New items are appended at the end of the plan"""

    model = ServiceItem
    repository = "service_items"
    entity_name = "service_item"
    references = {
        "service_plan_id": ("service_plans", "Service plan"),
        "song_id": ("songs", "Song"),
    }

    async def prepare(
        self, actor: User, scope: TenantScope, data: Dict[str, Any]
    ) -> Optional[Error]:
        data["position"] = await scope.service_items.count(
            service_plan_id=data["service_plan_id"]
        )
        return None


class UpdateServiceItemUseCase(UpdateEntityUseCase):
    """Position is changed only through reorder"""

    model = ServiceItem
    repository = "service_items"
    entity_name = "service_item"
    references = {"song_id": ("songs", "Song")}


class DeleteServiceItemUseCase(DeleteEntityUseCase):
    """Remaining items are renumbered to close the gap"""

    model = ServiceItem
    repository = "service_items"
    entity_name = "service_item"

    async def after_delete(self, scope: TenantScope, entity: ServiceItem) -> None:
        remaining = await scope.service_items.list(
            order_by="position", service_plan_id=entity.service_plan_id
        )
        await _renumber(scope, remaining)


class ReorderServiceItemsUseCase:
    """
    Business Rules:
    - Plan and item must belong to the caller's organization
    - new_position must lie in 0..N-1
    - Every position of the plan is rewritten in one transaction, so the
      result is always a contiguous 0..N-1 sequence
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor: User, plan_id: UUID, item_id: UUID, new_position: int
    ) -> Result[List[ServiceItem]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))

            if await scope.service_plans.get(plan_id) is None:
                return Return.err(not_found("Service plan"))

            items = await scope.service_items.list(order_by="position", service_plan_id=plan_id)
            if not any(item.id == item_id for item in items):
                return Return.err(not_found("Service item"))

            if not 0 <= new_position < len(items):
                message = f"Position must be between 0 and {len(items) - 1}"
                return Return.err(
                    Error(
                        "VALIDATION_FAILED",
                        message,
                        details=[{"field": "new_position", "message": message}],
                    )
                )

            old_order = [str(item.id) for item in items]
            ordered = move_item(items, item_id, new_position)
            await _renumber(scope, ordered)

            await record_audit(
                scope,
                actor.id,
                AuditAction.updated,
                "service_plan",
                plan_id,
                old={"item_order": old_order},
                new={"item_order": [str(item.id) for item in ordered]},
            )
            await self.uow.commit()

        logger.info(f"Reordered item {item_id} of plan {plan_id} to {new_position}")
        return Return.ok(ordered)
