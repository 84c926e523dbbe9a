"""
Service Plan Use Cases
"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from liturgi.app.services.unit_of_work import TenantScope, UnitOfWork
from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    ListEntitiesUseCase,
    UpdateEntityUseCase,
    check_plan_limit,
    not_found,
    record_audit,
    snapshot,
)
from liturgi.domain.entities import (
    AuditAction,
    ServiceItem,
    ServicePlan,
    ServicePlanStatus,
    ServiceTemplate,
    TemplateItem,
    User,
)
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Error, Result, Return


class CreateServicePlanUseCase(CreateEntityUseCase):
    """
    Business Rules:
    - Counted against the servicePlans plan limit
    - Optional template_id seeds the plan's items from a template
    """

    model = ServicePlan
    repository = "service_plans"
    entity_name = "service_plan"
    plan_resource = "servicePlans"

    def __init__(self, uow: UnitOfWork):
        super().__init__(uow)
        self._template: Optional[ServiceTemplate] = None

    async def prepare(
        self, actor: User, scope: TenantScope, data: Dict[str, Any]
    ) -> Optional[Error]:
        template_id = data.pop("template_id", None)
        if template_id is None:
            return None
        self._template = await scope.service_templates.get(template_id)
        if self._template is None:
            return not_found("Template")
        return None

    async def after_create(self, scope: TenantScope, entity: ServicePlan) -> None:
        if self._template is None:
            return
        for position, item in enumerate(self._template.typed_items()):
            await scope.service_items.add(
                ServiceItem(
                    service_plan_id=entity.id,
                    type=item.type,
                    title=item.title,
                    duration_sec=item.duration_sec,
                    notes=item.notes,
                    position=position,
                )
            )


class UpdateServicePlanUseCase(UpdateEntityUseCase):
    model = ServicePlan
    repository = "service_plans"
    entity_name = "service_plan"


class DeleteServicePlanUseCase(DeleteEntityUseCase):
    """Items and assignments go with the plan; attendance is kept unlinked"""

    model = ServicePlan
    repository = "service_plans"
    entity_name = "service_plan"

    async def before_delete(self, scope: TenantScope, entity: ServicePlan) -> None:
        await scope.service_items.delete_where(service_plan_id=entity.id)
        await scope.service_assignments.delete_where(service_plan_id=entity.id)
        await scope.attendance.update_where(
            {"service_plan_id": None}, service_plan_id=entity.id
        )


class ListServicePlansUseCase(ListEntitiesUseCase):
    model = ServicePlan
    repository = "service_plans"
    entity_name = "service_plan"
    order_by = "-service_date"


class GetServicePlanUseCase:
    """Plan with ordered items, assignments and total duration in seconds"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, plan_id: UUID) -> Result[Dict[str, Any]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            plan = await scope.service_plans.get(plan_id)
            if plan is None:
                return Return.err(not_found("Service plan"))

            items = await scope.service_items.list(order_by="position", service_plan_id=plan.id)
            assignments = await scope.service_assignments.list(
                order_by="created_at", service_plan_id=plan.id
            )

            details = plan.model_dump(mode="json")
            details.update(
                items=[item.model_dump(mode="json") for item in items],
                assignments=[a.model_dump(mode="json") for a in assignments],
                total_duration=sum(item.duration_sec or 0 for item in items),
            )
            return Return.ok(details)


class DuplicateServicePlanUseCase:
    """
    Business Rules:
    - Copies the plan and its items as a new draft; assignments are not copied
    - Counted against the servicePlans plan limit
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        actor: User,
        plan_id: UUID,
        title: Optional[str] = None,
        service_date: Optional[datetime] = None,
    ) -> Result[ServicePlan]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            source = await scope.service_plans.get(plan_id)
            if source is None:
                return Return.err(not_found("Service plan"))

            error = await check_plan_limit(self.uow, scope, "servicePlans")
            if error:
                return Return.err(error)

            copy = await scope.service_plans.add(
                ServicePlan(
                    title=title or f"{source.title} (copy)",
                    service_date=service_date or source.service_date,
                    campus=source.campus,
                    notes=source.notes,
                    status=ServicePlanStatus.draft,
                )
            )
            for item in await scope.service_items.list(
                order_by="position", service_plan_id=source.id
            ):
                await scope.service_items.add(
                    ServiceItem(
                        service_plan_id=copy.id,
                        type=item.type,
                        title=item.title,
                        position=item.position,
                        duration_sec=item.duration_sec,
                        song_id=item.song_id,
                        notes=item.notes,
                    )
                )

            await record_audit(
                scope, actor.id, AuditAction.created, "service_plan", copy.id,
                new={**snapshot(copy), "duplicated_from": str(source.id)},
            )
            await self.uow.commit()
            return Return.ok(copy)


class CreateTemplateFromPlanUseCase:
    """Saves a plan's current run sheet as a reusable template"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor: User, plan_id: UUID, name: str, description: Optional[str] = None
    ) -> Result[ServiceTemplate]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            plan = await scope.service_plans.get(plan_id)
            if plan is None:
                return Return.err(not_found("Service plan"))

            items = await scope.service_items.list(order_by="position", service_plan_id=plan.id)
            template = await scope.service_templates.add(
                ServiceTemplate(
                    name=name,
                    description=description,
                    items=[
                        TemplateItem(
                            type=item.type,
                            title=item.title,
                            duration_sec=item.duration_sec,
                            notes=item.notes,
                        ).model_dump(mode="json")
                        for item in items
                    ],
                )
            )
            await record_audit(
                scope, actor.id, AuditAction.created, "service_template", template.id,
                new=snapshot(template),
            )
            await self.uow.commit()
            return Return.ok(template)
