"""
Service Planning Routes

Plans, their ordered items and people assignments.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from liturgi.api.error import unwrap
from liturgi.api.utils.schemas import dump, dump_all, non_nullable
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.services import (
    CheckAssignmentConflictsUseCase,
    CreateAssignmentUseCase,
    CreateServiceItemUseCase,
    CreateServicePlanUseCase,
    CreateTemplateFromPlanUseCase,
    DeleteAssignmentUseCase,
    DeleteServiceItemUseCase,
    DeleteServicePlanUseCase,
    DuplicateServicePlanUseCase,
    GetServicePlanUseCase,
    ListServicePlansUseCase,
    ReorderServiceItemsUseCase,
    UpdateAssignmentUseCase,
    UpdateServiceItemUseCase,
    UpdateServicePlanUseCase,
)
from liturgi.depends import get_unit_of_work, require_permission
from liturgi.domain.entities import (
    AssignmentStatus,
    ServiceItemType,
    ServicePlanStatus,
    User,
)
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/services", tags=["Services"])

read_services = require_permission(Permission.services_read)
write_services = require_permission(Permission.services_write)
delete_services = require_permission(Permission.services_delete)


class CreatePlanRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    service_date: datetime
    campus: Optional[str] = Field(default=None, max_length=200)
    status: ServicePlanStatus = ServicePlanStatus.draft
    notes: Optional[str] = None
    template_id: Optional[UUID] = None


class UpdatePlanRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    service_date: Optional[datetime] = None
    campus: Optional[str] = Field(default=None, max_length=200)
    status: Optional[ServicePlanStatus] = None
    notes: Optional[str] = None

    _required = non_nullable("title", "service_date", "status")


@router.get("")
async def list_plans(
    status: Optional[ServicePlanStatus] = None,
    actor: User = Depends(read_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    filters = {"status": status} if status else {}
    plans = unwrap(await ListServicePlansUseCase(uow).execute(actor, **filters))
    return {"service_plans": dump_all(plans)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_plan(
    request: CreatePlanRequest,
    actor: User = Depends(write_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Service Plan

    With template_id the plan starts with the template's items.

    Raises:
        - 403: PLAN_LIMIT_REACHED when the organization is at its servicePlans limit
        - 404: NOT_FOUND for an unknown template
    """
    plan = unwrap(await CreateServicePlanUseCase(uow).execute(actor, request.model_dump()))
    return {"service_plan": dump(plan)}


@router.get("/{plan_id}")
async def get_plan(
    plan_id: UUID,
    actor: User = Depends(read_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    plan = unwrap(await GetServicePlanUseCase(uow).execute(actor, plan_id))
    return {"service_plan": plan}


@router.patch("/{plan_id}")
async def update_plan(
    plan_id: UUID,
    request: UpdatePlanRequest,
    actor: User = Depends(write_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    plan = unwrap(await UpdateServicePlanUseCase(uow).execute(actor, plan_id, changes))
    return {"service_plan": dump(plan)}


@router.delete("/{plan_id}")
async def delete_plan(
    plan_id: UUID,
    actor: User = Depends(delete_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await DeleteServicePlanUseCase(uow).execute(actor, plan_id))
    return {"success": True}


class DuplicatePlanRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    service_date: Optional[datetime] = None


@router.post("/{plan_id}/duplicate", status_code=status.HTTP_201_CREATED)
async def duplicate_plan(
    plan_id: UUID,
    request: DuplicatePlanRequest,
    actor: User = Depends(write_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    plan = unwrap(
        await DuplicateServicePlanUseCase(uow).execute(
            actor, plan_id, title=request.title, service_date=request.service_date
        )
    )
    return {"service_plan": dump(plan)}


class SaveAsTemplateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None


@router.post("/{plan_id}/template", status_code=status.HTTP_201_CREATED)
async def save_as_template(
    plan_id: UUID,
    request: SaveAsTemplateRequest,
    actor: User = Depends(write_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    template = unwrap(
        await CreateTemplateFromPlanUseCase(uow).execute(
            actor, plan_id, request.name, request.description
        )
    )
    return {"template": dump(template)}


# ============================================================================
# Items
# ============================================================================


class CreateItemRequest(BaseModel):
    type: ServiceItemType = ServiceItemType.element
    title: str = Field(..., min_length=1, max_length=200)
    duration_sec: Optional[int] = Field(default=None, ge=0)
    song_id: Optional[UUID] = None
    notes: Optional[str] = None


class UpdateItemRequest(BaseModel):
    type: Optional[ServiceItemType] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    duration_sec: Optional[int] = Field(default=None, ge=0)
    song_id: Optional[UUID] = None
    notes: Optional[str] = None

    _required = non_nullable("type", "title")


class ReorderRequest(BaseModel):
    item_id: UUID
    new_position: int = Field(..., ge=0)


@router.post("/{plan_id}/items", status_code=status.HTTP_201_CREATED)
async def create_item(
    plan_id: UUID,
    request: CreateItemRequest,
    actor: User = Depends(write_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """New items are appended after the last position"""
    data = {**request.model_dump(), "service_plan_id": plan_id}
    item = unwrap(await CreateServiceItemUseCase(uow).execute(actor, data))
    return {"item": dump(item)}


@router.post("/{plan_id}/items/reorder")
async def reorder_items(
    plan_id: UUID,
    request: ReorderRequest,
    actor: User = Depends(write_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Reorder Items

    Moves one item to new_position and renumbers every item of the plan in
    one transaction.

    Raises:
        - 400: VALIDATION_FAILED when new_position is outside 0..N-1
        - 404: NOT_FOUND for an unknown plan or item
    """
    items = unwrap(
        await ReorderServiceItemsUseCase(uow).execute(
            actor, plan_id, request.item_id, request.new_position
        )
    )
    return {"items": dump_all(items)}


@router.patch("/{plan_id}/items/{item_id}")
async def update_item(
    plan_id: UUID,
    item_id: UUID,
    request: UpdateItemRequest,
    actor: User = Depends(write_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    item = unwrap(
        await UpdateServiceItemUseCase(uow).execute(
            actor, item_id, changes, service_plan_id=plan_id
        )
    )
    return {"item": dump(item)}


@router.delete("/{plan_id}/items/{item_id}")
async def delete_item(
    plan_id: UUID,
    item_id: UUID,
    actor: User = Depends(write_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(
        await DeleteServiceItemUseCase(uow).execute(actor, item_id, service_plan_id=plan_id)
    )
    return {"success": True}


# ============================================================================
# Assignments
# ============================================================================


class CreateAssignmentRequest(BaseModel):
    person_id: UUID
    role: str = Field(..., min_length=1, max_length=100)
    status: AssignmentStatus = AssignmentStatus.pending
    notes: Optional[str] = None


class UpdateAssignmentRequest(BaseModel):
    status: Optional[AssignmentStatus] = None
    notes: Optional[str] = None

    _required = non_nullable("status")


@router.get("/{plan_id}/assignments/conflicts")
async def check_assignment_conflicts(
    plan_id: UUID,
    person_id: UUID = Query(...),
    actor: User = Depends(read_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Assignment Conflicts

    Other plans on the same day where the person is already serving. Call
    before assigning; assigning is not blocked by a conflict.

    Raises:
        - 404: NOT_FOUND for an unknown plan or person
    """
    conflicts = unwrap(
        await CheckAssignmentConflictsUseCase(uow).execute(actor, plan_id, person_id)
    )
    return {"has_conflicts": bool(conflicts), "conflicts": conflicts}


@router.post("/{plan_id}/assignments", status_code=status.HTTP_201_CREATED)
async def create_assignment(
    plan_id: UUID,
    request: CreateAssignmentRequest,
    actor: User = Depends(write_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Raises:
        - 400: CONFLICT when the person already holds this role in the plan
    """
    data = {**request.model_dump(), "service_plan_id": plan_id}
    assignment = unwrap(await CreateAssignmentUseCase(uow).execute(actor, data))
    return {"assignment": dump(assignment)}


@router.patch("/{plan_id}/assignments/{assignment_id}")
async def update_assignment(
    plan_id: UUID,
    assignment_id: UUID,
    request: UpdateAssignmentRequest,
    actor: User = Depends(write_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    assignment = unwrap(
        await UpdateAssignmentUseCase(uow).execute(
            actor, assignment_id, changes, service_plan_id=plan_id
        )
    )
    return {"assignment": dump(assignment)}


@router.delete("/{plan_id}/assignments/{assignment_id}")
async def delete_assignment(
    plan_id: UUID,
    assignment_id: UUID,
    actor: User = Depends(write_services),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(
        await DeleteAssignmentUseCase(uow).execute(
            actor, assignment_id, service_plan_id=plan_id
        )
    )
    return {"success": True}
