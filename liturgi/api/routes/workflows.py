from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from liturgi.api.error import unwrap
from liturgi.api.utils.schemas import dump, dump_all, non_nullable
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.workflows import (
    CreateWorkflowUseCase,
    DeleteWorkflowUseCase,
    GetWorkflowUseCase,
    ListWorkflowsUseCase,
    UpdateWorkflowUseCase,
)
from liturgi.depends import get_unit_of_work, require_permission
from liturgi.domain.entities import User, WorkflowStatus
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/workflows", tags=["Workflows"])


class CreateWorkflowRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    trigger: str = Field(..., min_length=1, max_length=100)
    steps: List[dict] = Field(default_factory=list)
    status: WorkflowStatus = WorkflowStatus.active


class UpdateWorkflowRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    trigger: Optional[str] = Field(default=None, min_length=1, max_length=100)
    steps: Optional[List[dict]] = None
    status: Optional[WorkflowStatus] = None

    _required = non_nullable("name", "trigger", "steps", "status")


@router.get("")
async def list_workflows(
    actor: User = Depends(require_permission(Permission.people_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    workflows = unwrap(await ListWorkflowsUseCase(uow).execute(actor))
    return {"workflows": dump_all(workflows)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_workflow(
    request: CreateWorkflowRequest,
    actor: User = Depends(require_permission(Permission.people_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    workflow = unwrap(await CreateWorkflowUseCase(uow).execute(actor, request.model_dump()))
    return {"workflow": dump(workflow)}


@router.get("/{workflow_id}")
async def get_workflow(
    workflow_id: UUID,
    actor: User = Depends(require_permission(Permission.people_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    workflow = unwrap(await GetWorkflowUseCase(uow).execute(actor, workflow_id))
    return {"workflow": dump(workflow)}


@router.patch("/{workflow_id}")
async def update_workflow(
    workflow_id: UUID,
    request: UpdateWorkflowRequest,
    actor: User = Depends(require_permission(Permission.people_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    workflow = unwrap(await UpdateWorkflowUseCase(uow).execute(actor, workflow_id, changes))
    return {"workflow": dump(workflow)}


@router.delete("/{workflow_id}")
async def delete_workflow(
    workflow_id: UUID,
    actor: User = Depends(require_permission(Permission.people_delete)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await DeleteWorkflowUseCase(uow).execute(actor, workflow_id))
    return {"success": True}
