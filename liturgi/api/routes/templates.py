from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from liturgi.api.error import unwrap
from liturgi.api.utils.schemas import dump, dump_all, non_nullable
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.templates import (
    CreateTemplateUseCase,
    DeleteTemplateUseCase,
    GetTemplateUseCase,
    ListTemplatesUseCase,
    UpdateTemplateUseCase,
)
from liturgi.depends import get_unit_of_work, require_permission
from liturgi.domain.entities import TemplateItem, User
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/templates", tags=["Templates"])


class CreateTemplateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    items: List[TemplateItem] = Field(default_factory=list)
    is_default: bool = False


class UpdateTemplateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    items: Optional[List[TemplateItem]] = None
    is_default: Optional[bool] = None

    _required = non_nullable("name", "items", "is_default")


@router.get("")
async def list_templates(
    actor: User = Depends(require_permission(Permission.services_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    templates = unwrap(await ListTemplatesUseCase(uow).execute(actor))
    return {"templates": dump_all(templates)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_template(
    request: CreateTemplateRequest,
    actor: User = Depends(require_permission(Permission.services_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    template = unwrap(await CreateTemplateUseCase(uow).execute(actor, request.model_dump()))
    return {"template": dump(template)}


@router.get("/{template_id}")
async def get_template(
    template_id: UUID,
    actor: User = Depends(require_permission(Permission.services_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    template = unwrap(await GetTemplateUseCase(uow).execute(actor, template_id))
    return {"template": dump(template)}


@router.patch("/{template_id}")
async def update_template(
    template_id: UUID,
    request: UpdateTemplateRequest,
    actor: User = Depends(require_permission(Permission.services_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    template = unwrap(await UpdateTemplateUseCase(uow).execute(actor, template_id, changes))
    return {"template": dump(template)}


@router.delete("/{template_id}")
async def delete_template(
    template_id: UUID,
    actor: User = Depends(require_permission(Permission.services_delete)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await DeleteTemplateUseCase(uow).execute(actor, template_id))
    return {"success": True}
