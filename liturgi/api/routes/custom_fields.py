from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from liturgi.api.error import unwrap
from liturgi.api.utils.schemas import dump, dump_all, non_nullable
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.custom_fields import (
    CreateCustomFieldUseCase,
    DeleteCustomFieldUseCase,
    ListCustomFieldsUseCase,
    UpdateCustomFieldUseCase,
)
from liturgi.depends import get_unit_of_work, require_permission
from liturgi.domain.entities import CustomFieldType, User
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/custom-fields", tags=["Custom Fields"])


class CreateCustomFieldRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    field_type: CustomFieldType = CustomFieldType.text
    options: Optional[List[str]] = None
    required: bool = False


class UpdateCustomFieldRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    field_type: Optional[CustomFieldType] = None
    options: Optional[List[str]] = None
    required: Optional[bool] = None

    _required = non_nullable("name", "field_type", "required")


@router.get("")
async def list_custom_fields(
    actor: User = Depends(require_permission(Permission.people_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    fields = unwrap(await ListCustomFieldsUseCase(uow).execute(actor))
    return {"custom_fields": dump_all(fields)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_custom_field(
    request: CreateCustomFieldRequest,
    actor: User = Depends(require_permission(Permission.settings_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    field = unwrap(await CreateCustomFieldUseCase(uow).execute(actor, request.model_dump()))
    return {"custom_field": dump(field)}


@router.patch("/{field_id}")
async def update_custom_field(
    field_id: UUID,
    request: UpdateCustomFieldRequest,
    actor: User = Depends(require_permission(Permission.settings_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    field = unwrap(await UpdateCustomFieldUseCase(uow).execute(actor, field_id, changes))
    return {"custom_field": dump(field)}


@router.delete("/{field_id}")
async def delete_custom_field(
    field_id: UUID,
    actor: User = Depends(require_permission(Permission.settings_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await DeleteCustomFieldUseCase(uow).execute(actor, field_id))
    return {"success": True}
