from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from liturgi.api.error import unwrap
from liturgi.api.utils.schemas import dump, non_nullable
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.households import (
    CreateHouseholdUseCase,
    DeleteHouseholdUseCase,
    GetHouseholdUseCase,
    ListHouseholdsUseCase,
    UpdateHouseholdUseCase,
)
from liturgi.depends import get_unit_of_work, require_permission
from liturgi.domain.entities import User
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/households", tags=["Households"])

read_people = require_permission(Permission.people_read)
write_people = require_permission(Permission.people_write)


class CreateHouseholdRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[EmailStr] = None


class UpdateHouseholdRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[EmailStr] = None

    _required = non_nullable("name")


@router.get("")
async def list_households(
    actor: User = Depends(read_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Households with their members, heads of household first"""
    households = unwrap(await ListHouseholdsUseCase(uow).execute(actor))
    return {"households": households}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_household(
    request: CreateHouseholdRequest,
    actor: User = Depends(write_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    household = unwrap(await CreateHouseholdUseCase(uow).execute(actor, request.model_dump()))
    return {"household": dump(household)}


@router.get("/{household_id}")
async def get_household(
    household_id: UUID,
    actor: User = Depends(read_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    household = unwrap(await GetHouseholdUseCase(uow).execute(actor, household_id))
    return {"household": household}


@router.patch("/{household_id}")
async def update_household(
    household_id: UUID,
    request: UpdateHouseholdRequest,
    actor: User = Depends(write_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    household = unwrap(await UpdateHouseholdUseCase(uow).execute(actor, household_id, changes))
    return {"household": dump(household)}


@router.delete("/{household_id}")
async def delete_household(
    household_id: UUID,
    actor: User = Depends(require_permission(Permission.people_delete)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Members are kept and unlinked from the household"""
    unwrap(await DeleteHouseholdUseCase(uow).execute(actor, household_id))
    return {"success": True}
