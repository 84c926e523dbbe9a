from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from liturgi.api.error import unwrap
from liturgi.api.utils.schemas import non_nullable
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.organization import (
    GetOrganizationSettingsUseCase,
    UpdateOrganizationSettingsUseCase,
)
from liturgi.depends import get_unit_of_work, require_permission
from liturgi.domain.entities import User
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/organization", tags=["Organization"])


@router.get("/settings")
async def get_settings(
    actor: User = Depends(require_permission(Permission.settings_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Organization details, settings and usage against plan limits"""
    settings = unwrap(await GetOrganizationSettingsUseCase(uow).execute(actor))
    return settings.model_dump(mode="json")


class UpdateSettingsRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    logo_url: Optional[str] = Field(default=None, max_length=500)
    timezone: Optional[str] = Field(default=None, min_length=1, max_length=64)
    campus: Optional[str] = Field(default=None, max_length=200)
    settings: Optional[Dict[str, Any]] = None

    _required = non_nullable("name", "timezone")


@router.patch("/settings")
async def update_settings(
    request: UpdateSettingsRequest,
    actor: User = Depends(require_permission(Permission.org_manage)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    organization = unwrap(
        await UpdateOrganizationSettingsUseCase(uow).execute(actor, changes)
    )
    return {"organization": organization.model_dump(mode="json")}
