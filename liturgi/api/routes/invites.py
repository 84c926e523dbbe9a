from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr

from liturgi.api.error import unwrap
from liturgi.app.services.mailer import Mailer
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.invites import (
    CreateInviteUseCase,
    GetInviteByCodeUseCase,
    ListInvitesUseCase,
    RevokeInviteUseCase,
)
from liturgi.depends import get_mailer, get_unit_of_work, require_permission
from liturgi.domain.entities import Role, User
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/invites", tags=["Invites"])


@router.get("")
async def list_invites(
    actor: User = Depends(require_permission(Permission.users_manage)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    invites = unwrap(await ListInvitesUseCase(uow).execute(actor))
    return {"invites": [i.model_dump(mode="json") for i in invites]}


class CreateInviteRequest(BaseModel):
    email: EmailStr
    role: Role = Role.member


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_invite(
    request: CreateInviteRequest,
    actor: User = Depends(require_permission(Permission.users_manage)),
    uow: UnitOfWork = Depends(get_unit_of_work),
    mailer: Mailer = Depends(get_mailer),
):
    """
    Create Invite

    Raises:
        - 400: CONFLICT when the email already belongs to a user of the
          organization or has a pending invite
    """
    invite = unwrap(
        await CreateInviteUseCase(uow, mailer).execute(actor, request.email, request.role)
    )
    return {"invite": invite.model_dump(mode="json")}


@router.get("/{code}")
async def get_invite(code: str, uow: UnitOfWork = Depends(get_unit_of_work)):
    """Public: lets the registration page show who is being invited"""
    invite = unwrap(await GetInviteByCodeUseCase(uow).execute(code))
    return {"invite": invite.model_dump(mode="json")}


@router.delete("/{invite_id}")
async def revoke_invite(
    invite_id: UUID,
    actor: User = Depends(require_permission(Permission.users_manage)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await RevokeInviteUseCase(uow).execute(actor, invite_id))
    return {"success": True}
