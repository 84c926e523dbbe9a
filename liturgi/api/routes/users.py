from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from liturgi.api.error import unwrap
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.users import ChangeRoleUseCase, ListUsersUseCase
from liturgi.depends import get_unit_of_work, require_permission
from liturgi.domain.entities import Role, User
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("")
async def list_users(
    actor: User = Depends(require_permission(Permission.users_manage)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    users = unwrap(await ListUsersUseCase(uow).execute(actor))
    return {"users": [u.model_dump(mode="json") for u in users]}


class ChangeRoleRequest(BaseModel):
    role: Role


@router.patch("/{user_id}/role")
async def change_role(
    user_id: UUID,
    request: ChangeRoleRequest,
    actor: User = Depends(require_permission(Permission.users_manage)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change Role

    Raises:
        - 400: VALIDATION_FAILED when demoting the last admin
        - 404: NOT_FOUND for unknown users and users of other organizations
    """
    user = unwrap(await ChangeRoleUseCase(uow).execute(actor, user_id, request.role))
    return {"user": user.model_dump(mode="json")}
