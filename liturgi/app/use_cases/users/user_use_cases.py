from typing import List
from uuid import UUID

from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.auth.dtos import UserDTO
from liturgi.app.use_cases.common import not_found, record_audit
from liturgi.domain.entities import AccountStatus, AuditAction, Role, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Error, Result, Return


class ListUsersUseCase:
    """Users of the caller's organization, excluding deleted accounts"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User) -> Result[List[UserDTO]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            users = await scope.users.list(order_by="email")
            return Return.ok(
                [
                    UserDTO.from_entity(u)
                    for u in users
                    if u.account_status != AccountStatus.deleted
                ]
            )


class ChangeRoleUseCase:
    """
    Business Rules:
    - Target must belong to the caller's organization
    - The last active admin cannot be demoted
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, user_id: UUID, role: Role) -> Result[UserDTO]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            target = await scope.users.get(user_id)
            if target is None or target.account_status == AccountStatus.deleted:
                return Return.err(not_found("User"))

            if target.role == Role.admin and role != Role.admin:
                if await self.uow.users.count_active_admins(actor.org_id) <= 1:
                    return Return.err(
                        Error("VALIDATION_FAILED", "Cannot remove the last admin")
                    )

            old_role = Role(target.role).value
            target.role = role
            await scope.users.update(target)

            await record_audit(
                scope,
                actor.id,
                AuditAction.updated,
                "user",
                target.id,
                old={"role": old_role},
                new={"role": role.value},
            )
            await self.uow.commit()

        return Return.ok(UserDTO.from_entity(target))
