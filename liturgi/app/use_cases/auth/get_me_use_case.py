from typing import Optional

from pydantic import BaseModel

from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.domain.entities import User
from liturgi.libs.result import Result, Return

from .dtos import OrganizationDTO, UserDTO


class MeResponse(BaseModel):
    user: UserDTO
    organization: Optional[OrganizationDTO] = None


class GetMeUseCase:
    """Signed-in user with their organization"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User) -> Result[MeResponse]:
        async with self.uow:
            organization = await self.uow.organizations.get_by_id(actor.org_id)
            return Return.ok(
                MeResponse(
                    user=UserDTO.from_entity(actor),
                    organization=(
                        OrganizationDTO.from_entity(organization) if organization else None
                    ),
                )
            )
