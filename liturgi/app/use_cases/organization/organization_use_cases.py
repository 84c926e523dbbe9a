from typing import Any, Dict, Optional

from pydantic import BaseModel

from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.auth.dtos import OrganizationDTO
from liturgi.app.use_cases.common import not_found, record_audit, snapshot
from liturgi.domain.entities import AuditAction, User
from liturgi.libs.result import Result, Return


class OrganizationSettings(BaseModel):
    organization: OrganizationDTO
    settings: Optional[Dict[str, Any]] = None
    usage: Dict[str, int]


class GetOrganizationSettingsUseCase:
    """Organization details plus current usage against each plan limit"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User) -> Result[OrganizationSettings]:
        async with self.uow:
            organization = await self.uow.organizations.get_by_id(actor.org_id)
            if organization is None:
                return Return.err(not_found("Organization"))

            scope = self.uow.scoped(organization.id)
            usage = {
                "people": await scope.people.count(),
                "groups": await scope.groups.count(),
                "servicePlans": await scope.service_plans.count(),
            }
            return Return.ok(
                OrganizationSettings(
                    organization=OrganizationDTO.from_entity(organization),
                    settings=organization.settings,
                    usage=usage,
                )
            )


class UpdateOrganizationSettingsUseCase:
    """Plan and plan limits are not editable here."""

    EDITABLE_FIELDS = {"name", "logo_url", "timezone", "campus", "settings"}

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, changes: Dict[str, Any]) -> Result[OrganizationDTO]:
        async with self.uow:
            organization = await self.uow.organizations.get_by_id(actor.org_id)
            if organization is None:
                return Return.err(not_found("Organization"))

            old = snapshot(organization)
            for field, value in changes.items():
                if field in self.EDITABLE_FIELDS:
                    setattr(organization, field, value)
            await self.uow.organizations.update(organization)

            await record_audit(
                self.uow.scoped(organization.id),
                actor.id,
                AuditAction.updated,
                "organization",
                organization.id,
                old=old,
                new=snapshot(organization),
            )
            await self.uow.commit()

        return Return.ok(OrganizationDTO.from_entity(organization))
