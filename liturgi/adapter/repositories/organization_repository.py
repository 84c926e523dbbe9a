from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from liturgi.app.repositories.organization_repository import IOrganizationRepository
from liturgi.domain.base import utcnow
from liturgi.domain.entities import Organization


class OrganizationRepository(IOrganizationRepository):
    """Organization repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def count(self) -> int:
        result = await self.session.exec(select(func.count()).select_from(Organization))
        return result.one()

    async def get_by_id(self, org_id: UUID) -> Optional[Organization]:
        stmt = select(Organization).where(Organization.id == org_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_for_update(self, org_id: UUID) -> Optional[Organization]:
        """Row lock serializes concurrent plan-limited creates for one org"""
        stmt = select(Organization).where(Organization.id == org_id).with_for_update()
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, organization: Organization) -> Organization:
        self.session.add(organization)
        await self.session.flush()
        await self.session.refresh(organization)
        return organization

    async def update(self, organization: Organization) -> Organization:
        organization.updated_at = utcnow()
        self.session.add(organization)
        await self.session.flush()
        await self.session.refresh(organization)
        return organization
