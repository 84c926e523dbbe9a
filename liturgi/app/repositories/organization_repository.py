from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from liturgi.domain.entities import Organization


class IOrganizationRepository(ABC):
    """Organization repository interface - application layer"""

    @abstractmethod
    async def count(self) -> int:
        """Count all organizations in the system"""
        pass

    @abstractmethod
    async def get_by_id(self, org_id: UUID) -> Optional[Organization]:
        pass

    @abstractmethod
    async def get_for_update(self, org_id: UUID) -> Optional[Organization]:
        """Get organization with a row lock held until the transaction ends"""
        pass

    @abstractmethod
    async def create(self, organization: Organization) -> Organization:
        pass

    @abstractmethod
    async def update(self, organization: Organization) -> Organization:
        pass
