from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from liturgi.domain.entities import Invite


class IInviteRepository(ABC):
    """
    Invite repository interface - application layer

    Lookups by code are global because the invitee has no session yet.
    """

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[Invite]:
        pass

    @abstractmethod
    async def find_pending(
        self, org_id: UUID, email: str, now: datetime
    ) -> Optional[Invite]:
        """Find a non-accepted, non-expired invite for email in org"""
        pass

    @abstractmethod
    async def update(self, invite: Invite) -> Invite:
        pass
