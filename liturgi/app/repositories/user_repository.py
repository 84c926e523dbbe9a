from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from liturgi.domain.entities import User


class IUserRepository(ABC):
    """
    User repository interface - application layer

    Identity lookups that happen before an organization is known
    (login, registration, password reset). Management of users inside an
    organization goes through the tenant scope.
    """

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by (lower-cased) email address"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        pass

    @abstractmethod
    async def count_active_admins(self, org_id: UUID) -> int:
        pass
