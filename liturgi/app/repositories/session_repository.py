from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from liturgi.domain.entities import Session


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[Session]:
        pass

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> List[Session]:
        """Get all sessions for a user, newest first"""
        pass

    @abstractmethod
    async def create(self, session: Session) -> Session:
        pass

    @abstractmethod
    async def update(self, session: Session) -> Session:
        pass

    @abstractmethod
    async def delete(self, session: Session) -> None:
        pass

    @abstractmethod
    async def delete_by_id_for_user(self, session_id: UUID, user_id: UUID) -> bool:
        """Delete one session owned by user. Returns True if it existed."""
        pass

    @abstractmethod
    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        pass

    @abstractmethod
    async def delete_all_except(self, user_id: UUID, session_id: UUID) -> int:
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        pass
