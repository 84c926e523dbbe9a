from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar
from uuid import UUID

from liturgi.domain.entities import AuditLog, Person, Song

T = TypeVar("T")


class IScopedRepository(ABC, Generic[T]):
    """
    Repository bound to one organization - application layer

    Every read, update and delete is constrained to the bound org_id and every
    insert is stamped with it. There is no way to pass a different org.
    """

    org_id: UUID

    @abstractmethod
    async def get(self, entity_id: UUID) -> Optional[T]:
        """Get entity by ID within the organization"""
        pass

    @abstractmethod
    async def get_by(self, **filters: Any) -> Optional[T]:
        """Get the first entity matching equality filters"""
        pass

    @abstractmethod
    async def list(
        self,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        **filters: Any,
    ) -> List[T]:
        """List entities matching equality filters. Prefix order_by with '-' for DESC."""
        pass

    @abstractmethod
    async def count(self, **filters: Any) -> int:
        pass

    @abstractmethod
    async def add(self, entity: T) -> T:
        """Insert entity, stamping org_id"""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        pass

    @abstractmethod
    async def delete(self, entity: T) -> None:
        pass

    @abstractmethod
    async def update_where(self, values: Dict[str, Any], **filters: Any) -> int:
        """Bulk update rows matching filters. Returns affected row count."""
        pass

    @abstractmethod
    async def delete_where(self, **filters: Any) -> int:
        """Bulk delete rows matching filters. Returns affected row count."""
        pass


class IPersonRepository(IScopedRepository[Person]):
    @abstractmethod
    async def search(
        self,
        query: Optional[str] = None,
        status: Optional[str] = None,
        tag_id: Optional[UUID] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Person], int]:
        """Search by name/email with optional status and tag filters. Returns (page, total)."""
        pass


class ISongRepository(IScopedRepository[Song]):
    @abstractmethod
    async def search(self, query: Optional[str] = None) -> List[Song]:
        """Case-insensitive match on title or artist"""
        pass


class IAuditLogRepository(IScopedRepository[AuditLog]):
    @abstractmethod
    async def get_page(
        self,
        limit: int = 50,
        before: Optional[datetime] = None,
        entity: Optional[str] = None,
    ) -> Tuple[List[AuditLog], bool]:
        """Newest first. Returns (page, has_more)."""
        pass
