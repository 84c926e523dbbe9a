from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Type
from uuid import UUID

from sqlalchemy import delete, func, or_, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from liturgi.app.repositories.scoped_repository import (
    IAuditLogRepository,
    IPersonRepository,
    IScopedRepository,
    ISongRepository,
    T,
)
from liturgi.domain.base import utcnow
from liturgi.domain.entities import AuditLog, Person, PersonTag, Song
from liturgi.domain.errors import TenantIsolationError


class ScopedRepository(IScopedRepository[T]):
    """Tenant-scoped repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession, org_id: UUID, model: Type[T]):
        self.session = session
        self.org_id = org_id
        self.model = model

    def _where(self, stmt, filters: Dict[str, Any]):
        stmt = stmt.where(self.model.org_id == self.org_id)
        for name, value in filters.items():
            stmt = stmt.where(getattr(self.model, name) == value)
        return stmt

    def _check_owner(self, entity: T) -> None:
        if entity.org_id != self.org_id:
            raise TenantIsolationError(self.model.__name__, entity.org_id, self.org_id)

    async def get(self, entity_id: UUID) -> Optional[T]:
        stmt = self._where(select(self.model), {"id": entity_id})
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by(self, **filters: Any) -> Optional[T]:
        stmt = self._where(select(self.model), filters).limit(1)
        result = await self.session.exec(stmt)
        return result.first()

    async def list(
        self,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        **filters: Any,
    ) -> List[T]:
        stmt = self._where(select(self.model), filters)
        if order_by:
            column = getattr(self.model, order_by.lstrip("-"))
            stmt = stmt.order_by(column.desc() if order_by.startswith("-") else column)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count(self, **filters: Any) -> int:
        stmt = self._where(select(func.count()).select_from(self.model), filters)
        result = await self.session.exec(stmt)
        return result.one()

    async def add(self, entity: T) -> T:
        if getattr(entity, "org_id", None) is None:
            entity.org_id = self.org_id
        self._check_owner(entity)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def update(self, entity: T) -> T:
        self._check_owner(entity)
        if hasattr(entity, "updated_at"):
            entity.updated_at = utcnow()
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity: T) -> None:
        self._check_owner(entity)
        await self.session.delete(entity)
        await self.session.flush()

    async def update_where(self, values: Dict[str, Any], **filters: Any) -> int:
        if "org_id" in values and values["org_id"] != self.org_id:
            raise TenantIsolationError(self.model.__name__, values["org_id"], self.org_id)
        stmt = self._where(update(self.model), filters).values(**values)
        result = await self.session.execute(
            stmt.execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return result.rowcount

    async def delete_where(self, **filters: Any) -> int:
        stmt = self._where(delete(self.model), filters)
        result = await self.session.execute(
            stmt.execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return result.rowcount


class PersonRepository(ScopedRepository[Person], IPersonRepository):
    def __init__(self, session: AsyncSession, org_id: UUID):
        super().__init__(session, org_id, Person)

    async def search(
        self,
        query: Optional[str] = None,
        status: Optional[str] = None,
        tag_id: Optional[UUID] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Person], int]:
        """Search people by name or email"""
        stmt = self._where(select(Person), {})
        if query:
            pattern = f"%{query.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Person.first_name).like(pattern),
                    func.lower(Person.last_name).like(pattern),
                    func.lower(Person.email).like(pattern),
                )
            )
        if status:
            stmt = stmt.where(Person.status == status)
        if tag_id:
            stmt = stmt.where(
                Person.id.in_(
                    select(PersonTag.person_id).where(
                        PersonTag.org_id == self.org_id, PersonTag.tag_id == tag_id
                    )
                )
            )

        total_result = await self.session.exec(
            select(func.count()).select_from(stmt.subquery())
        )
        total = total_result.one()

        stmt = (
            stmt.order_by(Person.last_name, Person.first_name)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all()), total


class SongRepository(ScopedRepository[Song], ISongRepository):
    def __init__(self, session: AsyncSession, org_id: UUID):
        super().__init__(session, org_id, Song)

    async def search(self, query: Optional[str] = None) -> List[Song]:
        stmt = self._where(select(Song), {})
        if query:
            pattern = f"%{query.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Song.title).like(pattern),
                    func.lower(Song.artist).like(pattern),
                )
            )
        result = await self.session.exec(stmt.order_by(Song.title))
        return list(result.all())


class AuditLogRepository(ScopedRepository[AuditLog], IAuditLogRepository):
    """Append-only: update and delete are refused"""

    def __init__(self, session: AsyncSession, org_id: UUID):
        super().__init__(session, org_id, AuditLog)

    async def update(self, entity: AuditLog) -> AuditLog:
        raise NotImplementedError("Audit log entries are immutable")

    async def delete(self, entity: AuditLog) -> None:
        raise NotImplementedError("Audit log entries are immutable")

    async def get_page(
        self,
        limit: int = 50,
        before: Optional[datetime] = None,
        entity: Optional[str] = None,
    ) -> Tuple[List[AuditLog], bool]:
        stmt = self._where(select(AuditLog), {})
        if before is not None:
            stmt = stmt.where(AuditLog.created_at < before)
        if entity:
            stmt = stmt.where(AuditLog.entity == entity)

        # Order by created_at DESC (newest first), fetch one extra to detect more
        stmt = stmt.order_by(AuditLog.created_at.desc()).limit(limit + 1)
        result = await self.session.exec(stmt)
        logs = list(result.all())

        has_more = len(logs) > limit
        return logs[:limit], has_more
