"""
Generic Tenant-Scoped CRUD Use Cases

Concrete use cases subclass these and declare the repository, model and
entity name. Every step runs inside one unit of work:

    scope (org filter) -> referenced rows exist in scope -> plan limit ->
    mutate -> audit -> commit
"""

from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel

from liturgi.app.repositories.scoped_repository import IScopedRepository
from liturgi.app.services.unit_of_work import TenantScope, UnitOfWork
from liturgi.domain.entities import AuditAction, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Error, Result, Return

from .audit import record_audit, snapshot
from .plan_limits import check_plan_limit


def not_found(label: str) -> Error:
    """Identical for missing rows and rows of another organization"""
    return Error("NOT_FOUND", f"{label} not found")


def humanize(entity_name: str) -> str:
    return entity_name.replace("_", " ").capitalize()


async def verify_references(
    scope: TenantScope, references: Dict[str, Tuple[str, str]], data: Dict[str, Any]
) -> Optional[Error]:
    """Every referenced id in data must resolve inside the caller's organization."""
    for field, (repository, label) in references.items():
        value = data.get(field)
        if value is None:
            continue
        if await getattr(scope, repository).get(value) is None:
            return not_found(label)
    return None


class _ScopedUseCase:
    model: Type[SQLModel]
    repository: str
    entity_name: str

    # field -> (scope repository, label) for foreign keys supplied by callers
    references: Dict[str, Tuple[str, str]] = {}

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @property
    def label(self) -> str:
        return humanize(self.entity_name)

    def open_scope(self, actor: User) -> Tuple[TenantScope, IScopedRepository]:
        scope = self.uow.scoped(**get_org_filter(actor))
        return scope, getattr(scope, self.repository)


class CreateEntityUseCase(_ScopedUseCase):
    """
    Create a tenant-scoped entity.

    Business Rules:
    - org_id is always the caller's organization
    - plan_resource, when set, is checked before the insert
    - Unique constraint violations surface as CONFLICT
    """

    plan_resource: Optional[str] = None
    conflict_message = "A record with these values already exists"

    async def prepare(
        self, actor: User, scope: TenantScope, data: Dict[str, Any]
    ) -> Optional[Error]:
        """Hook for entity-specific validation or defaults"""
        return None

    async def after_create(self, scope: TenantScope, entity: SQLModel) -> None:
        """Hook for dependent rows written in the same transaction"""
        return None

    async def execute(self, actor: User, data: Dict[str, Any]) -> Result[SQLModel]:
        """
        Args:
            actor: Authenticated user performing the create
            data: Validated field values

        Returns:
            Result with the created entity, or Error
        """
        async with self.uow:
            scope, repository = self.open_scope(actor)

            error = await verify_references(scope, self.references, data)
            if error:
                return Return.err(error)

            if self.plan_resource:
                error = await check_plan_limit(self.uow, scope, self.plan_resource)
                if error:
                    return Return.err(error)

            error = await self.prepare(actor, scope, data)
            if error:
                return Return.err(error)

            try:
                entity = await repository.add(self.model(**data))
                await self.after_create(scope, entity)
                await record_audit(
                    scope,
                    actor.id,
                    AuditAction.created,
                    self.entity_name,
                    entity.id,
                    new=snapshot(entity),
                )
                await self.uow.commit()
            except IntegrityError:
                return Return.err(Error("CONFLICT", self.conflict_message))

            return Return.ok(entity)


class UpdateEntityUseCase(_ScopedUseCase):
    """
    Patch a tenant-scoped entity with the supplied fields.

    Business Rules:
    - A row of another organization is reported as NOT_FOUND
    - Audit diff carries the old and new snapshots
    """

    conflict_message = "A record with these values already exists"

    async def prepare(
        self, actor: User, scope: TenantScope, entity: SQLModel, changes: Dict[str, Any]
    ) -> Optional[Error]:
        return None

    async def execute(
        self, actor: User, entity_id, changes: Dict[str, Any], **match: Any
    ) -> Result[SQLModel]:
        async with self.uow:
            scope, repository = self.open_scope(actor)

            entity = await repository.get_by(id=entity_id, **match)
            if entity is None:
                return Return.err(not_found(self.label))

            error = await verify_references(scope, self.references, changes)
            if error:
                return Return.err(error)

            error = await self.prepare(actor, scope, entity, changes)
            if error:
                return Return.err(error)

            old = snapshot(entity)
            for field, value in changes.items():
                setattr(entity, field, value)

            try:
                entity = await repository.update(entity)
                await record_audit(
                    scope,
                    actor.id,
                    AuditAction.updated,
                    self.entity_name,
                    entity.id,
                    old=old,
                    new=snapshot(entity),
                )
                await self.uow.commit()
            except IntegrityError:
                return Return.err(Error("CONFLICT", self.conflict_message))

            return Return.ok(entity)


class DeleteEntityUseCase(_ScopedUseCase):
    """Delete a tenant-scoped entity, recording its final snapshot."""

    async def before_delete(self, scope: TenantScope, entity: SQLModel) -> None:
        """Hook for removing dependent rows in the same transaction"""
        return None

    async def after_delete(self, scope: TenantScope, entity: SQLModel) -> None:
        return None

    async def execute(self, actor: User, entity_id, **match: Any) -> Result[None]:
        async with self.uow:
            scope, repository = self.open_scope(actor)

            entity = await repository.get_by(id=entity_id, **match)
            if entity is None:
                return Return.err(not_found(self.label))

            old = snapshot(entity)
            await self.before_delete(scope, entity)
            await repository.delete(entity)
            await self.after_delete(scope, entity)
            await record_audit(
                scope, actor.id, AuditAction.deleted, self.entity_name, entity_id, old=old
            )
            await self.uow.commit()

            return Return.ok(None)


class GetEntityUseCase(_ScopedUseCase):
    async def execute(self, actor: User, entity_id, **match: Any) -> Result[SQLModel]:
        async with self.uow:
            _, repository = self.open_scope(actor)
            entity = await repository.get_by(id=entity_id, **match)
            if entity is None:
                return Return.err(not_found(self.label))
            return Return.ok(entity)


class ListEntitiesUseCase(_ScopedUseCase):
    order_by: Optional[str] = None

    async def execute(self, actor: User, **filters: Any) -> Result[List[SQLModel]]:
        async with self.uow:
            _, repository = self.open_scope(actor)
            entities = await repository.list(order_by=self.order_by, **filters)
            return Return.ok(entities)
