"""
AuditLog Entity

Append-only record of every mutation.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from liturgi.domain.base import utcnow
from .enums import AuditAction


class AuditLog(SQLModel, table=True):
    """
    AuditLog entity.

    Business Rules:
    - Immutable (never updated or deleted)
    - diff holds {"new": ...}, {"old": ..., "new": ...} or {"old": ...}
    """

    __tablename__ = "audit_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    user_id: Optional[UUID] = Field(default=None, index=True)

    action: AuditAction = Field(nullable=False)
    entity: str = Field(max_length=100)
    entity_id: Optional[UUID] = Field(default=None, index=True)
    diff: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_log_created_at", "created_at"),
        Index("idx_audit_log_org_entity", "org_id", "entity"),
    )
