"""
Workflow Entity
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, SQLModel

from liturgi.domain.base import utcnow
from .enums import WorkflowStatus


class Workflow(SQLModel, table=True):
    """Workflow entity - a named trigger with an ordered list of steps."""

    __tablename__ = "workflows"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)

    name: str = Field(max_length=200)
    description: Optional[str] = Field(default=None)
    trigger: str = Field(max_length=100)
    steps: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    status: WorkflowStatus = Field(default=WorkflowStatus.active)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
