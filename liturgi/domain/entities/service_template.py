"""
ServiceTemplate Entity

Reusable run sheet used to seed new service plans.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field as PydanticField
from sqlmodel import JSON, Column, DateTime, Field, SQLModel

from liturgi.domain.base import utcnow
from .enums import ServiceItemType


class TemplateItem(BaseModel):
    """Typed element of ServiceTemplate.items"""

    type: ServiceItemType
    title: str = PydanticField(min_length=1, max_length=200)
    duration_sec: Optional[int] = PydanticField(default=None, ge=0)
    notes: Optional[str] = None


class ServiceTemplate(SQLModel, table=True):
    __tablename__ = "service_templates"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)

    name: str = Field(max_length=200)
    description: Optional[str] = Field(default=None)
    items: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    is_default: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    def typed_items(self) -> List[TemplateItem]:
        return [TemplateItem.model_validate(item) for item in self.items or []]
