"""
Organization Entity

Tenant root. Every domain row belongs to exactly one organization.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field as PydanticField
from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from liturgi.domain.base import utcnow


class PlanLimits(BaseModel):
    """Typed view over the plan_limits JSON document"""

    model_config = ConfigDict(populate_by_name=True)

    people: int = 100
    groups: int = 10
    service_plans: int = PydanticField(default=10, alias="servicePlans")

    def limit_for(self, resource: str) -> int:
        return {
            "people": self.people,
            "groups": self.groups,
            "servicePlans": self.service_plans,
        }[resource]


class Organization(SQLModel, table=True):
    """
    Organization entity - the tenant boundary.

    Business Rules:
    - Created once at signup (bootstrap registration)
    - Never hard-deleted in normal flow
    - plan_limits caps people / groups / service plans
    """

    __tablename__ = "organizations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=200)
    subdomain: str = Field(unique=True, index=True, max_length=63)

    plan: str = Field(default="trial", max_length=50)
    plan_limits: dict = Field(default_factory=dict, sa_column=Column(JSON))
    trial_end_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    logo_url: Optional[str] = Field(default=None, max_length=500)
    timezone: str = Field(default="UTC", max_length=64)
    campus: Optional[str] = Field(default=None, max_length=200)
    settings: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_organization_plan", "plan"),)

    def limits(self) -> PlanLimits:
        return PlanLimits.model_validate(self.plan_limits or {})
