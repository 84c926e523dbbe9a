"""
Service Planning Entities

A service plan is an ordered run sheet of items plus the people serving.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel, UniqueConstraint

from liturgi.domain.base import utcnow
from .enums import AssignmentStatus, ServiceItemType, ServicePlanStatus


class ServicePlan(SQLModel, table=True):
    """
    ServicePlan entity.

    Business Rules:
    - Counted against the organization's servicePlans plan limit
    - Items are ordered by a contiguous 0..N-1 position
    """

    __tablename__ = "service_plans"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)

    title: str = Field(max_length=200)
    service_date: datetime = Field(sa_column=Column(DateTime))
    campus: Optional[str] = Field(default=None, max_length=200)
    status: ServicePlanStatus = Field(default=ServicePlanStatus.draft)
    notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_service_plan_org_date", "org_id", "service_date"),)


class ServiceItem(SQLModel, table=True):
    __tablename__ = "service_items"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    service_plan_id: UUID = Field(
        foreign_key="service_plans.id", nullable=False, index=True
    )

    type: ServiceItemType = Field(default=ServiceItemType.element)
    title: str = Field(max_length=200)
    position: int = Field(default=0)
    duration_sec: Optional[int] = Field(default=None)
    song_id: Optional[UUID] = Field(default=None, foreign_key="songs.id")
    notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_service_item_plan_position", "service_plan_id", "position"),
    )


class ServiceAssignment(SQLModel, table=True):
    """
    ServiceAssignment entity - a person serving in a role on a plan.

    Business Rules:
    - A person holds a given role at most once per plan
    """

    __tablename__ = "service_assignments"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    service_plan_id: UUID = Field(
        foreign_key="service_plans.id", nullable=False, index=True
    )
    person_id: UUID = Field(foreign_key="people.id", nullable=False, index=True)

    role: str = Field(max_length=100)
    status: AssignmentStatus = Field(default=AssignmentStatus.pending)
    notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint(
            "service_plan_id", "person_id", "role", name="uq_service_assignment"
        ),
    )
