"""
AttendanceRecord Entity
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, Date, DateTime, Field, Index, SQLModel

from liturgi.domain.base import utcnow


class AttendanceRecord(SQLModel, table=True):
    __tablename__ = "attendance_records"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    person_id: UUID = Field(foreign_key="people.id", nullable=False, index=True)
    service_plan_id: Optional[UUID] = Field(default=None, foreign_key="service_plans.id")
    group_id: Optional[UUID] = Field(default=None, foreign_key="groups.id")

    attendance_date: date = Field(sa_column=Column(Date))
    present: bool = Field(default=True)
    notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_attendance_org_date", "org_id", "attendance_date"),)
