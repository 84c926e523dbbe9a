"""
Household Entity
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from liturgi.domain.base import utcnow


class Household(SQLModel, table=True):
    """
    Household entity - people living at one address, e.g. a family.

    Business Rules:
    - People join through person.household_id and person.household_relation
    - Deleting a household unlinks its members, it never deletes them
    """

    __tablename__ = "households"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)

    name: str = Field(max_length=200)
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_household_org_name", "org_id", "name"),)
