"""
Custom Field Entities

Organization-defined extra fields on people.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, SQLModel, UniqueConstraint

from liturgi.domain.base import utcnow
from .enums import CustomFieldType


class CustomField(SQLModel, table=True):
    """
    CustomField entity - the definition of a field.

    Business Rules:
    - Name is unique within an organization
    - options only apply to select fields
    """

    __tablename__ = "custom_fields"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)

    name: str = Field(max_length=100)
    field_type: CustomFieldType = Field(default=CustomFieldType.text)
    options: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    required: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("org_id", "name", name="uq_custom_field_org_name"),
    )


class CustomFieldValue(SQLModel, table=True):
    """A person's value for one custom field. One row per (person, field)."""

    __tablename__ = "custom_field_values"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    person_id: UUID = Field(foreign_key="people.id", nullable=False, index=True)
    field_id: UUID = Field(foreign_key="custom_fields.id", nullable=False, index=True)

    value: Optional[str] = Field(default=None)

    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("person_id", "field_id", name="uq_custom_field_value"),
    )
