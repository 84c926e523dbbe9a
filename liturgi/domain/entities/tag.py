"""
Tag Entities
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel, UniqueConstraint

from liturgi.domain.base import utcnow


class TagCategory(SQLModel, table=True):
    """
    TagCategory entity - groups related tags (e.g. "Ministry", "Life stage").

    Business Rules:
    - Name is unique within an organization
    - Deleting a category leaves its tags uncategorized
    """

    __tablename__ = "tag_categories"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)

    name: str = Field(max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    description: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("org_id", "name", name="uq_tag_category_org_name"),
    )


class Tag(SQLModel, table=True):
    """
    Tag entity - free-form label applied to people.

    Business Rules:
    - Name is unique within an organization
    """

    __tablename__ = "tags"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    category_id: Optional[UUID] = Field(
        default=None, foreign_key="tag_categories.id", index=True
    )

    name: str = Field(max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (UniqueConstraint("org_id", "name", name="uq_tag_org_name"),)


class PersonTag(SQLModel, table=True):
    """Assignment of a tag to a person. One row per (person, tag)."""

    __tablename__ = "person_tags"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    person_id: UUID = Field(foreign_key="people.id", nullable=False, index=True)
    tag_id: UUID = Field(foreign_key="tags.id", nullable=False, index=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("person_id", "tag_id", name="uq_person_tag"),
    )
