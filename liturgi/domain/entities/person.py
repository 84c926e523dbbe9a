"""
Person Entities

The people directory: a person and the contact rows hanging off it.
"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, Date, DateTime, Field, Index, SQLModel

from liturgi.domain.base import utcnow
from .enums import HouseholdRelation, PersonStatus

# Scalar fields a merge copies from source to target when the target lacks them
MERGEABLE_FIELDS = (
    "middle_name",
    "nickname",
    "email",
    "phone",
    "birth_date",
    "anniversary",
    "gender",
    "photo_url",
    "notes",
    "household_id",
    "household_relation",
)


class Person(SQLModel, table=True):
    """
    Person entity - a member or attendee in the directory.

    Business Rules:
    - Counted against the organization's people plan limit
    - merged_from records the ids of persons folded into this one
    """

    __tablename__ = "people"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    middle_name: Optional[str] = Field(default=None, max_length=100)
    nickname: Optional[str] = Field(default=None, max_length=100)

    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)

    birth_date: Optional[date] = Field(default=None, sa_column=Column(Date))
    anniversary: Optional[date] = Field(default=None, sa_column=Column(Date))
    gender: Optional[str] = Field(default=None, max_length=20)
    photo_url: Optional[str] = Field(default=None, max_length=500)

    household_id: Optional[UUID] = Field(
        default=None, foreign_key="households.id", index=True
    )
    household_relation: Optional[HouseholdRelation] = Field(default=None)

    status: PersonStatus = Field(default=PersonStatus.active)
    notes: Optional[str] = Field(default=None)
    merged_from: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_person_org_name", "org_id", "last_name", "first_name"),
        Index("idx_person_org_status", "org_id", "status"),
    )


class PersonPhone(SQLModel, table=True):
    __tablename__ = "person_phones"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    person_id: UUID = Field(foreign_key="people.id", nullable=False, index=True)

    number: str = Field(max_length=50)
    type: str = Field(default="mobile", max_length=20)
    is_primary: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class PersonEmail(SQLModel, table=True):
    __tablename__ = "person_emails"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    person_id: UUID = Field(foreign_key="people.id", nullable=False, index=True)

    address: str = Field(max_length=255)
    type: str = Field(default="home", max_length=20)
    is_primary: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class PersonAddress(SQLModel, table=True):
    __tablename__ = "person_addresses"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    person_id: UUID = Field(foreign_key="people.id", nullable=False, index=True)

    street: str = Field(max_length=200)
    street2: Optional[str] = Field(default=None, max_length=200)
    city: str = Field(max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    postal_code: Optional[str] = Field(default=None, max_length=20)
    country: Optional[str] = Field(default=None, max_length=100)
    type: str = Field(default="home", max_length=20)
    is_primary: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class EmergencyContact(SQLModel, table=True):
    __tablename__ = "emergency_contacts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    person_id: UUID = Field(foreign_key="people.id", nullable=False, index=True)

    name: str = Field(max_length=200)
    relationship: Optional[str] = Field(default=None, max_length=100)
    phone: str = Field(max_length=50)
    email: Optional[str] = Field(default=None, max_length=255)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class PersonNote(SQLModel, table=True):
    """Pastoral or administrative note. Author is the user who wrote it."""

    __tablename__ = "person_notes"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    person_id: UUID = Field(foreign_key="people.id", nullable=False, index=True)
    author_id: Optional[UUID] = Field(default=None)

    content: str
    is_private: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
