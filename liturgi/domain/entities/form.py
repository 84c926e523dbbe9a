"""
Form Entities
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, SQLModel

from liturgi.domain.base import utcnow


class Form(SQLModel, table=True):
    """
    Form entity.

    Business Rules:
    - Anonymous submissions are accepted only when the form is public,
      active and does not require auth
    """

    __tablename__ = "forms"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)

    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None)
    fields: List[dict] = Field(default_factory=list, sa_column=Column(JSON))

    is_public: bool = Field(default=False)
    require_auth: bool = Field(default=False)
    allow_anonymous: bool = Field(default=True)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    def accepts_public_submissions(self) -> bool:
        return self.is_public and self.is_active and not self.require_auth


class FormSubmission(SQLModel, table=True):
    """Submission inherits the org_id of its form"""

    __tablename__ = "form_submissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    form_id: UUID = Field(foreign_key="forms.id", nullable=False, index=True)
    person_id: Optional[UUID] = Field(default=None, foreign_key="people.id")

    data: dict = Field(default_factory=dict, sa_column=Column(JSON))

    submitted_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
