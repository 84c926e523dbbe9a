"""
People CSV Format

Header: firstName,lastName,email,phone,tags,notes,status
tags is a JSON array of tag names encoded as a string inside the cell.
"""

import json
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from liturgi.domain.entities import PersonStatus

CSV_COLUMNS = ["firstName", "lastName", "email", "phone", "tags", "notes", "status"]
REQUIRED_COLUMNS = {"firstName", "lastName"}


class PersonCsvRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    first_name: str = Field(alias="firstName", min_length=1, max_length=100)
    last_name: str = Field(alias="lastName", min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    status: PersonStatus = PersonStatus.active

    @field_validator("email", "phone", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return []
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                raise ValueError("tags must be a JSON array of strings")
        if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
            raise ValueError("tags must be a JSON array of strings")
        return [t.strip() for t in value if t.strip()]

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, value):
        if isinstance(value, str) and value.strip().lower() == PersonStatus.inactive.value:
            return PersonStatus.inactive
        return PersonStatus.active
