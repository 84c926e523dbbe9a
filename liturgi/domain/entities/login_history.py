"""
LoginHistory Entity
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from liturgi.domain.base import utcnow


class LoginHistory(SQLModel, table=True):
    """
    LoginHistory entity - one sign-in attempt against a known account.

    Business Rules:
    - Written for successful and failed attempts; attempts against unknown
      emails have no account to attach to and are not recorded
    - fail_reason is one of LoginFailReason when success is false
    """

    __tablename__ = "login_history"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    ip_address: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=500)
    success: bool = Field(default=True)
    fail_reason: Optional[str] = Field(default=None, max_length=50)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_login_history_user_created", "user_id", "created_at"),)
