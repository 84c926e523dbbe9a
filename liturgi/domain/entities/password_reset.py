"""
PasswordReset Entity

Secure password reset tokens.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from liturgi.domain.base import utcnow


class PasswordReset(SQLModel, table=True):
    """
    PasswordReset entity.

    Business Rules:
    - Expires after 1 hour
    - Token is the SHA-256 hash of a secure random string
    - Single-use: used_at is stamped on confirmation
    """

    __tablename__ = "password_resets"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", index=True)
    token_hash: str = Field(unique=True, index=True, max_length=64)
    ip_address: Optional[str] = Field(default=None, max_length=64)

    expires_at: datetime = Field(sa_column=Column(DateTime))
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_password_reset_expires_at", "expires_at"),)
