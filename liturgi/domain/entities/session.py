"""
Session Entity

Server-side record behind the session cookie.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from liturgi.domain.base import utcnow


class Session(SQLModel, table=True):
    """
    Session entity.

    Business Rules:
    - The cookie carries an opaque token; only its SHA-256 hash is stored
    - Expires after SESSION_TTL_DAYS (7 by default)
    - Deleted on logout, password reset, account deletion or expiry sweep
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)

    token_hash: str = Field(unique=True, index=True, max_length=64)

    ip_address: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=500)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_accessed_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (Index("idx_session_expires_at", "expires_at"),)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at < now
