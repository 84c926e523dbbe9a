"""
User Entity

A login account. Belongs to exactly one organization.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from liturgi.domain.base import utcnow
from .enums import AccountStatus, Role


class User(SQLModel, table=True):
    """
    User entity.

    Business Rules:
    - Email is stored lower-cased and is unique across the system
    - Password stored as an Argon2id hash
    - Deleted accounts are anonymised and kept until data_retention_until
    - Backup codes are stored as SHA-256 hashes and consumed on use
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    org_id: UUID = Field(foreign_key="organizations.id", nullable=False, index=True)

    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(default="", max_length=255)
    role: Role = Field(default=Role.member)

    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=50)

    account_status: AccountStatus = Field(default=AccountStatus.active)

    email_verified: bool = Field(default=False)
    email_verified_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Two-factor authentication
    two_factor_enabled: bool = Field(default=False)
    two_factor_secret: Optional[str] = Field(default=None, max_length=64)
    two_factor_backup_codes: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    deleted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    data_retention_until: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_user_org_role", "org_id", "role"),
        Index("idx_user_account_status", "account_status"),
    )
