"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the auth and account domain.
Entities never leave the use case layer with credential fields attached.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from liturgi.domain.entities import AccountStatus, Organization, Role, Session, User


# ============================================================================
# Response DTOs
# ============================================================================


class UserDTO(BaseModel):
    """Public representation of a user"""

    id: UUID
    org_id: UUID
    email: str
    role: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    account_status: str
    email_verified: bool
    two_factor_enabled: bool
    created_at: datetime
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserDTO":
        return cls(
            id=user.id,
            org_id=user.org_id,
            email=user.email,
            role=Role(user.role).value,
            first_name=user.first_name,
            last_name=user.last_name,
            phone_number=user.phone_number,
            account_status=AccountStatus(user.account_status).value,
            email_verified=user.email_verified,
            two_factor_enabled=user.two_factor_enabled,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )


class OrganizationDTO(BaseModel):
    id: UUID
    name: str
    subdomain: str
    plan: str
    plan_limits: Dict[str, int]
    trial_end_at: Optional[datetime] = None
    logo_url: Optional[str] = None
    timezone: str
    campus: Optional[str] = None

    @classmethod
    def from_entity(cls, organization: Organization) -> "OrganizationDTO":
        return cls(
            id=organization.id,
            name=organization.name,
            subdomain=organization.subdomain,
            plan=organization.plan,
            plan_limits=organization.limits().model_dump(by_alias=True),
            trial_end_at=organization.trial_end_at,
            logo_url=organization.logo_url,
            timezone=organization.timezone,
            campus=organization.campus,
        )


class AuthResult(BaseModel):
    """
    Outcome of a successful login or registration.

    session_token is the raw cookie value; it is never put in a response body.
    """

    user: UserDTO
    organization: Optional[OrganizationDTO] = None
    session_token: str
    expires_at: datetime


class SessionDTO(BaseModel):
    id: UUID
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime
    last_accessed_at: datetime
    expires_at: datetime
    current: bool = False

    @classmethod
    def from_entity(cls, session: Session, current_session_id=None) -> "SessionDTO":
        return cls(
            id=session.id,
            ip_address=session.ip_address,
            user_agent=session.user_agent,
            created_at=session.created_at,
            last_accessed_at=session.last_accessed_at,
            expires_at=session.expires_at,
            current=session.id == current_session_id,
        )


@dataclass
class SessionContext:
    """Resolved caller of an authenticated request"""

    user: User
    session: Session


class MessageResponse(BaseModel):
    message: str


class TwoFactorSetupResponse(BaseModel):
    secret: str
    otpauth_url: str


class BackupCodesResponse(BaseModel):
    backup_codes: List[str]


# ============================================================================
# Commands
# ============================================================================


class RegisterCommand(BaseModel):
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    org_name: Optional[str] = None
    subdomain: Optional[str] = None
    invite_code: Optional[str] = None


class ClientMeta(BaseModel):
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
