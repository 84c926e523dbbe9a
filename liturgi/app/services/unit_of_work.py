from abc import ABC, abstractmethod
from uuid import UUID

from liturgi.app.repositories.form_repository import IFormRepository
from liturgi.app.repositories.invite_repository import IInviteRepository
from liturgi.app.repositories.organization_repository import IOrganizationRepository
from liturgi.app.repositories.scoped_repository import (
    IAuditLogRepository,
    IPersonRepository,
    IScopedRepository,
    ISongRepository,
)
from liturgi.app.repositories.session_repository import ISessionRepository
from liturgi.app.repositories.token_repository import (
    IEmailVerificationRepository,
    IPasswordResetRepository,
)
from liturgi.app.repositories.user_repository import IUserRepository


class TenantScope(ABC):
    """
    Repositories bound to one organization.

    Obtained from UnitOfWork.scoped(org_id); shares the unit of work's
    transaction.
    """

    org_id: UUID

    # Administration
    users: IScopedRepository
    invites: IScopedRepository
    audit_logs: IAuditLogRepository
    login_history: IScopedRepository

    # People directory
    people: IPersonRepository
    person_phones: IScopedRepository
    person_emails: IScopedRepository
    person_addresses: IScopedRepository
    emergency_contacts: IScopedRepository
    person_notes: IScopedRepository
    households: IScopedRepository
    tags: IScopedRepository
    tag_categories: IScopedRepository
    person_tags: IScopedRepository
    custom_fields: IScopedRepository
    custom_field_values: IScopedRepository
    attendance: IScopedRepository

    # Groups
    groups: IScopedRepository
    group_memberships: IScopedRepository
    group_meetings: IScopedRepository
    meeting_attendance: IScopedRepository

    # Services
    service_plans: IScopedRepository
    service_items: IScopedRepository
    service_assignments: IScopedRepository
    service_templates: IScopedRepository
    songs: ISongRepository
    arrangements: IScopedRepository

    # Forms & workflows
    forms: IScopedRepository
    form_submissions: IScopedRepository
    workflows: IScopedRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    organizations: IOrganizationRepository
    users: IUserRepository
    sessions: ISessionRepository
    invites: IInviteRepository
    password_resets: IPasswordResetRepository
    email_verifications: IEmailVerificationRepository
    forms: IFormRepository

    @abstractmethod
    def scoped(self, org_id: UUID) -> TenantScope:
        """Repositories constrained to org_id, inside this transaction"""
        pass

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
