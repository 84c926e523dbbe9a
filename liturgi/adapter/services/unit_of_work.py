from uuid import UUID

from sqlmodel.ext.asyncio.session import AsyncSession

from liturgi.adapter.repositories.form_repository import FormRepository
from liturgi.adapter.repositories.invite_repository import InviteRepository
from liturgi.adapter.repositories.organization_repository import OrganizationRepository
from liturgi.adapter.repositories.scoped_repository import (
    AuditLogRepository,
    PersonRepository,
    ScopedRepository,
    SongRepository,
)
from liturgi.adapter.repositories.session_repository import SessionRepository
from liturgi.adapter.repositories.token_repository import (
    EmailVerificationRepository,
    PasswordResetRepository,
)
from liturgi.adapter.repositories.user_repository import UserRepository
from liturgi.app.services.unit_of_work import TenantScope, UnitOfWork
from liturgi.domain.entities import (
    Arrangement,
    AttendanceRecord,
    CustomField,
    CustomFieldValue,
    EmergencyContact,
    Form,
    FormSubmission,
    Group,
    GroupMeeting,
    GroupMembership,
    Household,
    Invite,
    LoginHistory,
    MeetingAttendance,
    PersonAddress,
    PersonEmail,
    PersonNote,
    PersonPhone,
    PersonTag,
    ServiceAssignment,
    ServiceItem,
    ServicePlan,
    ServiceTemplate,
    Tag,
    TagCategory,
    User,
    Workflow,
)


class SqlAlchemyTenantScope(TenantScope):
    """Scoped repositories sharing the unit of work's session"""

    def __init__(self, session: AsyncSession, org_id: UUID):
        self.org_id = org_id

        def repo(model):
            return ScopedRepository(session, org_id, model)

        self.users = repo(User)
        self.invites = repo(Invite)
        self.audit_logs = AuditLogRepository(session, org_id)
        self.login_history = repo(LoginHistory)

        self.people = PersonRepository(session, org_id)
        self.person_phones = repo(PersonPhone)
        self.person_emails = repo(PersonEmail)
        self.person_addresses = repo(PersonAddress)
        self.emergency_contacts = repo(EmergencyContact)
        self.person_notes = repo(PersonNote)
        self.households = repo(Household)
        self.tags = repo(Tag)
        self.tag_categories = repo(TagCategory)
        self.person_tags = repo(PersonTag)
        self.custom_fields = repo(CustomField)
        self.custom_field_values = repo(CustomFieldValue)
        self.attendance = repo(AttendanceRecord)

        self.groups = repo(Group)
        self.group_memberships = repo(GroupMembership)
        self.group_meetings = repo(GroupMeeting)
        self.meeting_attendance = repo(MeetingAttendance)

        self.service_plans = repo(ServicePlan)
        self.service_items = repo(ServiceItem)
        self.service_assignments = repo(ServiceAssignment)
        self.service_templates = repo(ServiceTemplate)
        self.songs = SongRepository(session, org_id)
        self.arrangements = repo(Arrangement)

        self.forms = repo(Form)
        self.form_submissions = repo(FormSubmission)
        self.workflows = repo(Workflow)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.organizations = OrganizationRepository(self.session)
        self.users = UserRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.invites = InviteRepository(self.session)
        self.password_resets = PasswordResetRepository(self.session)
        self.email_verifications = EmailVerificationRepository(self.session)
        self.forms = FormRepository(self.session)
        return self

    async def __aexit__(self, exc_type, *args):
        if exc_type is None:
            # Entities returned by a use case stay readable once the unit of work closes
            self.session.expunge_all()
        await self.rollback()

    def scoped(self, org_id: UUID) -> TenantScope:
        return SqlAlchemyTenantScope(self.session, org_id)

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
