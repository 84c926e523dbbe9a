"""
Liturgi Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    AccountStatus,
    AssignmentStatus,
    AuditAction,
    CustomFieldType,
    GroupCategory,
    GroupMemberRole,
    GroupMemberStatus,
    GroupStatus,
    GroupVisibility,
    HouseholdRelation,
    LoginFailReason,
    PersonStatus,
    Role,
    ServiceItemType,
    ServicePlanStatus,
    WorkflowStatus,
)

# Export all entities
from .organization import Organization, PlanLimits
from .user import User
from .session import Session
from .invite import Invite
from .password_reset import PasswordReset
from .email_verification import EmailVerification
from .audit_log import AuditLog
from .login_history import LoginHistory
from .person import (
    MERGEABLE_FIELDS,
    EmergencyContact,
    Person,
    PersonAddress,
    PersonEmail,
    PersonNote,
    PersonPhone,
)
from .household import Household
from .tag import PersonTag, Tag, TagCategory
from .custom_field import CustomField, CustomFieldValue
from .group import Group, GroupMeeting, GroupMembership, MeetingAttendance
from .song import Arrangement, Song
from .service_plan import ServiceAssignment, ServiceItem, ServicePlan
from .service_template import ServiceTemplate, TemplateItem
from .form import Form, FormSubmission
from .workflow import Workflow
from .attendance import AttendanceRecord

__all__ = [
    # Enums
    "AccountStatus",
    "AssignmentStatus",
    "AuditAction",
    "CustomFieldType",
    "GroupCategory",
    "GroupMemberRole",
    "GroupMemberStatus",
    "GroupStatus",
    "GroupVisibility",
    "HouseholdRelation",
    "LoginFailReason",
    "PersonStatus",
    "Role",
    "ServiceItemType",
    "ServicePlanStatus",
    "WorkflowStatus",
    # Boundary entities
    "Organization",
    "PlanLimits",
    "User",
    "Session",
    "Invite",
    "PasswordReset",
    "EmailVerification",
    "AuditLog",
    "LoginHistory",
    # Domain entities
    "MERGEABLE_FIELDS",
    "Person",
    "PersonPhone",
    "PersonEmail",
    "PersonAddress",
    "EmergencyContact",
    "PersonNote",
    "Household",
    "Tag",
    "TagCategory",
    "PersonTag",
    "CustomField",
    "CustomFieldValue",
    "Group",
    "GroupMembership",
    "GroupMeeting",
    "MeetingAttendance",
    "Song",
    "Arrangement",
    "ServicePlan",
    "ServiceItem",
    "ServiceAssignment",
    "ServiceTemplate",
    "TemplateItem",
    "Form",
    "FormSubmission",
    "Workflow",
    "AttendanceRecord",
]
