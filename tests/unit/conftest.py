from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from liturgi.domain.entities import Organization, Role, User

SCOPED_REPOSITORIES = (
    "users",
    "invites",
    "audit_logs",
    "login_history",
    "people",
    "person_phones",
    "person_emails",
    "person_addresses",
    "emergency_contacts",
    "person_notes",
    "households",
    "tags",
    "tag_categories",
    "person_tags",
    "custom_fields",
    "custom_field_values",
    "attendance",
    "groups",
    "group_memberships",
    "group_meetings",
    "meeting_attendance",
    "service_plans",
    "service_items",
    "service_assignments",
    "service_templates",
    "songs",
    "arrangements",
    "forms",
    "form_submissions",
    "workflows",
)


def scoped_repository():
    """Mock scoped repository; add/update echo the entity back like the real one"""
    repository = MagicMock()
    repository.get = AsyncMock(return_value=None)
    repository.get_by = AsyncMock(return_value=None)
    repository.list = AsyncMock(return_value=[])
    repository.count = AsyncMock(return_value=0)
    repository.add = AsyncMock(side_effect=lambda entity: entity)
    repository.update = AsyncMock(side_effect=lambda entity: entity)
    repository.delete = AsyncMock()
    repository.update_where = AsyncMock(return_value=0)
    repository.delete_where = AsyncMock(return_value=0)
    return repository


@pytest.fixture
def org_id():
    return uuid4()


@pytest.fixture
def mock_scope(org_id):
    scope = MagicMock()
    scope.org_id = org_id
    for name in SCOPED_REPOSITORIES:
        setattr(scope, name, scoped_repository())
    return scope


@pytest.fixture
def organization(org_id):
    return Organization(
        id=org_id,
        name="Grace Church",
        subdomain="grace",
        plan_limits={"people": 100, "groups": 10, "servicePlans": 10},
    )


@pytest.fixture
def mock_uow(mock_scope, organization):
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.scoped = MagicMock(return_value=mock_scope)

    uow.organizations = MagicMock()
    uow.organizations.count = AsyncMock(return_value=1)
    uow.organizations.get_by_id = AsyncMock(return_value=organization)
    uow.organizations.get_for_update = AsyncMock(return_value=organization)
    uow.organizations.create = AsyncMock(side_effect=lambda entity: entity)

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda entity: entity)
    uow.users.update = AsyncMock(side_effect=lambda entity: entity)
    uow.users.count_active_admins = AsyncMock(return_value=1)

    uow.sessions = MagicMock()
    uow.sessions.get_by_token_hash = AsyncMock(return_value=None)
    uow.sessions.create = AsyncMock(side_effect=lambda entity: entity)
    uow.sessions.update = AsyncMock(side_effect=lambda entity: entity)
    uow.sessions.delete = AsyncMock()

    uow.invites = MagicMock()
    uow.invites.get_by_code = AsyncMock(return_value=None)
    uow.invites.update = AsyncMock(side_effect=lambda entity: entity)

    uow.forms = MagicMock()
    uow.forms.get_by_id = AsyncMock(return_value=None)
    return uow


@pytest.fixture
def make_user(org_id):
    def factory(role: Role = Role.admin, **fields) -> User:
        return User(
            id=uuid4(),
            org_id=fields.pop("org_id", org_id),
            email=fields.pop("email", f"{role.value}@grace.church"),
            role=role,
            **fields,
        )

    return factory
