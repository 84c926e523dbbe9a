"""
Domain Errors

Raised (not returned) because they signal programming or security defects
rather than ordinary business outcomes.
"""


class PermissionDenied(Exception):
    def __init__(self, permission: str):
        self.permission = permission
        super().__init__(f"Missing permission: {permission}")


class TenantIsolationError(Exception):
    """A scoped repository was asked to touch a row of another organization."""

    def __init__(self, entity: str, org_id, expected_org_id):
        self.entity = entity
        self.org_id = org_id
        self.expected_org_id = expected_org_id
        super().__init__(
            f"{entity} belongs to organization {org_id}, scope is {expected_org_id}"
        )
