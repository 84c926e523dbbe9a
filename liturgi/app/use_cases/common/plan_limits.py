"""
Plan Limit Enforcement

The organization row is locked before counting so that concurrent creates
near the limit serialize instead of jointly exceeding it.
"""

from typing import Optional

from liturgi.app.services.unit_of_work import TenantScope, UnitOfWork
from liturgi.libs.result import Error

RESOURCE_LABELS = {
    "people": "people",
    "groups": "groups",
    "servicePlans": "service plans",
}


async def check_plan_limit(
    uow: UnitOfWork, scope: TenantScope, resource: str, adding: int = 1
) -> Optional[Error]:
    """
    Args:
        resource: "people", "groups" or "servicePlans"
        adding: number of rows about to be created

    Returns:
        PLAN_LIMIT_REACHED error, or None when the create may proceed
    """
    organization = await uow.organizations.get_for_update(scope.org_id)
    if organization is None:
        return Error("NOT_FOUND", "Organization not found")

    limit = organization.limits().limit_for(resource)
    repository = {
        "people": scope.people,
        "groups": scope.groups,
        "servicePlans": scope.service_plans,
    }[resource]
    current = await repository.count()

    if current + adding > limit:
        return Error(
            "PLAN_LIMIT_REACHED",
            f"Plan limit reached: maximum {limit} {RESOURCE_LABELS[resource]}",
        )
    return None
