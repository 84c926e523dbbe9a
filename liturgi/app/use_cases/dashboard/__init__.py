"""
Dashboard Use Cases
"""

from typing import Any, Dict

from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.domain.base import utcnow
from liturgi.domain.entities import AccountStatus, PersonStatus, User
from liturgi.domain.rbac import Permission, get_org_filter, has_permission
from liturgi.libs.result import Result, Return

UPCOMING_PLANS_COUNTED = 5
RECENT_ACTIVITY_SIZE = 10


class GetDashboardStatsUseCase:
    """
    Headline numbers for the organization's home page.

    Business Rules:
    - Counts are taken inside the caller's organization only
    - upcoming_assignments covers the next UPCOMING_PLANS_COUNTED plans
    - recent_activity (last RECENT_ACTIVITY_SIZE audit entries) is filled
      only for callers allowed to read the audit log
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User) -> Result[Dict[str, Any]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))

            groups = await scope.groups.count()
            members = await scope.group_memberships.count()

            now = utcnow()
            upcoming = [
                plan
                for plan in await scope.service_plans.list(order_by="service_date")
                if plan.service_date >= now
            ]
            upcoming_assignments = 0
            for plan in upcoming[:UPCOMING_PLANS_COUNTED]:
                upcoming_assignments += await scope.service_assignments.count(
                    service_plan_id=plan.id
                )

            recent_activity = []
            if has_permission(actor, Permission.org_manage):
                logs, _ = await scope.audit_logs.get_page(limit=RECENT_ACTIVITY_SIZE)
                recent_activity = [log.model_dump(mode="json") for log in logs]

            return Return.ok(
                {
                    "people": {
                        "total": await scope.people.count(),
                        "active": await scope.people.count(status=PersonStatus.active),
                        "inactive": await scope.people.count(status=PersonStatus.inactive),
                    },
                    "groups": {
                        "total": groups,
                        "total_members": members,
                        "avg_size": round(members / groups, 1) if groups else 0,
                    },
                    "services": {
                        "total": await scope.service_plans.count(),
                        "upcoming": len(upcoming),
                        "upcoming_assignments": upcoming_assignments,
                    },
                    "users": {
                        "total": await scope.users.count(account_status=AccountStatus.active),
                    },
                    "recent_activity": recent_activity,
                }
            )


__all__ = ["GetDashboardStatsUseCase"]
