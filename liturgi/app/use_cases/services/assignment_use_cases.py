from typing import Any, Dict, List
from uuid import UUID

from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    UpdateEntityUseCase,
    not_found,
)
from liturgi.domain.entities import AssignmentStatus, ServiceAssignment, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Result, Return


class CreateAssignmentUseCase(CreateEntityUseCase):
    """Plan and person must belong to the caller's organization"""

    model = ServiceAssignment
    repository = "service_assignments"
    entity_name = "service_assignment"
    references = {
        "service_plan_id": ("service_plans", "Service plan"),
        "person_id": ("people", "Person"),
    }
    conflict_message = "This person is already assigned to this role"


class UpdateAssignmentUseCase(UpdateEntityUseCase):
    model = ServiceAssignment
    repository = "service_assignments"
    entity_name = "service_assignment"
    conflict_message = "This person is already assigned to this role"


class DeleteAssignmentUseCase(DeleteEntityUseCase):
    model = ServiceAssignment
    repository = "service_assignments"
    entity_name = "service_assignment"


class CheckAssignmentConflictsUseCase:
    """
    Scheduling conflicts for putting a person on a plan.

    Business Rules:
    - A conflict is another plan on the same calendar day on which the person
      holds an assignment that was not declined
    - The plan being checked is never reported against itself
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor: User, plan_id: UUID, person_id: UUID
    ) -> Result[List[Dict[str, Any]]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            plan = await scope.service_plans.get(plan_id)
            if plan is None:
                return Return.err(not_found("Service plan"))
            if await scope.people.get(person_id) is None:
                return Return.err(not_found("Person"))

            conflicts = []
            for assignment in await scope.service_assignments.list(person_id=person_id):
                if (
                    assignment.service_plan_id == plan_id
                    or assignment.status == AssignmentStatus.declined
                ):
                    continue
                other = await scope.service_plans.get(assignment.service_plan_id)
                if other is None or other.service_date.date() != plan.service_date.date():
                    continue
                conflicts.append(
                    {
                        "type": "assignment",
                        "service_plan_id": str(other.id),
                        "service_date": other.service_date.isoformat(),
                        "role": assignment.role,
                        "message": f"Already assigned to {other.title}",
                    }
                )
            return Return.ok(conflicts)
