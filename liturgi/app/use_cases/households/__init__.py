"""
Household Use Cases
"""

from typing import Any, Dict, List
from uuid import UUID

from liturgi.app.services.unit_of_work import TenantScope, UnitOfWork
from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    UpdateEntityUseCase,
    not_found,
)
from liturgi.domain.entities import Household, HouseholdRelation, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Result, Return

# Heads first, then spouses, children, others and people without a relation
RELATION_ORDER = {
    HouseholdRelation.head: 0,
    HouseholdRelation.spouse: 1,
    HouseholdRelation.child: 2,
    HouseholdRelation.other: 3,
}


def _with_members(household: Household, people) -> Dict[str, Any]:
    members = sorted(
        people,
        key=lambda p: (RELATION_ORDER.get(p.household_relation, 4), p.first_name),
    )
    details = household.model_dump(mode="json")
    details["members"] = [person.model_dump(mode="json") for person in members]
    return details


class CreateHouseholdUseCase(CreateEntityUseCase):
    model = Household
    repository = "households"
    entity_name = "household"


class UpdateHouseholdUseCase(UpdateEntityUseCase):
    model = Household
    repository = "households"
    entity_name = "household"


class DeleteHouseholdUseCase(DeleteEntityUseCase):
    """Members stay in the directory without a household"""

    model = Household
    repository = "households"
    entity_name = "household"

    async def before_delete(self, scope: TenantScope, entity: Household) -> None:
        await scope.people.update_where(
            {"household_id": None, "household_relation": None}, household_id=entity.id
        )


class ListHouseholdsUseCase:
    """Households ordered by name, each with its members"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User) -> Result[List[Dict[str, Any]]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            households = []
            for household in await scope.households.list(order_by="name"):
                people = await scope.people.list(household_id=household.id)
                households.append(_with_members(household, people))
            return Return.ok(households)


class GetHouseholdUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, household_id: UUID) -> Result[Dict[str, Any]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            household = await scope.households.get(household_id)
            if household is None:
                return Return.err(not_found("Household"))
            people = await scope.people.list(household_id=household_id)
            return Return.ok(_with_members(household, people))


__all__ = [
    "CreateHouseholdUseCase",
    "UpdateHouseholdUseCase",
    "DeleteHouseholdUseCase",
    "ListHouseholdsUseCase",
    "GetHouseholdUseCase",
]
