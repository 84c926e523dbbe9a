from typing import List
from uuid import UUID

from liturgi.app.services.unit_of_work import TenantScope
from liturgi.app.use_cases.common import (
    CreateEntityUseCase,
    DeleteEntityUseCase,
    GetEntityUseCase,
    ListEntitiesUseCase,
    UpdateEntityUseCase,
    not_found,
)
from liturgi.domain.entities import Form, FormSubmission, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Result, Return


class CreateFormUseCase(CreateEntityUseCase):
    model = Form
    repository = "forms"
    entity_name = "form"


class UpdateFormUseCase(UpdateEntityUseCase):
    model = Form
    repository = "forms"
    entity_name = "form"


class DeleteFormUseCase(DeleteEntityUseCase):
    """Submissions are removed together with their form"""

    model = Form
    repository = "forms"
    entity_name = "form"

    async def before_delete(self, scope: TenantScope, entity: Form) -> None:
        await scope.form_submissions.delete_where(form_id=entity.id)


class GetFormUseCase(GetEntityUseCase):
    model = Form
    repository = "forms"
    entity_name = "form"


class ListFormsUseCase(ListEntitiesUseCase):
    model = Form
    repository = "forms"
    entity_name = "form"
    order_by = "-created_at"


class ListFormSubmissionsUseCase:
    def __init__(self, uow):
        self.uow = uow

    async def execute(self, actor: User, form_id: UUID) -> Result[List[FormSubmission]]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            if await scope.forms.get(form_id) is None:
                return Return.err(not_found("Form"))
            submissions = await scope.form_submissions.list(
                order_by="-submitted_at", form_id=form_id
            )
            return Return.ok(submissions)
