"""
Submit Form Use Case

A form is submitted either by a signed-in member of its organization or,
when the form accepts public submissions, by anyone holding its id.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.common import not_found, record_audit
from liturgi.domain.entities import AuditAction, Form, FormSubmission, User
from liturgi.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


def validate_submission(form: Form, data: Dict[str, Any]) -> List[dict]:
    """Field-level errors for required fields left empty"""
    errors = []
    for field in form.fields or []:
        name = field.get("name") or field.get("id")
        if not name or not field.get("required"):
            continue
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            label = field.get("label") or name
            errors.append({"field": name, "message": f"{label} is required"})
    return errors


class SubmitFormUseCase:
    """
    Business Rules:
    - Anonymous callers may submit only public, active forms that do not
      require auth; anything else is reported as NOT_FOUND
    - Signed-in callers may submit any active form of their organization;
      only they may link the submission to a person
    - Required fields must be filled
    - The submission is stamped with the form's org_id
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        form_id: UUID,
        data: Dict[str, Any],
        actor: Optional[User] = None,
        person_id: Optional[UUID] = None,
    ) -> Result[FormSubmission]:
        async with self.uow:
            form = await self.uow.forms.get_by_id(form_id)
            if form is None or not form.is_active:
                return Return.err(not_found("Form"))

            if actor is None:
                if not form.accepts_public_submissions():
                    return Return.err(not_found("Form"))
                person_id = None
            elif actor.org_id != form.org_id:
                return Return.err(not_found("Form"))

            errors = validate_submission(form, data)
            if errors:
                return Return.err(
                    Error("VALIDATION_FAILED", "Validation failed", details=errors)
                )

            scope = self.uow.scoped(org_id=form.org_id)
            if person_id is not None and await scope.people.get(person_id) is None:
                return Return.err(not_found("Person"))

            submission = await scope.form_submissions.add(
                FormSubmission(form_id=form.id, person_id=person_id, data=data)
            )
            await record_audit(
                scope,
                actor.id if actor else None,
                AuditAction.created,
                "form_submission",
                submission.id,
            )
            await self.uow.commit()

        logger.info(f"Form {form_id} received submission {submission.id}")
        return Return.ok(submission)
