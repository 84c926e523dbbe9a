"""
Import People Use Case

Bulk-creates people from CSV. Invalid rows are reported, not fatal.
"""

import csv
import io
import logging
from typing import Any, Dict, List

from pydantic import BaseModel, ValidationError

from liturgi.app.services.unit_of_work import TenantScope, UnitOfWork
from liturgi.app.use_cases.common import check_plan_limit, record_audit, snapshot
from liturgi.domain.entities import AuditAction, Person, PersonTag, Tag, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Error, Result, Return

from .csv_format import REQUIRED_COLUMNS, PersonCsvRow

logger = logging.getLogger(__name__)


class ImportSummary(BaseModel):
    imported: int
    errored: int
    errors: List[Dict[str, Any]]


def parse_rows(content: str):
    """
    Returns:
        (valid rows, per-row errors). Row numbers count the header as row 1.
    """
    reader = csv.DictReader(io.StringIO(content))
    valid: List[PersonCsvRow] = []
    errors: List[Dict[str, Any]] = []

    for row_number, raw in enumerate(reader, start=2):
        try:
            valid.append(PersonCsvRow.model_validate(raw))
        except ValidationError as exc:
            errors.append(
                {
                    "row": row_number,
                    "errors": [
                        {
                            "field": ".".join(str(p) for p in err["loc"]),
                            "message": err["msg"],
                        }
                        for err in exc.errors()
                    ],
                }
            )
    return reader.fieldnames or [], valid, errors


async def _tags_by_name(scope: TenantScope, names) -> Dict[str, Tag]:
    """Existing tags by name; missing ones are created"""
    tags = {tag.name: tag for tag in await scope.tags.list()}
    for name in names:
        if name not in tags:
            tags[name] = await scope.tags.add(Tag(name=name))
    return tags


class ImportPeopleUseCase:
    """
    Business Rules:
    - Header must include firstName and lastName
    - Each row is validated on its own; failures are returned with row numbers
    - The whole batch of valid rows is checked against the people plan limit
      and refused as a unit when it does not fit
    - Valid rows are inserted in one transaction with one audit entry each
    - Unknown tag names are created
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User, content: str) -> Result[ImportSummary]:
        fieldnames, rows, errors = parse_rows(content)

        missing = REQUIRED_COLUMNS - set(fieldnames)
        if missing:
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    f"CSV is missing required columns: {', '.join(sorted(missing))}",
                )
            )

        if not rows:
            return Return.ok(ImportSummary(imported=0, errored=len(errors), errors=errors))

        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))

            error = await check_plan_limit(self.uow, scope, "people", adding=len(rows))
            if error:
                return Return.err(error)

            tags = await _tags_by_name(scope, {name for row in rows for name in row.tags})

            for row in rows:
                person = await scope.people.add(
                    Person(
                        first_name=row.first_name,
                        last_name=row.last_name,
                        email=str(row.email) if row.email else None,
                        phone=row.phone,
                        notes=row.notes,
                        status=row.status,
                    )
                )
                for name in dict.fromkeys(row.tags):
                    await scope.person_tags.add(
                        PersonTag(person_id=person.id, tag_id=tags[name].id)
                    )
                await record_audit(
                    scope, actor.id, AuditAction.imported, "person", person.id,
                    new=snapshot(person),
                )

            await self.uow.commit()

        logger.info(f"Imported {len(rows)} people, {len(errors)} rows rejected")
        return Return.ok(
            ImportSummary(imported=len(rows), errored=len(errors), errors=errors)
        )
