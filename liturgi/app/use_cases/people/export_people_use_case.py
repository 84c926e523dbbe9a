import csv
import io
import json
from collections import defaultdict
from typing import Tuple

from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.domain.base import utcnow
from liturgi.domain.entities import PersonStatus, User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Result, Return

from .csv_format import CSV_COLUMNS


class ExportPeopleUseCase:
    """Every person of the organization as CSV, in the import format"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor: User) -> Result[Tuple[str, str]]:
        """
        Returns:
            Result with (filename, csv content)
        """
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            people = await scope.people.list(order_by="last_name")
            tag_names = {tag.id: tag.name for tag in await scope.tags.list()}
            person_tags = defaultdict(list)
            for assignment in await scope.person_tags.list():
                person_tags[assignment.person_id].append(tag_names[assignment.tag_id])

        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(CSV_COLUMNS)
        for person in people:
            writer.writerow(
                [
                    person.first_name,
                    person.last_name,
                    person.email or "",
                    person.phone or "",
                    json.dumps(sorted(person_tags[person.id])),
                    person.notes or "",
                    PersonStatus(person.status).value,
                ]
            )

        filename = f"people-{utcnow().date().isoformat()}.csv"
        return Return.ok((filename, buffer.getvalue()))
