"""
Get Audit Logs Use Case

Cursor-paginated, newest first.
"""

import base64
import binascii
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.domain.entities import User
from liturgi.domain.rbac import get_org_filter
from liturgi.libs.result import Result, Return


class AuditLogPage(BaseModel):
    logs: List[Dict[str, Any]]
    next_cursor: Optional[str] = None


def encode_cursor(created_at: datetime) -> str:
    return base64.b64encode(created_at.isoformat().encode("utf-8")).decode("utf-8")


def decode_cursor(cursor: Optional[str]) -> Optional[datetime]:
    """Cursor format: base64-encoded ISO timestamp of created_at"""
    if not cursor:
        return None
    try:
        return datetime.fromisoformat(base64.b64decode(cursor).decode("utf-8"))
    except (ValueError, TypeError, binascii.Error):
        # Invalid cursor, start from the newest entry
        return None


class GetAuditLogsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        actor: User,
        limit: int = 50,
        cursor: Optional[str] = None,
        entity: Optional[str] = None,
    ) -> Result[AuditLogPage]:
        async with self.uow:
            scope = self.uow.scoped(**get_org_filter(actor))
            logs, has_more = await scope.audit_logs.get_page(
                limit=limit, before=decode_cursor(cursor), entity=entity
            )

        next_cursor = encode_cursor(logs[-1].created_at) if has_more and logs else None
        return Return.ok(
            AuditLogPage(
                logs=[log.model_dump(mode="json") for log in logs],
                next_cursor=next_cursor,
            )
        )
