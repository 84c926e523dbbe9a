from typing import Optional

from fastapi import APIRouter, Depends, Query

from liturgi.api.error import unwrap
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.audit import GetAuditLogsUseCase
from liturgi.depends import get_unit_of_work, require_permission
from liturgi.domain.entities import User
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/audit-logs", tags=["Audit"])


@router.get("")
async def get_audit_logs(
    limit: int = Query(50, ge=1, le=100),
    cursor: Optional[str] = Query(None),
    entity: Optional[str] = Query(None, max_length=64),
    actor: User = Depends(require_permission(Permission.org_manage)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Audit Logs

    Newest first. Pass next_cursor from a page to fetch the following page.
    """
    page = unwrap(
        await GetAuditLogsUseCase(uow).execute(actor, limit=limit, cursor=cursor, entity=entity)
    )
    return page.model_dump(mode="json")
