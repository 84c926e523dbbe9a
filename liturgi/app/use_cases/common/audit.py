"""
Audit Logging

Every mutation appends one AuditLog row inside the mutating transaction.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from sqlmodel import SQLModel

from liturgi.app.services.unit_of_work import TenantScope
from liturgi.domain.entities import AuditAction, AuditLog

# Never written to the audit trail
SENSITIVE_FIELDS = {
    "password_hash",
    "two_factor_secret",
    "two_factor_backup_codes",
    "token_hash",
    "code",
}


def snapshot(entity: SQLModel) -> Dict[str, Any]:
    return entity.model_dump(mode="json", exclude=SENSITIVE_FIELDS)


async def record_audit(
    scope: TenantScope,
    actor_id: Optional[UUID],
    action: AuditAction,
    entity: str,
    entity_id: Optional[UUID],
    old: Optional[Dict[str, Any]] = None,
    new: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    diff: Dict[str, Any] = {}
    if old is not None:
        diff["old"] = old
    if new is not None:
        diff["new"] = new

    return await scope.audit_logs.add(
        AuditLog(
            user_id=actor_id,
            action=action,
            entity=entity,
            entity_id=entity_id,
            diff=diff or None,
        )
    )
