from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from liturgi.api.error import unwrap
from liturgi.api.utils.schemas import dump, dump_all
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.attendance import ListAttendanceUseCase, RecordAttendanceUseCase
from liturgi.depends import get_unit_of_work, require_permission
from liturgi.domain.entities import User
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/attendance", tags=["Attendance"])


class RecordAttendanceRequest(BaseModel):
    person_id: UUID
    service_plan_id: Optional[UUID] = None
    group_id: Optional[UUID] = None
    attendance_date: date
    present: bool = True
    notes: Optional[str] = Field(default=None, max_length=2000)


@router.get("")
async def list_attendance(
    person_id: Optional[UUID] = None,
    service_plan_id: Optional[UUID] = None,
    group_id: Optional[UUID] = None,
    actor: User = Depends(require_permission(Permission.people_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    filters = {
        name: value
        for name, value in (
            ("person_id", person_id),
            ("service_plan_id", service_plan_id),
            ("group_id", group_id),
        )
        if value is not None
    }
    records = unwrap(await ListAttendanceUseCase(uow).execute(actor, **filters))
    return {"attendance": dump_all(records)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def record_attendance(
    request: RecordAttendanceRequest,
    actor: User = Depends(require_permission(Permission.people_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    record = unwrap(await RecordAttendanceUseCase(uow).execute(actor, request.model_dump()))
    return {"attendance": dump(record)}
