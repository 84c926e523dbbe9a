from fastapi import APIRouter, Depends

from liturgi.api.error import unwrap
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.dashboard import GetDashboardStatsUseCase
from liturgi.depends import get_current_user, get_unit_of_work
from liturgi.domain.entities import User

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats")
async def dashboard_stats(
    actor: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Any signed-in user; recent_activity is empty without org:manage"""
    return unwrap(await GetDashboardStatsUseCase(uow).execute(actor))
