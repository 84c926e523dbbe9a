"""
Admin API Routes - Maintenance Endpoints

Authentication is via Admin API Key, not the session cookie.
"""

from fastapi import APIRouter, Depends, status

from liturgi.api.error import unwrap
from liturgi.api.utils.admin_auth import verify_admin_api_key
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.auth import SweepExpiredSessionsUseCase
from liturgi.depends import get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/sessions/sweep",
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(verify_admin_api_key)],
)
async def sweep_sessions(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Sweep Expired Sessions

    Deletes every session past its expiry. Meant to be called by a scheduler.

    Requires: X-Admin-API-Key header
    """
    deleted = unwrap(await SweepExpiredSessionsUseCase(uow).execute())
    return {"deleted": deleted}
