"""
Account Routes

Self-service endpoints acting on the signed-in user.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field

from liturgi.api.error import unwrap
from liturgi.api.routes.auth import clear_session_cookie
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.account import (
    DeactivateAccountUseCase,
    DeleteAccountUseCase,
    DisableTwoFactorUseCase,
    EnableTwoFactorUseCase,
    ListLoginHistoryUseCase,
    ListSessionsUseCase,
    RevokeAllSessionsUseCase,
    RevokeSessionUseCase,
    SetupTwoFactorUseCase,
    UpdateProfileUseCase,
)
from liturgi.app.use_cases.auth import SessionContext, SessionDTO, UserDTO
from liturgi.app.use_cases.auth.dtos import BackupCodesResponse, TwoFactorSetupResponse
from liturgi.depends import get_session_context, get_unit_of_work

router = APIRouter(prefix="/user", tags=["Account"])


# ============================================================================
# Two-factor authentication
# ============================================================================


@router.post("/2fa/setup", response_model=TwoFactorSetupResponse)
async def setup_two_factor(
    context: SessionContext = Depends(get_session_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return unwrap(await SetupTwoFactorUseCase(uow).execute(context.user))


class TwoFactorCodeRequest(BaseModel):
    code: str = Field(..., min_length=6, max_length=8)


@router.post("/2fa/verify", response_model=BackupCodesResponse)
async def verify_two_factor(
    request: TwoFactorCodeRequest,
    context: SessionContext = Depends(get_session_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Backup codes are returned only by this call"""
    return unwrap(await EnableTwoFactorUseCase(uow).execute(context.user, request.code))


class PasswordConfirmation(BaseModel):
    password: str = Field(..., min_length=1)


@router.post("/2fa/disable")
async def disable_two_factor(
    request: PasswordConfirmation,
    context: SessionContext = Depends(get_session_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await DisableTwoFactorUseCase(uow).execute(context.user, request.password))
    return {"success": True}


# ============================================================================
# Sessions
# ============================================================================


@router.get("/sessions")
async def list_sessions(
    context: SessionContext = Depends(get_session_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    sessions: List[SessionDTO] = unwrap(
        await ListSessionsUseCase(uow).execute(context.user, context.session.id)
    )
    return {"sessions": [s.model_dump(mode="json") for s in sessions]}


@router.delete("/sessions")
async def revoke_all_sessions(
    keepCurrent: bool = True,
    context: SessionContext = Depends(get_session_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    deleted = unwrap(
        await RevokeAllSessionsUseCase(uow).execute(
            context.user, context.session.id, keep_current=keepCurrent
        )
    )
    return {"revoked": deleted}


@router.delete("/sessions/{session_id}")
async def revoke_session(
    session_id: UUID,
    context: SessionContext = Depends(get_session_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await RevokeSessionUseCase(uow).execute(context.user, session_id))
    return {"success": True}


@router.get("/login-history")
async def login_history(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    context: SessionContext = Depends(get_session_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Sign-in attempts on this account, failed ones included, newest first"""
    entries, total = unwrap(
        await ListLoginHistoryUseCase(uow).execute(context.user, limit=limit, offset=offset)
    )
    return {
        "history": [
            entry.model_dump(
                mode="json",
                include={"id", "ip_address", "user_agent", "success", "fail_reason", "created_at"},
            )
            for entry in entries
        ],
        "total": total,
        "limit": limit,
        "offset": offset,
        "has_more": offset + len(entries) < total,
    }


# ============================================================================
# Profile and account lifecycle
# ============================================================================


@router.get("/profile")
async def get_profile(context: SessionContext = Depends(get_session_context)):
    return {"user": UserDTO.from_entity(context.user).model_dump(mode="json")}


class UpdateProfileRequest(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=50)


@router.patch("/profile")
async def update_profile(
    request: UpdateProfileRequest,
    context: SessionContext = Depends(get_session_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    user = unwrap(await UpdateProfileUseCase(uow).execute(context.user, changes))
    return {"user": user.model_dump(mode="json")}


@router.post("/account/deactivate")
async def deactivate_account(
    request: PasswordConfirmation,
    response: Response,
    context: SessionContext = Depends(get_session_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await DeactivateAccountUseCase(uow).execute(context.user, request.password))
    clear_session_cookie(response)
    return {"success": True}


class DeleteAccountRequest(BaseModel):
    password: str = Field(..., min_length=1)
    confirmation: str


@router.post("/account/delete", status_code=status.HTTP_200_OK)
async def delete_account(
    request: DeleteAccountRequest,
    response: Response,
    context: SessionContext = Depends(get_session_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Delete Account

    Anonymises the user and purges sessions and tokens. The row is kept until
    the retention date.

    Raises:
        - 400: VALIDATION_FAILED (confirmation is not "DELETE", last admin)
        - 401: INVALID_CREDENTIALS
    """
    unwrap(
        await DeleteAccountUseCase(uow).execute(
            context.user, request.password, request.confirmation
        )
    )
    clear_session_cookie(response)
    return {"success": True}
