from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from liturgi.api.error import unwrap
from liturgi.app.services.mailer import Mailer
from liturgi.app.services.rate_limiter import RateLimiter
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.auth import (
    AuthResult,
    ClientMeta,
    GetMeUseCase,
    LoginUseCase,
    LogoutUseCase,
    MeResponse,
    MessageResponse,
    RegisterCommand,
    RegisterUseCase,
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
    SendVerificationEmailUseCase,
    SessionContext,
    VerifyEmailUseCase,
)
from liturgi.depends import (
    get_client_meta,
    get_mailer,
    get_rate_limiter,
    get_session_context,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def set_session_cookie(response: Response, auth: AuthResult) -> None:
    response.set_cookie(
        key=ApplicationConfig.SESSION_COOKIE_NAME,
        value=auth.session_token,
        max_age=ApplicationConfig.SESSION_TTL_DAYS * 24 * 60 * 60,
        path="/",
        httponly=True,
        secure=ApplicationConfig.COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=ApplicationConfig.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=ApplicationConfig.COOKIE_SECURE,
        samesite="lax",
    )


def auth_body(auth: AuthResult) -> dict:
    """Session token travels only in the cookie"""
    return auth.model_dump(mode="json", include={"user", "organization", "expires_at"})


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    org_name and subdomain are used only when bootstrapping the first
    organization; every later registration needs invite_code.
    """

    email: EmailStr
    password: str = Field(..., min_length=1)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    org_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    subdomain: Optional[str] = Field(default=None, min_length=1, max_length=63)
    invite_code: Optional[str] = Field(default=None, max_length=64)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    response: Response,
    client: ClientMeta = Depends(get_client_meta),
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
):
    """
    Register

    Creates the first organization and its admin, or redeems an invite.
    Sets the session cookie on success.

    Raises:
        - 400: VALIDATION_FAILED, REGISTRATION_CLOSED, INVALID_INVITE,
          INVITE_EXPIRED, INVITE_ALREADY_USED, CONFLICT
        - 429: RATE_LIMITED
    """
    command = RegisterCommand(**request.model_dump())
    auth = unwrap(await RegisterUseCase(uow, rate_limiter).execute(command, client))
    set_session_cookie(response, auth)
    return auth_body(auth)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    two_factor_code: Optional[str] = Field(default=None, max_length=32)


@router.post("/login", status_code=status.HTTP_200_OK)
async def login(
    request: LoginRequest,
    http_request: Request,
    response: Response,
    client: ClientMeta = Depends(get_client_meta),
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
):
    """
    Login

    Opens a new session. The session behind a cookie the client still holds,
    expired or not, is deleted.

    Raises:
        - 401: INVALID_CREDENTIALS, TWO_FACTOR_REQUIRED
        - 403: ACCOUNT_INACTIVE
        - 429: RATE_LIMITED
    """
    use_case = LoginUseCase(uow, rate_limiter)
    auth = unwrap(
        await use_case.execute(
            request.email,
            request.password,
            client,
            request.two_factor_code,
            previous_token=http_request.cookies.get(ApplicationConfig.SESSION_COOKIE_NAME),
        )
    )
    set_session_cookie(response, auth)
    return auth_body(auth)


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(
    request: Request,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    token = request.cookies.get(ApplicationConfig.SESSION_COOKIE_NAME)
    unwrap(await LogoutUseCase(uow).execute(token))
    clear_session_cookie(response)
    return {"success": True}


@router.get("/me", status_code=status.HTTP_200_OK, response_model=MeResponse)
async def me(
    context: SessionContext = Depends(get_session_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return unwrap(await GetMeUseCase(uow).execute(context.user))


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


@router.post("/forgot-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    client: ClientMeta = Depends(get_client_meta),
    uow: UnitOfWork = Depends(get_unit_of_work),
    mailer: Mailer = Depends(get_mailer),
):
    """Always answers with the same message, whether or not the email exists"""
    return unwrap(await RequestPasswordResetUseCase(uow, mailer).execute(request.email, client))


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str


@router.post("/reset-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Reset Password

    Sets the new password, consumes the token and signs out every session.

    Raises:
        - 400: VALIDATION_FAILED, INVALID_TOKEN, TOKEN_EXPIRED, TOKEN_ALREADY_USED
    """
    return unwrap(await ResetPasswordUseCase(uow).execute(request.token, request.password))


class VerifyEmailRequest(BaseModel):
    token: str = Field(..., min_length=1)


@router.post("/verify-email", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def verify_email(
    request: VerifyEmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return unwrap(await VerifyEmailUseCase(uow).execute(request.token))


@router.post(
    "/verify-email/send", status_code=status.HTTP_200_OK, response_model=MessageResponse
)
async def send_verification_email(
    context: SessionContext = Depends(get_session_context),
    uow: UnitOfWork = Depends(get_unit_of_work),
    mailer: Mailer = Depends(get_mailer),
):
    return unwrap(await SendVerificationEmailUseCase(uow, mailer).execute(context.user))
