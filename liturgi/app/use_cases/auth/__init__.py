"""
Authentication Use Cases

All authentication-related business logic.
"""

from .authenticate_session_use_case import AuthenticateSessionUseCase
from .dtos import (
    AuthResult,
    ClientMeta,
    MessageResponse,
    OrganizationDTO,
    RegisterCommand,
    SessionContext,
    SessionDTO,
    UserDTO,
)
from .get_me_use_case import GetMeUseCase, MeResponse
from .login_use_case import LoginUseCase
from .logout_use_case import LogoutUseCase
from .register_use_case import RegisterUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .send_verification_email_use_case import SendVerificationEmailUseCase
from .sweep_sessions_use_case import SweepExpiredSessionsUseCase
from .verify_email_use_case import VerifyEmailUseCase

__all__ = [
    "AuthenticateSessionUseCase",
    "AuthResult",
    "ClientMeta",
    "MessageResponse",
    "OrganizationDTO",
    "RegisterCommand",
    "SessionContext",
    "SessionDTO",
    "UserDTO",
    "GetMeUseCase",
    "MeResponse",
    "LoginUseCase",
    "LogoutUseCase",
    "RegisterUseCase",
    "RequestPasswordResetUseCase",
    "ResetPasswordUseCase",
    "SendVerificationEmailUseCase",
    "SweepExpiredSessionsUseCase",
    "VerifyEmailUseCase",
]
