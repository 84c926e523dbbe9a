"""
Account Use Cases

Self-service operations on the caller's own account.
"""

from .profile_use_cases import (
    DeactivateAccountUseCase,
    DeleteAccountUseCase,
    UpdateProfileUseCase,
)
from .session_use_cases import (
    ListLoginHistoryUseCase,
    ListSessionsUseCase,
    RevokeAllSessionsUseCase,
    RevokeSessionUseCase,
)
from .two_factor_use_cases import (
    DisableTwoFactorUseCase,
    EnableTwoFactorUseCase,
    SetupTwoFactorUseCase,
)

__all__ = [
    "DeactivateAccountUseCase",
    "DeleteAccountUseCase",
    "UpdateProfileUseCase",
    "ListLoginHistoryUseCase",
    "ListSessionsUseCase",
    "RevokeAllSessionsUseCase",
    "RevokeSessionUseCase",
    "DisableTwoFactorUseCase",
    "EnableTwoFactorUseCase",
    "SetupTwoFactorUseCase",
]
