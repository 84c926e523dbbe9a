"""
Invite Use Cases
"""

from .dtos import InviteDTO, PublicInviteDTO
from .invite_use_cases import (
    CreateInviteUseCase,
    GetInviteByCodeUseCase,
    ListInvitesUseCase,
    RevokeInviteUseCase,
)

__all__ = [
    "InviteDTO",
    "PublicInviteDTO",
    "CreateInviteUseCase",
    "GetInviteByCodeUseCase",
    "ListInvitesUseCase",
    "RevokeInviteUseCase",
]
