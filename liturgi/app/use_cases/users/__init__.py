"""
User Management Use Cases
"""

from .user_use_cases import ChangeRoleUseCase, ListUsersUseCase

__all__ = ["ChangeRoleUseCase", "ListUsersUseCase"]
