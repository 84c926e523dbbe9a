"""
Organization Settings Use Cases
"""

from .organization_use_cases import (
    GetOrganizationSettingsUseCase,
    OrganizationSettings,
    UpdateOrganizationSettingsUseCase,
)

__all__ = [
    "GetOrganizationSettingsUseCase",
    "OrganizationSettings",
    "UpdateOrganizationSettingsUseCase",
]
