"""
Form Use Cases
"""

from .form_use_cases import (
    CreateFormUseCase,
    DeleteFormUseCase,
    GetFormUseCase,
    ListFormsUseCase,
    ListFormSubmissionsUseCase,
    UpdateFormUseCase,
)
from .submit_form_use_case import SubmitFormUseCase, validate_submission

__all__ = [
    "CreateFormUseCase",
    "DeleteFormUseCase",
    "GetFormUseCase",
    "ListFormsUseCase",
    "ListFormSubmissionsUseCase",
    "UpdateFormUseCase",
    "SubmitFormUseCase",
    "validate_submission",
]
