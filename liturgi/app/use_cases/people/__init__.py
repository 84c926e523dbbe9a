"""
People Directory Use Cases
"""

from .bulk_people_use_case import BulkOperation, BulkPeopleUseCase
from .contact_use_cases import (
    CreateEmergencyContactUseCase,
    CreatePersonAddressUseCase,
    CreatePersonEmailUseCase,
    CreatePersonNoteUseCase,
    CreatePersonPhoneUseCase,
    DeleteEmergencyContactUseCase,
    DeletePersonAddressUseCase,
    DeletePersonEmailUseCase,
    DeletePersonNoteUseCase,
    DeletePersonPhoneUseCase,
)
from .custom_field_value_use_case import SetCustomFieldValueUseCase
from .export_people_use_case import ExportPeopleUseCase
from .import_people_use_case import ImportPeopleUseCase, ImportSummary
from .merge_people_use_case import MergePeopleUseCase
from .person_use_cases import (
    CreatePersonUseCase,
    DeletePersonUseCase,
    GetPersonUseCase,
    ListPeopleUseCase,
    UpdatePersonUseCase,
)
from .tag_assignment_use_cases import AssignTagUseCase, UnassignTagUseCase

__all__ = [
    "BulkOperation",
    "BulkPeopleUseCase",
    "CreateEmergencyContactUseCase",
    "CreatePersonAddressUseCase",
    "CreatePersonEmailUseCase",
    "CreatePersonNoteUseCase",
    "CreatePersonPhoneUseCase",
    "DeleteEmergencyContactUseCase",
    "DeletePersonAddressUseCase",
    "DeletePersonEmailUseCase",
    "DeletePersonNoteUseCase",
    "DeletePersonPhoneUseCase",
    "SetCustomFieldValueUseCase",
    "ExportPeopleUseCase",
    "ImportPeopleUseCase",
    "ImportSummary",
    "MergePeopleUseCase",
    "CreatePersonUseCase",
    "DeletePersonUseCase",
    "GetPersonUseCase",
    "ListPeopleUseCase",
    "UpdatePersonUseCase",
    "AssignTagUseCase",
    "UnassignTagUseCase",
]
