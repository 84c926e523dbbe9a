"""
People Directory Routes

Every route resolves the caller, checks the permission, then validates the
payload before a use case touches the database.
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status
from pydantic import BaseModel, EmailStr, Field

from liturgi.api.error import ClientError, unwrap
from liturgi.api.utils.schemas import dump, dump_all, non_nullable
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.people import (
    AssignTagUseCase,
    BulkOperation,
    BulkPeopleUseCase,
    CreateEmergencyContactUseCase,
    CreatePersonAddressUseCase,
    CreatePersonEmailUseCase,
    CreatePersonNoteUseCase,
    CreatePersonPhoneUseCase,
    CreatePersonUseCase,
    DeleteEmergencyContactUseCase,
    DeletePersonAddressUseCase,
    DeletePersonEmailUseCase,
    DeletePersonNoteUseCase,
    DeletePersonPhoneUseCase,
    DeletePersonUseCase,
    ExportPeopleUseCase,
    GetPersonUseCase,
    ImportPeopleUseCase,
    ListPeopleUseCase,
    MergePeopleUseCase,
    SetCustomFieldValueUseCase,
    UnassignTagUseCase,
    UpdatePersonUseCase,
)
from liturgi.depends import get_unit_of_work, require_permission
from liturgi.domain.entities import HouseholdRelation, PersonStatus, User
from liturgi.domain.rbac import Permission
from liturgi.libs.result import Error

router = APIRouter(prefix="/people", tags=["People"])

read_people = require_permission(Permission.people_read)
write_people = require_permission(Permission.people_write)
delete_people = require_permission(Permission.people_delete)


class CreatePersonRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    middle_name: Optional[str] = Field(default=None, max_length=100)
    nickname: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    birth_date: Optional[date] = None
    anniversary: Optional[date] = None
    gender: Optional[str] = Field(default=None, max_length=20)
    photo_url: Optional[str] = Field(default=None, max_length=500)
    household_id: Optional[UUID] = None
    household_relation: Optional[HouseholdRelation] = None
    status: PersonStatus = PersonStatus.active
    notes: Optional[str] = None


class UpdatePersonRequest(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    middle_name: Optional[str] = Field(default=None, max_length=100)
    nickname: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    birth_date: Optional[date] = None
    anniversary: Optional[date] = None
    gender: Optional[str] = Field(default=None, max_length=20)
    photo_url: Optional[str] = Field(default=None, max_length=500)
    household_id: Optional[UUID] = None
    household_relation: Optional[HouseholdRelation] = None
    status: Optional[PersonStatus] = None
    notes: Optional[str] = None

    _required = non_nullable("first_name", "last_name", "status")


@router.get("")
async def list_people(
    search: Optional[str] = Query(None, max_length=100),
    status: Optional[PersonStatus] = Query(None),
    tag_id: Optional[UUID] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    actor: User = Depends(read_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    people, total = unwrap(
        await ListPeopleUseCase(uow).execute(
            actor, search=search, status=status, tag_id=tag_id, limit=limit, offset=offset
        )
    )
    return {"people": dump_all(people), "total": total}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_person(
    request: CreatePersonRequest,
    actor: User = Depends(write_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Person

    Raises:
        - 403: PLAN_LIMIT_REACHED when the organization is at its people limit
    """
    person = unwrap(await CreatePersonUseCase(uow).execute(actor, request.model_dump()))
    return {"person": dump(person)}


@router.get("/export")
async def export_people(
    actor: User = Depends(read_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    filename, content = unwrap(await ExportPeopleUseCase(uow).execute(actor))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import")
async def import_people(
    file: UploadFile = File(...),
    actor: User = Depends(write_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Import People from CSV

    Rows failing validation are reported and skipped; the rest are imported.
    """
    raw = await file.read()
    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ClientError(Error("VALIDATION_FAILED", "CSV file must be UTF-8 encoded"))

    summary = unwrap(await ImportPeopleUseCase(uow).execute(actor, content))
    return summary.model_dump(mode="json")


class MergePeopleRequest(BaseModel):
    source_id: UUID
    target_id: UUID


@router.post("/merge")
async def merge_people(
    request: MergePeopleRequest,
    actor: User = Depends(write_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Merge source into target; source is deleted"""
    person = unwrap(
        await MergePeopleUseCase(uow).execute(actor, request.source_id, request.target_id)
    )
    return {"person": dump(person)}


class BulkUpdateFields(BaseModel):
    status: Optional[PersonStatus] = None
    household_id: Optional[UUID] = None


class BulkPeopleRequest(BaseModel):
    operation: BulkOperation
    person_ids: List[UUID] = Field(..., min_length=1, max_length=500)
    changes: Optional[BulkUpdateFields] = None
    tag_id: Optional[UUID] = None


@router.post("/bulk")
async def bulk_people(
    request: BulkPeopleRequest,
    actor: User = Depends(write_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Bulk Actions

    update sets the given fields, tag and untag add or remove tag_id, delete
    removes the people. All or nothing: one unknown id fails the whole call.

    Raises:
        - 400: VALIDATION_FAILED
        - 403: PERMISSION_DENIED for delete without people:delete
        - 404: NOT_FOUND for unknown people or tag
    """
    changes = request.changes.model_dump(exclude_none=True) if request.changes else None
    affected = unwrap(
        await BulkPeopleUseCase(uow).execute(
            actor, request.operation, request.person_ids, changes=changes, tag_id=request.tag_id
        )
    )
    return {"affected": affected}


@router.get("/{person_id}")
async def get_person(
    person_id: UUID,
    actor: User = Depends(read_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    person = unwrap(await GetPersonUseCase(uow).execute(actor, person_id))
    return {"person": person}


@router.patch("/{person_id}")
async def update_person(
    person_id: UUID,
    request: UpdatePersonRequest,
    actor: User = Depends(write_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    person = unwrap(await UpdatePersonUseCase(uow).execute(actor, person_id, changes))
    return {"person": dump(person)}


@router.delete("/{person_id}")
async def delete_person(
    person_id: UUID,
    actor: User = Depends(delete_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await DeletePersonUseCase(uow).execute(actor, person_id))
    return {"success": True}


# ============================================================================
# Contact rows
# ============================================================================


class PhoneRequest(BaseModel):
    number: str = Field(..., min_length=1, max_length=50)
    type: str = Field(default="mobile", max_length=20)
    is_primary: bool = False


class EmailRequest(BaseModel):
    address: EmailStr
    type: str = Field(default="home", max_length=20)
    is_primary: bool = False


class AddressRequest(BaseModel):
    street: str = Field(..., min_length=1, max_length=200)
    street2: Optional[str] = Field(default=None, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    postal_code: Optional[str] = Field(default=None, max_length=20)
    country: Optional[str] = Field(default=None, max_length=100)
    type: str = Field(default="home", max_length=20)
    is_primary: bool = False


class EmergencyContactRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    relationship: Optional[str] = Field(default=None, max_length=100)
    phone: str = Field(..., min_length=1, max_length=50)
    email: Optional[EmailStr] = None


class NoteRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=10000)
    is_private: bool = False


def _contact_routes(path: str, key: str, request_model, create_use_case, delete_use_case):
    """Register POST /{person_id}/{path} and DELETE /{person_id}/{path}/{row_id}"""

    async def create(
        person_id: UUID,
        request: request_model,
        actor: User = Depends(write_people),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ):
        data = {**request.model_dump(), "person_id": person_id}
        row = unwrap(await create_use_case(uow).execute(actor, data))
        return {key: dump(row)}

    async def delete(
        person_id: UUID,
        row_id: UUID,
        actor: User = Depends(write_people),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ):
        unwrap(await delete_use_case(uow).execute(actor, row_id, person_id=person_id))
        return {"success": True}

    router.add_api_route(
        f"/{{person_id}}/{path}",
        create,
        methods=["POST"],
        status_code=status.HTTP_201_CREATED,
        name=f"create_{key}",
    )
    router.add_api_route(
        f"/{{person_id}}/{path}/{{row_id}}", delete, methods=["DELETE"], name=f"delete_{key}"
    )


_contact_routes("phones", "phone", PhoneRequest, CreatePersonPhoneUseCase, DeletePersonPhoneUseCase)
_contact_routes("emails", "email", EmailRequest, CreatePersonEmailUseCase, DeletePersonEmailUseCase)
_contact_routes(
    "addresses", "address", AddressRequest, CreatePersonAddressUseCase, DeletePersonAddressUseCase
)
_contact_routes(
    "emergency-contacts",
    "emergency_contact",
    EmergencyContactRequest,
    CreateEmergencyContactUseCase,
    DeleteEmergencyContactUseCase,
)
_contact_routes("notes", "note", NoteRequest, CreatePersonNoteUseCase, DeletePersonNoteUseCase)


# ============================================================================
# Tags and custom field values
# ============================================================================


class AssignTagRequest(BaseModel):
    tag_id: UUID


@router.post("/{person_id}/tags", status_code=status.HTTP_201_CREATED)
async def assign_tag(
    person_id: UUID,
    request: AssignTagRequest,
    actor: User = Depends(write_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Raises:
        - 400: CONFLICT when the tag is already assigned
        - 404: NOT_FOUND for an unknown person or tag
    """
    data = {"person_id": person_id, "tag_id": request.tag_id}
    assignment = unwrap(await AssignTagUseCase(uow).execute(actor, data))
    return {"person_tag": dump(assignment)}


@router.delete("/{person_id}/tags/{tag_id}")
async def unassign_tag(
    person_id: UUID,
    tag_id: UUID,
    actor: User = Depends(write_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await UnassignTagUseCase(uow).execute(actor, person_id, tag_id))
    return {"success": True}


class CustomFieldValueRequest(BaseModel):
    value: Optional[str] = Field(default=None, max_length=5000)


@router.put("/{person_id}/custom-fields/{field_id}")
async def set_custom_field_value(
    person_id: UUID,
    field_id: UUID,
    request: CustomFieldValueRequest,
    actor: User = Depends(write_people),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    value = unwrap(
        await SetCustomFieldValueUseCase(uow).execute(actor, person_id, field_id, request.value)
    )
    return {"custom_field_value": dump(value)}
