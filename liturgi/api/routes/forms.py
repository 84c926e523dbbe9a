from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from liturgi.api.error import unwrap
from liturgi.api.utils.schemas import dump, dump_all, non_nullable
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.forms import (
    CreateFormUseCase,
    DeleteFormUseCase,
    GetFormUseCase,
    ListFormsUseCase,
    ListFormSubmissionsUseCase,
    SubmitFormUseCase,
    UpdateFormUseCase,
)
from liturgi.depends import get_optional_user, get_unit_of_work, require_permission
from liturgi.domain.entities import User
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/forms", tags=["Forms"])


class FormFieldDefinition(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    label: Optional[str] = Field(default=None, max_length=200)
    type: str = Field(default="text", max_length=30)
    required: bool = False
    options: Optional[List[str]] = None


class CreateFormRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    fields: List[FormFieldDefinition] = Field(default_factory=list)
    is_public: bool = False
    require_auth: bool = False
    allow_anonymous: bool = True
    is_active: bool = True


class UpdateFormRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    fields: Optional[List[FormFieldDefinition]] = None
    is_public: Optional[bool] = None
    require_auth: Optional[bool] = None
    allow_anonymous: Optional[bool] = None
    is_active: Optional[bool] = None

    _required = non_nullable(
        "title", "fields", "is_public", "require_auth", "allow_anonymous", "is_active"
    )


@router.get("")
async def list_forms(
    actor: User = Depends(require_permission(Permission.people_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    forms = unwrap(await ListFormsUseCase(uow).execute(actor))
    return {"forms": dump_all(forms)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_form(
    request: CreateFormRequest,
    actor: User = Depends(require_permission(Permission.people_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    form = unwrap(
        await CreateFormUseCase(uow).execute(actor, request.model_dump(mode="json"))
    )
    return {"form": dump(form)}


@router.get("/{form_id}")
async def get_form(
    form_id: UUID,
    actor: User = Depends(require_permission(Permission.people_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    form = unwrap(await GetFormUseCase(uow).execute(actor, form_id))
    return {"form": dump(form)}


@router.patch("/{form_id}")
async def update_form(
    form_id: UUID,
    request: UpdateFormRequest,
    actor: User = Depends(require_permission(Permission.people_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(mode="json", exclude_unset=True)
    form = unwrap(await UpdateFormUseCase(uow).execute(actor, form_id, changes))
    return {"form": dump(form)}


@router.delete("/{form_id}")
async def delete_form(
    form_id: UUID,
    actor: User = Depends(require_permission(Permission.people_delete)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await DeleteFormUseCase(uow).execute(actor, form_id))
    return {"success": True}


@router.get("/{form_id}/submissions")
async def list_submissions(
    form_id: UUID,
    actor: User = Depends(require_permission(Permission.people_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    submissions = unwrap(await ListFormSubmissionsUseCase(uow).execute(actor, form_id))
    return {"submissions": dump_all(submissions)}


class SubmitFormRequest(BaseModel):
    data: Dict[str, Any]
    person_id: Optional[UUID] = None


@router.post("/{form_id}/submissions", status_code=status.HTTP_201_CREATED)
async def submit_form(
    form_id: UUID,
    request: SubmitFormRequest,
    actor: Optional[User] = Depends(get_optional_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Submit Form

    Open to anonymous callers when the form is public, active and does not
    require auth; otherwise the caller must be signed in to the form's
    organization.

    Raises:
        - 400: VALIDATION_FAILED when a required field is empty
        - 404: NOT_FOUND for unknown, inactive or non-public forms
    """
    submission = unwrap(
        await SubmitFormUseCase(uow).execute(
            form_id, request.data, actor=actor, person_id=request.person_id
        )
    )
    return {"submission": dump(submission)}
