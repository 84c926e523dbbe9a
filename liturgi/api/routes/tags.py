from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from liturgi.api.error import unwrap
from liturgi.api.utils.schemas import dump, dump_all, non_nullable
from liturgi.app.services.unit_of_work import UnitOfWork
from liturgi.app.use_cases.tags import (
    CreateTagCategoryUseCase,
    CreateTagUseCase,
    DeleteTagCategoryUseCase,
    DeleteTagUseCase,
    ListTagCategoriesUseCase,
    ListTagsUseCase,
    UpdateTagCategoryUseCase,
    UpdateTagUseCase,
)
from liturgi.depends import get_unit_of_work, require_permission
from liturgi.domain.entities import User
from liturgi.domain.rbac import Permission

router = APIRouter(prefix="/tags", tags=["Tags"])


class CreateTagRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    category_id: Optional[UUID] = None


class UpdateTagRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    category_id: Optional[UUID] = None

    _required = non_nullable("name")


class CreateTagCategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    description: Optional[str] = Field(default=None, max_length=2000)


class UpdateTagCategoryRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    description: Optional[str] = Field(default=None, max_length=2000)

    _required = non_nullable("name")


# ============================================================================
# Categories
# ============================================================================


@router.get("/categories")
async def list_tag_categories(
    actor: User = Depends(require_permission(Permission.people_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    categories = unwrap(await ListTagCategoriesUseCase(uow).execute(actor))
    return {"categories": categories}


@router.post("/categories", status_code=status.HTTP_201_CREATED)
async def create_tag_category(
    request: CreateTagCategoryRequest,
    actor: User = Depends(require_permission(Permission.people_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    category = unwrap(await CreateTagCategoryUseCase(uow).execute(actor, request.model_dump()))
    return {"category": dump(category)}


@router.patch("/categories/{category_id}")
async def update_tag_category(
    category_id: UUID,
    request: UpdateTagCategoryRequest,
    actor: User = Depends(require_permission(Permission.people_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    category = unwrap(await UpdateTagCategoryUseCase(uow).execute(actor, category_id, changes))
    return {"category": dump(category)}


@router.delete("/categories/{category_id}")
async def delete_tag_category(
    category_id: UUID,
    actor: User = Depends(require_permission(Permission.people_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Tags in the category are kept without a category"""
    unwrap(await DeleteTagCategoryUseCase(uow).execute(actor, category_id))
    return {"success": True}


# ============================================================================
# Tags
# ============================================================================


@router.get("")
async def list_tags(
    category_id: Optional[UUID] = None,
    actor: User = Depends(require_permission(Permission.people_read)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    filters = {"category_id": category_id} if category_id else {}
    tags = unwrap(await ListTagsUseCase(uow).execute(actor, **filters))
    return {"tags": dump_all(tags)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tag(
    request: CreateTagRequest,
    actor: User = Depends(require_permission(Permission.people_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Raises:
        - 400: CONFLICT when the name is taken
        - 404: NOT_FOUND for an unknown category
    """
    tag = unwrap(await CreateTagUseCase(uow).execute(actor, request.model_dump()))
    return {"tag": dump(tag)}


@router.patch("/{tag_id}")
async def update_tag(
    tag_id: UUID,
    request: UpdateTagRequest,
    actor: User = Depends(require_permission(Permission.people_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    changes = request.model_dump(exclude_unset=True)
    tag = unwrap(await UpdateTagUseCase(uow).execute(actor, tag_id, changes))
    return {"tag": dump(tag)}


@router.delete("/{tag_id}")
async def delete_tag(
    tag_id: UUID,
    actor: User = Depends(require_permission(Permission.people_write)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await DeleteTagUseCase(uow).execute(actor, tag_id))
    return {"success": True}
